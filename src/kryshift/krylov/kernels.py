"""Shift-recurrence kernels for multi-shift CG.

CG-M advances the solutions of all shifted systems

.. math::

    (A + \\sigma_i I) x_i = b, \\qquad i = 0, \\ldots, N_s - 1

from the scalars of a single unshifted CG run. The base run supplies
:math:`\\beta_{-1}, \\beta_0, \\alpha_0` (sign convention: :math:`\\beta_0 < 0`
is minus the usual CG step length, :math:`\\alpha_0` the usual direction
coefficient). For every shift the kernels then compute

.. math::

    \\zeta_1^\\sigma &= \\frac{\\zeta_0^\\sigma \\zeta_{-1}^\\sigma \\beta_{-1}}
        {\\beta_0 \\alpha_0 (\\zeta_{-1}^\\sigma - \\zeta_0^\\sigma)
         + \\zeta_{-1}^\\sigma \\beta_{-1} (1 - \\beta_0 \\sigma)} \\\\
    \\beta_0^\\sigma &= \\beta_0 \\, \\zeta_1^\\sigma / \\zeta_0^\\sigma \\\\
    \\alpha_0^\\sigma &= \\frac{\\alpha_0}{\\beta_0} \\, \\beta_0^\\sigma
        \\, \\zeta_1^\\sigma / \\zeta_0^\\sigma \\\\
    x^\\sigma &\\leftarrow x^\\sigma - \\beta_0^\\sigma p^\\sigma \\\\
    p^\\sigma &\\leftarrow \\zeta_1^\\sigma r + \\alpha_0^\\sigma p^\\sigma

See B. Jegerlehner, *Krylov space solvers for shifted linear systems*,
hep-lat/9612014.

All kernels are vectorized over the shift index (and over rows for
:func:`compute_xp_m`) and hold no state between calls. Every kernel checks
its length preconditions and raises
:class:`~kryshift.errors.DimensionMismatch` on violation. A vanishing
denominator in :func:`compute_z_m` is not guarded: it yields ``inf``/``nan``.

"""

from __future__ import annotations

from typing import Any

import torch

from kryshift.blas import assert_same_dimensions
from kryshift.errors import DimensionMismatch


def compute_z_m(
    z_0_s: torch.Tensor,
    z_m1_s: torch.Tensor,
    sigma: torch.Tensor,
    beta_m1: Any,
    beta_0: Any,
    alpha_0: Any,
) -> torch.Tensor:
    """Compute :math:`\\zeta_1^\\sigma` for every shift.

    Parameters
    ----------
    z_0_s, z_m1_s : torch.Tensor
        :math:`\\zeta_0^\\sigma` and :math:`\\zeta_{-1}^\\sigma`, length ``N_s``.
    sigma : torch.Tensor
        Shifts, length ``N_s``.
    beta_m1, beta_0, alpha_0
        Base-system scalars (0-d tensors or Python numbers).

    Returns
    -------
    torch.Tensor
        :math:`\\zeta_1^\\sigma`, length ``N_s``.

    """
    assert_same_dimensions(z_0_s, z_m1_s, sigma)
    return (
        z_0_s
        * z_m1_s
        * beta_m1
        / (beta_0 * alpha_0 * (z_m1_s - z_0_s) + beta_m1 * z_m1_s * (1 - beta_0 * sigma))
    )


def compute_b_m(z_1_s: torch.Tensor, z_0_s: torch.Tensor, beta_0: Any) -> torch.Tensor:
    """Compute :math:`\\beta_0^\\sigma = \\beta_0 \\zeta_1^\\sigma / \\zeta_0^\\sigma`."""
    assert_same_dimensions(z_1_s, z_0_s)
    return beta_0 * z_1_s / z_0_s


def compute_a_m(
    z_0_s: torch.Tensor,
    z_1_s: torch.Tensor,
    beta_0_s: torch.Tensor,
    beta_0: Any,
    alpha_0: Any,
) -> torch.Tensor:
    """Compute :math:`\\alpha_0^\\sigma` for every shift.

    Only the ratio :math:`\\alpha_0 / \\beta_0` of the base scalars enters;
    it is formed first, as in the reference recurrence.

    """
    assert_same_dimensions(z_0_s, z_1_s, beta_0_s)
    return alpha_0 / beta_0 * z_1_s * beta_0_s / z_0_s


def compute_xp_m(
    alpha_0_s: torch.Tensor,
    z_1_s: torch.Tensor,
    beta_0_s: torch.Tensor,
    r_0: torch.Tensor,
    x_0_s: torch.Tensor,
    p_0_s: torch.Tensor,
) -> tuple[torch.Tensor, torch.Tensor]:
    """Advance the stacked solutions and search directions in place.

    For shift ``s`` and row ``i`` (flat index ``s * N + i``)::

        x[s, i] -= beta_0_s[s] * p[s, i]
        p[s, i]  = z_1_s[s] * r_0[i] + alpha_0_s[s] * p[s, i]

    Both updates read the old ``p``; the ``x`` update runs first.

    Parameters
    ----------
    alpha_0_s, z_1_s, beta_0_s : torch.Tensor
        Per-shift coefficients, length ``N_s``.
    r_0 : torch.Tensor
        Base residual, length ``N``.
    x_0_s, p_0_s : torch.Tensor
        Stacked solutions and directions, length ``N * N_s``. Overwritten.

    Returns
    -------
    tuple[torch.Tensor, torch.Tensor]
        The updated ``x_0_s`` and ``p_0_s`` (same objects as the inputs).

    """
    assert_same_dimensions(alpha_0_s, z_1_s, beta_0_s)
    assert_same_dimensions(x_0_s, p_0_s)
    n = r_0.shape[0]
    n_s = alpha_0_s.shape[0]
    if x_0_s.shape[0] != n * n_s:
        msg = f"Stacked length {x_0_s.shape[0]} != N * N_s = {n} * {n_s}"
        raise DimensionMismatch(msg)

    x_blocks = x_0_s.view(n_s, n)
    p_blocks = p_0_s.view(n_s, n)

    x_blocks.sub_(beta_0_s.unsqueeze(1) * p_blocks)
    p_blocks.mul_(alpha_0_s.unsqueeze(1)).add_(z_1_s.unsqueeze(1) * r_0.unsqueeze(0))

    return x_0_s, p_0_s


def vectorize_copy(source: torch.Tensor, dest: torch.Tensor) -> torch.Tensor:
    """Replicate ``source`` across ``dest``: ``dest[k] = source[k % N]``.

    Parameters
    ----------
    source : torch.Tensor
        1-D tensor of length ``N``.
    dest : torch.Tensor
        1-D tensor whose length is a multiple of ``N``. Overwritten.

    Returns
    -------
    torch.Tensor
        ``dest``.

    """
    n = source.shape[0]
    n_t = dest.shape[0]
    if n == 0:
        if n_t != 0:
            msg = "Cannot replicate an empty source into a non-empty destination"
            raise DimensionMismatch(msg)
        return dest
    if n_t % n != 0:
        msg = f"Destination length {n_t} is not a multiple of source length {n}"
        raise DimensionMismatch(msg)

    dest.view(n_t // n, n).copy_(source)
    return dest


__all__ = [
    "compute_a_m",
    "compute_b_m",
    "compute_xp_m",
    "compute_z_m",
    "vectorize_copy",
]
