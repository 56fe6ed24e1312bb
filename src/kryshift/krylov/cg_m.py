"""Multi-shift Conjugate Gradient (CG-M).

This module solves the family of Hermitian positive-definite systems

.. math::

    (A + \\sigma_i I) x_i = b, \\qquad i = 0, \\ldots, N_s - 1

for all shifts at once, using one matrix-vector product per iteration.
The Krylov space of :math:`A + \\sigma I` does not depend on :math:`\\sigma`,
so a single CG run on the unshifted system generates every shifted
iterate; the shifted coefficients follow from the
:mod:`~kryshift.krylov.kernels` recurrences.

Algorithm
---------
Base system (note the sign convention, :math:`\\beta_0 = -\\alpha_{CG}`):

.. math::

    \\beta_0 &= -\\frac{(r, r)}{(p, A p)} \\\\
    r &\\leftarrow r + \\beta_0 A p \\\\
    \\alpha_0 &= \\frac{(r_{new}, r_{new})}{(r, r)} \\\\
    p &\\leftarrow \\alpha_0 \\left(p + \\alpha_0^{-1} r\\right) = r + \\alpha_0 p

followed by the per-shift :math:`\\zeta`, :math:`\\beta^\\sigma`,
:math:`\\alpha^\\sigma` and :math:`x^\\sigma, p^\\sigma` updates. The
stopping decision belongs to the monitor and is made from the base
residual; for :math:`\\sigma_i \\ge 0` the shifted residuals are
:math:`\\zeta_i r` with :math:`|\\zeta_i| \\le 1`, so they converge no later.

Notes
-----
Division by a vanishing :math:`(p, Ap)` or :math:`\\zeta` denominator is
not guarded by default and propagates as ``nan``/``inf``. Pass
``check_breakdown=True`` (or set ``config.CHECK_BREAKDOWN``) to get a
:class:`~kryshift.errors.BreakdownError` instead.

Example
-------
>>> import torch
>>> import kryshift as ks
>>> A = ks.poisson1d(50)
>>> b = torch.ones(50, dtype=torch.float64)
>>> sigma = torch.tensor([0.0, 0.1, 1.0], dtype=torch.float64)
>>> x = torch.empty(50 * 3, dtype=torch.float64)
>>> monitor = ks.cg_m(A, x, b, sigma)
>>> x1 = ks.to_blocks(x, 3)[1]  # solution of (A + 0.1 I) x = b

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import torch

from kryshift.blas import axpy, copy, dotc, fill, scal
from kryshift.config import config
from kryshift.errors import BreakdownError, DimensionMismatch
from kryshift.fields import StackedVector
from kryshift.krylov.kernels import (
    compute_a_m,
    compute_b_m,
    compute_xp_m,
    compute_z_m,
    vectorize_copy,
)
from kryshift.memory import assert_same_memory_space
from kryshift.monitor import DefaultMonitor
from kryshift.operators.linear import aslinearoperator

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kryshift.operators.linear import LinearOperator

logger = logging.getLogger(__name__)


def _as_shift_tensor(sigma: Any, like: torch.Tensor) -> torch.Tensor:
    if isinstance(sigma, torch.Tensor):
        if sigma.dim() != 1:
            msg = f"Shifts must be 1-D, got shape {tuple(sigma.shape)}"
            raise DimensionMismatch(msg)
        has_complex = sigma.is_complex()
    else:
        sigma = list(sigma)
        has_complex = any(isinstance(s, complex) for s in sigma)

    if has_complex and not like.is_complex():
        msg = f"Complex shifts require a complex right-hand side, got b of dtype {like.dtype}"
        raise ValueError(msg)

    if isinstance(sigma, torch.Tensor):
        return sigma.to(dtype=like.dtype)
    return torch.as_tensor(sigma, dtype=like.dtype, device=like.device)


def cg_m(
    A: LinearOperator | torch.Tensor,
    x: torch.Tensor | StackedVector,
    b: torch.Tensor,
    sigma: torch.Tensor | Sequence[Any],
    monitor: DefaultMonitor | None = None,
    *,
    check_breakdown: bool | None = None,
) -> DefaultMonitor:
    """Solve :math:`(A + \\sigma_i I) x_i = b` for every shift with CG-M.

    Parameters
    ----------
    A : LinearOperator or torch.Tensor
        Hermitian positive-definite operator of size ``N``.
    x : torch.Tensor or StackedVector
        Stacked output buffer of length ``N * N_s``, shift-major. Its
        contents are overwritten (the initial guess is always zero).
    b : torch.Tensor
        Right-hand side, length ``N``.
    sigma : torch.Tensor or sequence
        Shifts, length ``N_s``. Read only.
    monitor : DefaultMonitor, optional
        Stopping criterion. If None, ``DefaultMonitor(b)`` is used.
    check_breakdown : bool, optional
        Raise :class:`BreakdownError` on a zero ``(p, Ap)`` or a non-finite
        :math:`\\zeta`. Defaults to ``config.CHECK_BREAKDOWN``.

    Returns
    -------
    DefaultMonitor
        The monitor, holding the iteration count and final base residual.

    Raises
    ------
    DimensionMismatch
        If ``A`` is not square, ``len(b) != N`` or ``len(x) != N * N_s``.
    MemorySpaceMismatch
        If ``A``, ``x``, ``b`` and ``sigma`` do not share a device.
    ValueError
        If ``sigma`` is complex while ``b`` is real.

    """
    A = aslinearoperator(A)
    if isinstance(x, StackedVector):
        x = x.flat
    sigma = _as_shift_tensor(sigma, b)

    n = A.num_rows
    n_t = x.shape[0]
    n_s = sigma.shape[0]

    if A.num_rows != A.num_cols:
        msg = f"Operator must be square, got shape {A.shape}"
        raise DimensionMismatch(msg)
    if b.shape[0] != n:
        msg = f"len(b) = {b.shape[0]} does not match operator size {n}"
        raise DimensionMismatch(msg)
    if n_t != n * n_s:
        msg = f"len(x) = {n_t} != N * N_s = {n} * {n_s}"
        raise DimensionMismatch(msg)
    assert_same_memory_space(A, x, b, sigma)

    if monitor is None:
        monitor = DefaultMonitor(b)
    if check_breakdown is None:
        check_breakdown = config.CHECK_BREAKDOWN

    logger.debug("cg_m: N=%d, N_s=%d, dtype=%s, device=%s", n, n_s, b.dtype, b.device)

    dtype = b.dtype
    device = b.device

    def scalar(value: float) -> torch.Tensor:
        return torch.tensor(value, dtype=dtype, device=device)

    # Per-shift search directions
    p_0_s = torch.empty(n_t, dtype=dtype, device=device)

    # Base-system residual and direction
    r_0 = torch.empty(n, dtype=dtype, device=device)
    p_0 = torch.empty(n, dtype=dtype, device=device)

    # Per-shift recurrence coefficients
    z_m1_s = torch.ones(n_s, dtype=dtype, device=device)
    z_0_s = torch.ones(n_s, dtype=dtype, device=device)
    alpha_0_s = torch.zeros(n_s, dtype=dtype, device=device)

    # Base-system coefficients
    beta_0 = scalar(1.0)
    alpha_0 = scalar(0.0)

    copy(b, r_0)
    rsq_1 = dotc(r_0, r_0)

    fill(x, 0)

    vectorize_copy(b, p_0_s)
    copy(b, p_0)

    while not monitor.finished(r_0):
        rsq_0 = rsq_1
        beta_m1 = beta_0

        Ap = A.matvec(p_0)

        pAp = dotc(p_0, Ap)
        if check_breakdown and pAp == 0:
            raise BreakdownError("pAp", monitor.iteration_count)

        beta_0 = -rsq_0 / pAp

        axpy(Ap, r_0, beta_0)

        z_1_s = compute_z_m(z_0_s, z_m1_s, sigma, beta_m1, beta_0, alpha_0)
        if check_breakdown and not bool(torch.isfinite(z_1_s).all()):
            raise BreakdownError("zeta", monitor.iteration_count)

        beta_0_s = compute_b_m(z_1_s, z_0_s, beta_0)

        rsq_1 = dotc(r_0, r_0)
        alpha_0 = rsq_1 / rsq_0
        alpha_0_inv = rsq_0 / rsq_1

        # p_0 <- alpha_0 * (p_0 + alpha_0_inv * r_0) = r_0 + alpha_0 * p_0, in two steps
        axpy(r_0, p_0, alpha_0_inv)
        scal(p_0, alpha_0)

        alpha_0_s = compute_a_m(z_0_s, z_1_s, beta_0_s, beta_0, alpha_0)

        compute_xp_m(alpha_0_s, z_1_s, beta_0_s, r_0, x, p_0_s)

        z_m1_s = z_0_s
        z_0_s = z_1_s

        monitor.increment()

    logger.debug(
        "cg_m: stopped after %d iterations, residual norm %.3e (tolerance %.3e)",
        monitor.iteration_count,
        monitor.residual_norm(),
        monitor.tolerance(),
    )
    return monitor


__all__ = ["cg_m"]
