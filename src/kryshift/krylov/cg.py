"""Conjugate Gradient solver for Hermitian positive-definite systems.

This module implements the preconditioned Conjugate Gradient (CG) method
for solving linear systems :math:`A x = b` where :math:`A` is Hermitian
positive-definite.

Algorithm
---------
The standard preconditioned CG recurrence (Hestenes-Stiefel):

.. math::

    r_0 &= b - A x_0, \\quad z_0 = M r_0, \\quad p_0 = z_0 \\\\
    \\text{for } k &= 0, 1, 2, \\ldots \\\\
    \\alpha_k &= \\frac{(r_k, z_k)}{(p_k, A p_k)} \\\\
    x_{k+1} &= x_k + \\alpha_k p_k \\\\
    r_{k+1} &= r_k - \\alpha_k A p_k \\\\
    z_{k+1} &= M r_{k+1} \\\\
    \\beta_k &= \\frac{(r_{k+1}, z_{k+1})}{(r_k, z_k)} \\\\
    p_{k+1} &= z_{k+1} + \\beta_k p_k

The loop runs until the monitor reports completion on the unpreconditioned
residual :math:`r_k`.

Notes
-----
CG with a single zero shift is what CG-M reduces to, which makes this solver
the reference for :func:`~kryshift.krylov.cg_m.cg_m`.

Example
-------
>>> import torch
>>> import kryshift as ks
>>> A = ks.poisson1d(100)
>>> b = torch.ones(100, dtype=torch.float64)
>>> x = torch.zeros(100, dtype=torch.float64)
>>> monitor = ks.cg(A, x, b)
>>> print(f"Converged: {monitor.converged()}, iters: {monitor.iteration_count}")

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kryshift.blas import axpy, dotc, scal
from kryshift.krylov._common import check_system
from kryshift.monitor import DefaultMonitor, VerboseMonitor, with_progress

if TYPE_CHECKING:
    import torch

logger = logging.getLogger(__name__)


def cg(
    A: Any,
    x: torch.Tensor,
    b: torch.Tensor,
    monitor: DefaultMonitor | None = None,
    M: Any = None,
    verbose: int = 0,
) -> DefaultMonitor:
    """Conjugate Gradient solver for Hermitian positive-definite systems.

    Parameters
    ----------
    A : LinearOperator or torch.Tensor
        Hermitian positive-definite operator.
    x : torch.Tensor
        Initial guess. Overwritten with the solution.
    b : torch.Tensor
        Right-hand side vector.
    monitor : DefaultMonitor, optional
        Stopping criterion. If None, a default monitor is built from ``b``
        (a :class:`VerboseMonitor` when ``verbose > 0``).
    M : LinearOperator or torch.Tensor, optional
        Hermitian positive-definite preconditioner approximating
        :math:`A^{-1}`. Defaults to the identity.
    verbose : int
        When positive, log the tolerance, one line per iteration and a final
        summary at ``INFO``, whichever monitor is used.

    Returns
    -------
    DefaultMonitor
        The monitor, holding the iteration count and final residual.

    """
    A, M = check_system(A, x, b, M)

    if monitor is None:
        monitor = VerboseMonitor(b) if verbose > 0 else DefaultMonitor(b)
    tracker = with_progress(monitor, verbose)

    r = b - A.matvec(x)
    z = M.matvec(r)
    p = z.clone()
    rz = dotc(r, z)

    while not tracker.finished(r):
        y = A.matvec(p)

        alpha = rz / dotc(p, y)

        axpy(p, x, alpha)
        axpy(y, r, -alpha)

        z = M.matvec(r)

        rz_old = rz
        rz = dotc(r, z)
        beta = rz / rz_old

        # p = z + beta * p
        scal(p, beta).add_(z)

        tracker.increment()

    logger.debug(
        "cg: stopped after %d iterations, residual norm %.3e",
        monitor.iteration_count,
        monitor.residual_norm(),
    )
    return monitor


__all__ = ["cg"]
