"""BiCGStab solver for general non-Hermitian systems.

This module implements the right-preconditioned Bi-Conjugate Gradient
Stabilized (BiCGStab) method for solving linear systems :math:`A x = b`
with a general (non-Hermitian) matrix.

Algorithm
---------
Van der Vorst BiCGStab with right preconditioner :math:`M`:

.. math::

    r_0 &= b - A x_0, \\quad \\hat{r} = r_0, \\quad p_0 = r_0,
        \\quad \\rho_0 = (\\hat{r}, r_0) \\\\
    \\text{for } k &= 0, 1, 2, \\ldots \\\\
    \\alpha &= (\\hat{r}, r_k) / (\\hat{r}, A M p_k) \\\\
    s &= r_k - \\alpha A M p_k \\\\
    \\omega &= (A M s, s) / (A M s, A M s) \\\\
    x_{k+1} &= x_k + \\alpha M p_k + \\omega M s \\\\
    r_{k+1} &= s - \\omega A M s \\\\
    \\rho_{k+1} &= (\\hat{r}, r_{k+1}) \\\\
    \\beta &= (\\rho_{k+1} / \\rho_k) (\\alpha / \\omega) \\\\
    p_{k+1} &= r_{k+1} + \\beta (p_k - \\omega A M p_k)

BiCGStab combines BiCG with GMRES(1) stabilization to avoid the erratic
convergence behavior of pure BiCG. Right preconditioning leaves the residual
unchanged, so the monitor sees the true residual :math:`b - A x`.

Call forms
----------
``bicgstab(A, x, b)``
    Default monitor built from ``b``, no preconditioner.
``bicgstab(A, x, b, monitor)``
    Caller-supplied stopping criterion.
``bicgstab(A, x, b, monitor, M, verbose)``
    Preconditioned, optionally reporting progress.

Notes
-----
Breakdown (:math:`(\\hat{r}, A M p) = 0` or :math:`\\omega = 0`) is not
guarded and propagates as ``nan``/``inf``; the monitor then stops the run at
its iteration limit.

Example
-------
>>> import torch
>>> import kryshift as ks
>>> A = torch.tensor([[4.0, 1.0], [-2.0, 3.0]], dtype=torch.float64)
>>> b = torch.tensor([1.0, 2.0], dtype=torch.float64)
>>> x = torch.zeros(2, dtype=torch.float64)
>>> monitor = ks.bicgstab(A, x, b)
>>> print(f"Converged: {monitor.converged()}, iters: {monitor.iteration_count}")

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kryshift.blas import axpy, dotc
from kryshift.krylov._common import check_system
from kryshift.monitor import DefaultMonitor, VerboseMonitor, with_progress

if TYPE_CHECKING:
    import torch

logger = logging.getLogger(__name__)


def bicgstab(
    A: Any,
    x: torch.Tensor,
    b: torch.Tensor,
    monitor: DefaultMonitor | None = None,
    M: Any = None,
    verbose: int = 0,
) -> DefaultMonitor:
    """BiCGStab solver for general non-Hermitian systems.

    Solves :math:`A x = b` where :math:`A` is a general (possibly
    non-Hermitian) square operator.

    Parameters
    ----------
    A : LinearOperator or torch.Tensor
        System operator.
    x : torch.Tensor
        Initial guess. Overwritten with the solution.
    b : torch.Tensor
        Right-hand side vector.
    monitor : DefaultMonitor, optional
        Stopping criterion. If None, a default monitor is built from ``b``
        (a :class:`VerboseMonitor` when ``verbose > 0``).
    M : LinearOperator or torch.Tensor, optional
        Right preconditioner approximating :math:`A^{-1}`. Defaults to the
        identity.
    verbose : int
        When positive, log the tolerance, one line per iteration and a final
        summary at ``INFO``, whichever monitor is used.

    Returns
    -------
    DefaultMonitor
        The monitor, holding the iteration count and final residual.

    Raises
    ------
    DimensionMismatch
        If the operator, preconditioner and vectors disagree in size.

    """
    A, M = check_system(A, x, b, M)

    if monitor is None:
        monitor = VerboseMonitor(b) if verbose > 0 else DefaultMonitor(b)
    tracker = with_progress(monitor, verbose)

    r = b - A.matvec(x)
    r_star = r.clone()
    p = r.clone()
    r_star_r = dotc(r_star, r)

    while not tracker.finished(r):
        Mp = M.matvec(p)
        AMp = A.matvec(Mp)

        alpha = r_star_r / dotc(r_star, AMp)

        # s = r - alpha * AMp
        s = r - alpha * AMp

        Ms = M.matvec(s)
        AMs = A.matvec(Ms)

        omega = dotc(AMs, s) / dotc(AMs, AMs)

        # x += alpha * Mp + omega * Ms
        axpy(Mp, x, alpha)
        axpy(Ms, x, omega)

        # r = s - omega * AMs
        r = s - omega * AMs

        r_star_r_new = dotc(r_star, r)
        beta = (r_star_r_new / r_star_r) * (alpha / omega)
        r_star_r = r_star_r_new

        # p = r + beta * (p - omega * AMp)
        p = r + beta * (p - omega * AMp)

        tracker.increment()

    logger.debug(
        "bicgstab: stopped after %d iterations, residual norm %.3e",
        monitor.iteration_count,
        monitor.residual_norm(),
    )
    return monitor


__all__ = ["bicgstab"]
