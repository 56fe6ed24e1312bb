"""High-level solver API for sparse linear systems.

This module provides the main :func:`solve` function that selects the
appropriate Krylov method, allocates the solution buffer, and reports
convergence in a :class:`SolverInfo`.

The API supports:

- **method="cg_m"**: Solve :math:`(A + \\sigma_i I) x_i = b` for all shifts
- **method="cg"**: Solve a Hermitian positive-definite :math:`A x = b`
- **method="bicgstab"**: Solve a general :math:`A x = b`

Example
-------
>>> import torch
>>> import kryshift as ks
>>> A = ks.poisson2d(8, 8)
>>> b = torch.ones(64, dtype=torch.float64)
>>> x, info = ks.solve(A, b, sigma=[0.0, 0.5, 2.0], tol=1e-10)
>>> print(f"Converged: {info.converged}, iters: {info.iters}")
>>> x.block(1)  # solution for sigma = 0.5

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import torch

from kryshift.fields import StackedVector
from kryshift.krylov import bicgstab, cg, cg_m
from kryshift.monitor import DefaultMonitor
from kryshift.operators.linear import aslinearoperator
from kryshift.precond import DiagonalPreconditioner

if TYPE_CHECKING:
    from collections.abc import Sequence

    from kryshift.operators.linear import LinearOperator


@dataclass
class SolverInfo:
    """Information about solver convergence.

    Attributes
    ----------
    converged : bool
        Whether the solver converged within tolerance.
    iters : int
        Number of iterations performed.
    final_residual : float
        Final relative residual norm of the (base) system.
    method : str
        Solver method used ("cg_m", "cg" or "bicgstab").
    n_shifts : int
        Number of shifted systems solved (1 for "cg" and "bicgstab").

    """

    converged: bool
    iters: int
    final_residual: float
    method: str
    n_shifts: int = 1


def solve(
    A: LinearOperator | torch.Tensor,
    b: torch.Tensor,
    sigma: torch.Tensor | Sequence[Any] | None = None,
    method: str = "auto",
    hermitian: bool = False,
    tol: float | None = None,
    atol: float | None = None,
    maxiter: int | None = None,
    precond: str | None = None,
    dtype: torch.dtype | None = None,
    device: Any = None,
) -> tuple[StackedVector | torch.Tensor, SolverInfo]:
    """Solve a sparse linear system or a family of shifted systems.

    Parameters
    ----------
    A : LinearOperator or torch.Tensor
        Square system operator.
    b : torch.Tensor
        Right-hand side vector.
    sigma : torch.Tensor or sequence, optional
        Shifts. When given, solves :math:`(A + \\sigma_i I) x_i = b` for every
        shift with CG-M.
    method : str
        Solver method: "cg_m", "cg", "bicgstab", or "auto".
        If "auto", selects CG-M when ``sigma`` is given, else CG for
        ``hermitian=True`` and BiCGStab otherwise.
    hermitian : bool
        Declare ``A`` Hermitian positive-definite (used by "auto").
    tol : float, optional
        Relative tolerance. Defaults to ``config.RELATIVE_TOLERANCE``.
    atol : float, optional
        Absolute tolerance. Defaults to ``config.ABSOLUTE_TOLERANCE``.
    maxiter : int, optional
        Maximum number of iterations. Defaults to ``config.ITERATION_LIMIT``.
    precond : str, optional
        Preconditioner type. Currently "diagonal" (Jacobi) is supported for
        "cg" and "bicgstab".
    dtype : torch.dtype, optional
        Working dtype for ``b`` and ``sigma``. Defaults to ``b.dtype``.
    device : torch.device, optional
        Working device for ``b`` and ``sigma``. Defaults to ``b.device``.

    Returns
    -------
    tuple[StackedVector | torch.Tensor, SolverInfo]
        Solution (a :class:`StackedVector` for CG-M, a 1-D tensor
        otherwise) and convergence information.

    Raises
    ------
    ValueError
        If an unsupported method or preconditioner is specified.

    """
    A = aslinearoperator(A)
    b = b.to(dtype=dtype or b.dtype, device=device or b.device)

    # Auto-select solver method
    if method == "auto":
        if sigma is not None:
            method = "cg_m"
        else:
            method = "cg" if hermitian else "bicgstab"

    if method not in ("cg_m", "cg", "bicgstab"):
        msg = f"Unsupported method: {method}. Use 'cg_m', 'cg' or 'bicgstab'."
        raise ValueError(msg)

    if method == "cg_m" and sigma is None:
        msg = "Method 'cg_m' requires shifts (sigma)."
        raise ValueError(msg)

    monitor = DefaultMonitor(
        b, iteration_limit=maxiter, relative_tolerance=tol, absolute_tolerance=atol
    )

    if method == "cg_m":
        if precond is not None:
            msg = "Preconditioning is not supported for method='cg_m'."
            raise ValueError(msg)
        # cg_m converts the shifts to b.dtype
        if isinstance(sigma, torch.Tensor):
            sigma = sigma.to(device=b.device)
        else:
            sigma = list(sigma)
        x = StackedVector.zeros(A.num_rows, len(sigma), dtype=b.dtype, device=b.device)
        cg_m(A, x, b, sigma, monitor)
        info = SolverInfo(
            converged=monitor.converged(),
            iters=monitor.iteration_count,
            final_residual=monitor.relative_residual(),
            method=method,
            n_shifts=x.n_shifts,
        )
        return x, info

    # Handle preconditioning
    if precond == "diagonal":
        M = DiagonalPreconditioner(A)
    elif precond is not None:
        msg = f"Unsupported preconditioner: {precond}. Use 'diagonal' or None."
        raise ValueError(msg)
    else:
        M = None

    x_vec = torch.zeros_like(b)
    if method == "cg":
        cg(A, x_vec, b, monitor, M)
    else:
        bicgstab(A, x_vec, b, monitor, M)

    info = SolverInfo(
        converged=monitor.converged(),
        iters=monitor.iteration_count,
        final_residual=monitor.relative_residual(),
        method=method,
    )
    return x_vec, info
