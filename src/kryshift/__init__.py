"""Kryshift: Krylov solvers for families of shifted linear systems.

This package provides multi-shift Conjugate Gradient (CG-M) together with
CG and BiCGStab for sparse linear systems, built on PyTorch tensors.
The package can be imported as ``ks`` for convenience:

.. code-block:: python

    import torch
    import kryshift as ks

    # Build a sparse SPD operator
    A = ks.poisson2d(16, 16)
    b = torch.ones(A.num_rows, dtype=torch.float64)

    # Solve (A + sigma_i I) x_i = b for all shifts at once
    sigma = torch.tensor([0.0, 0.1, 1.0], dtype=torch.float64)
    x = ks.StackedVector.zeros(A.num_rows, len(sigma))
    monitor = ks.cg_m(A, x, b, sigma)

    # Or use the high-level API
    x, info = ks.solve(A, b, sigma=sigma, tol=1e-10)

"""

from kryshift._version import __version__
from kryshift.config import KryshiftConfig, config
from kryshift.errors import (
    BreakdownError,
    DimensionMismatch,
    KryshiftError,
    MemorySpaceMismatch,
    MemorySpaceNotAvailableError,
)
from kryshift.fields import StackedVector
from kryshift.krylov import bicgstab, cg, cg_m
from kryshift.layouts import LayoutType, from_blocks, shift_index, to_blocks
from kryshift.memory import MemorySpace, memory_space_of
from kryshift.monitor import DefaultMonitor, VerboseMonitor
from kryshift.operators import (
    FunctionOperator,
    IdentityOperator,
    LinearOperator,
    MatrixOperator,
    ShiftedOperator,
    aslinearoperator,
    poisson1d,
    poisson2d,
)
from kryshift.precond import DiagonalPreconditioner, IdentityPreconditioner
from kryshift.solvers import SolverInfo, solve

__all__ = [
    "BreakdownError",
    # Monitors
    "DefaultMonitor",
    # Preconditioners
    "DiagonalPreconditioner",
    # Errors
    "DimensionMismatch",
    # Operators
    "FunctionOperator",
    "IdentityOperator",
    "IdentityPreconditioner",
    # Version and config
    "KryshiftConfig",
    "KryshiftError",
    # Layouts
    "LayoutType",
    "LinearOperator",
    "MatrixOperator",
    # Memory spaces
    "MemorySpace",
    "MemorySpaceMismatch",
    "MemorySpaceNotAvailableError",
    "ShiftedOperator",
    "SolverInfo",
    # Fields
    "StackedVector",
    "VerboseMonitor",
    "__version__",
    "aslinearoperator",
    # Solvers
    "bicgstab",
    "cg",
    "cg_m",
    "config",
    "from_blocks",
    "memory_space_of",
    "poisson1d",
    "poisson2d",
    "shift_index",
    "solve",
    "to_blocks",
]
