"""Solvers subpackage for kryshift.

This subpackage provides the high-level solver API:

- :func:`solve`: High-level API that selects the method and allocates the solution
- :class:`SolverInfo`: Dataclass containing solver convergence information

The low-level Krylov solver implementations are located in
:mod:`kryshift.krylov`. They are re-exported here for convenience:

- :func:`cg_m`: multi-shift CG for families of shifted systems
- :func:`cg`: Conjugate Gradient for Hermitian positive-definite systems
- :func:`bicgstab`: BiCGStab for general non-Hermitian systems

"""

from kryshift.krylov import bicgstab, cg, cg_m
from kryshift.solvers.api import SolverInfo, solve

__all__ = [
    "SolverInfo",
    "bicgstab",
    "cg",
    "cg_m",
    "solve",
]
