"""Krylov solver implementations.

- :func:`cg_m`: multi-shift CG for :math:`(A + \\sigma_i I) x_i = b`
- :func:`cg`: preconditioned CG for Hermitian positive-definite systems
- :func:`bicgstab`: right-preconditioned BiCGStab for general systems

The solvers follow one calling convention: the solution buffer ``x`` is
passed in and overwritten, and the monitor that stopped the run is returned.
The per-shift recurrences used by CG-M live in :mod:`kryshift.krylov.kernels`.

"""

from kryshift.krylov.bicgstab import bicgstab
from kryshift.krylov.cg import cg
from kryshift.krylov.cg_m import cg_m

__all__ = [
    "bicgstab",
    "cg",
    "cg_m",
]
