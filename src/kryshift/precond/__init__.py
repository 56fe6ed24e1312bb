"""Preconditioning subpackage for kryshift.

This subpackage provides preconditioners for the CG and BiCGSTAB solvers:

- **Identity**: :math:`M = I`, the default when no preconditioner is given.
- **Diagonal (Jacobi)**: :math:`M = \\mathrm{diag}(A)^{-1}`.

CG-M takes no preconditioner: a preconditioned operator is no longer shifted
by a multiple of the identity, so the shifted recurrences would not apply.

"""

from kryshift.precond.diagonal import DiagonalPreconditioner, IdentityPreconditioner

__all__ = [
    "DiagonalPreconditioner",
    "IdentityPreconditioner",
]
