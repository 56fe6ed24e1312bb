"""Operators subpackage for kryshift.

This subpackage provides the :class:`LinearOperator` abstraction consumed by
the solvers, a few concrete operators, and model problems in
:mod:`kryshift.operators.gallery`.

"""

from kryshift.operators.gallery import poisson1d, poisson2d
from kryshift.operators.linear import (
    FunctionOperator,
    IdentityOperator,
    LinearOperator,
    MatrixOperator,
    ShiftedOperator,
    aslinearoperator,
)

__all__ = [
    "FunctionOperator",
    "IdentityOperator",
    "LinearOperator",
    "MatrixOperator",
    "ShiftedOperator",
    "aslinearoperator",
    "poisson1d",
    "poisson2d",
]
