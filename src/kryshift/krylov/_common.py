"""Argument handling shared by the single-system solvers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kryshift.blas import assert_same_dimensions
from kryshift.errors import DimensionMismatch
from kryshift.memory import assert_same_memory_space
from kryshift.operators.linear import aslinearoperator
from kryshift.precond.diagonal import IdentityPreconditioner

if TYPE_CHECKING:
    import torch

    from kryshift.operators.linear import LinearOperator


def check_system(
    A: Any, x: torch.Tensor, b: torch.Tensor, M: Any = None
) -> tuple[LinearOperator, LinearOperator]:
    """Validate ``A x = b`` and return ``(A, M)`` as operators.

    ``M=None`` becomes the identity preconditioner.

    Raises
    ------
    DimensionMismatch
        If ``A`` or ``M`` is not square or the lengths disagree.
    MemorySpaceMismatch
        If ``A``, ``x`` and ``b`` live on different devices.

    """
    A = aslinearoperator(A)
    if A.num_rows != A.num_cols:
        msg = f"Operator must be square, got shape {A.shape}"
        raise DimensionMismatch(msg)
    if b.shape[0] != A.num_rows:
        msg = f"len(b) = {b.shape[0]} does not match operator size {A.num_rows}"
        raise DimensionMismatch(msg)
    assert_same_dimensions(x, b)
    assert_same_memory_space(A, x, b)

    if M is None:
        M = IdentityPreconditioner(A.num_rows, dtype=b.dtype, device=b.device)
    else:
        M = aslinearoperator(M)
        if M.shape != A.shape:
            msg = f"Preconditioner shape {M.shape} does not match operator shape {A.shape}"
            raise DimensionMismatch(msg)
    return A, M
