"""Identity and diagonal (Jacobi) preconditioners.

A preconditioner :math:`M \\approx A^{-1}` is itself a
:class:`~kryshift.operators.LinearOperator`; the solvers apply it with
``M.matvec(r)``.

The Jacobi preconditioner uses only the main diagonal :math:`D` of
:math:`A`:

.. math::

    M r = D^{-1} r

"""

from __future__ import annotations

from typing import Any

import torch

from kryshift.config import config
from kryshift.errors import DimensionMismatch
from kryshift.operators.linear import LinearOperator, MatrixOperator, aslinearoperator


class IdentityPreconditioner(LinearOperator):
    """No-op preconditioner, :math:`M = I`."""

    def __init__(self, n: int, dtype: Any = None, device: Any = None) -> None:
        self.shape = (n, n)
        self.dtype = config.DEFAULT_DTYPE if dtype is None else dtype
        self.device = torch.device(config.DEFAULT_DEVICE if device is None else device)

    def matvec(self, x: torch.Tensor) -> torch.Tensor:
        return x


class DiagonalPreconditioner(LinearOperator):
    """Jacobi preconditioner built from the diagonal of ``A``.

    Parameters
    ----------
    A : MatrixOperator or torch.Tensor
        Matrix whose diagonal is inverted. Matrix-free operators have no
        accessible diagonal and are rejected.

    Raises
    ------
    TypeError
        If ``A`` does not expose its entries.
    ValueError
        If the diagonal has a zero entry.

    """

    def __init__(self, A: Any) -> None:
        A = aslinearoperator(A)
        if not isinstance(A, MatrixOperator):
            msg = "DiagonalPreconditioner requires an explicit matrix."
            raise TypeError(msg)
        if A.num_rows != A.num_cols:
            msg = f"DiagonalPreconditioner requires a square matrix, got shape {A.shape}"
            raise DimensionMismatch(msg)

        diag = A.diagonal()
        if bool((diag == 0).any()):
            msg = "Zero diagonal entry, cannot build Jacobi preconditioner."
            raise ValueError(msg)

        self.inv_diag = 1.0 / diag
        self.shape = A.shape
        self.dtype = A.dtype
        self.device = A.device

    def matvec(self, x: torch.Tensor) -> torch.Tensor:
        return self.inv_diag * x
