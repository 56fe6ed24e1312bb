"""Linear operators consumed by the Krylov solvers.

The solvers only need three things from an operator :math:`A`: its
dimensions, its value type and memory space, and the product
:math:`y = A x`. :class:`LinearOperator` captures exactly that; everything
else about storage format is up to the concrete class.

- :class:`MatrixOperator`: dense or sparse (COO / CSR) torch matrix
- :class:`FunctionOperator`: any callable ``x -> A x``
- :class:`IdentityOperator`: :math:`I`
- :class:`ShiftedOperator`: :math:`A + \\sigma I`

Example
-------
>>> import torch
>>> import kryshift as ks
>>> A = ks.MatrixOperator(torch.eye(3, dtype=torch.float64))
>>> A.matvec(torch.ones(3, dtype=torch.float64))
tensor([1., 1., 1.], dtype=torch.float64)

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import torch

from kryshift.config import config
from kryshift.errors import DimensionMismatch

if TYPE_CHECKING:
    from collections.abc import Callable


class LinearOperator(ABC):
    """Abstract square or rectangular linear operator.

    Subclasses set ``shape``, ``dtype`` and ``device`` and implement
    :meth:`matvec`. Operators are treated as immutable during a solve.

    Attributes
    ----------
    shape : tuple[int, int]
        ``(num_rows, num_cols)``.
    dtype : torch.dtype
        Value type of the operator.
    device : torch.device
        Memory space of the operator.

    """

    shape: tuple[int, int]
    dtype: torch.dtype
    device: torch.device

    @property
    def num_rows(self) -> int:
        """Number of rows."""
        return self.shape[0]

    @property
    def num_cols(self) -> int:
        """Number of columns."""
        return self.shape[1]

    @abstractmethod
    def matvec(self, x: torch.Tensor) -> torch.Tensor:
        """Compute :math:`A x` for a 1-D tensor ``x`` of length ``num_cols``."""

    def __call__(self, x: torch.Tensor) -> torch.Tensor:
        return self.matvec(x)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(shape={self.shape}, dtype={self.dtype}, "
            f"device={self.device})"
        )


class MatrixOperator(LinearOperator):
    """Operator backed by a dense or sparse torch matrix.

    Parameters
    ----------
    matrix : torch.Tensor
        2-D tensor. Strided, ``sparse_coo`` and ``sparse_csr`` layouts are
        accepted.

    """

    def __init__(self, matrix: torch.Tensor) -> None:
        if matrix.dim() != 2:
            msg = f"MatrixOperator requires a 2-D tensor, got shape {tuple(matrix.shape)}"
            raise DimensionMismatch(msg)
        self.matrix = matrix
        self.shape = (matrix.shape[0], matrix.shape[1])
        self.dtype = matrix.dtype
        self.device = matrix.device

    @property
    def is_sparse(self) -> bool:
        """Whether the backing matrix uses a sparse layout."""
        return self.matrix.layout != torch.strided

    def matvec(self, x: torch.Tensor) -> torch.Tensor:
        if self.is_sparse:
            # Sparse @ 1-D is not supported for every layout; go through a column.
            return (self.matrix @ x.unsqueeze(-1)).squeeze(-1)
        return self.matrix @ x

    def diagonal(self) -> torch.Tensor:
        """Return the main diagonal as a dense 1-D tensor.

        Sparse matrices are read entry by entry, so the cost is linear in
        the number of stored values. Duplicate COO entries are summed.
        """
        if not self.is_sparse:
            return self.matrix.diagonal()

        n = min(self.shape)
        if self.matrix.layout == torch.sparse_csr:
            crow = self.matrix.crow_indices()
            rows = torch.repeat_interleave(
                torch.arange(self.shape[0], device=self.device), (crow[1:] - crow[:-1]).long()
            )
            cols = self.matrix.col_indices()
            values = self.matrix.values()
        else:
            coo = self.matrix.coalesce()
            rows, cols = coo.indices()
            values = coo.values()

        on_diag = rows == cols
        diag = torch.zeros(n, dtype=self.dtype, device=self.device)
        return diag.index_add_(0, rows[on_diag], values[on_diag])


class FunctionOperator(LinearOperator):
    """Operator defined by a matrix-free callable.

    Parameters
    ----------
    fn : Callable[[torch.Tensor], torch.Tensor]
        Function computing ``A x``. Must preserve length, dtype and device.
    n : int
        Number of rows (and columns).
    dtype : torch.dtype, optional
        Defaults to ``config.DEFAULT_DTYPE``.
    device : torch.device, optional
        Defaults to ``config.DEFAULT_DEVICE``.

    """

    def __init__(
        self,
        fn: Callable[[torch.Tensor], torch.Tensor],
        n: int,
        dtype: Any = None,
        device: Any = None,
    ) -> None:
        self.fn = fn
        self.shape = (n, n)
        self.dtype = config.DEFAULT_DTYPE if dtype is None else dtype
        self.device = torch.device(config.DEFAULT_DEVICE if device is None else device)

    def matvec(self, x: torch.Tensor) -> torch.Tensor:
        return self.fn(x)


class IdentityOperator(LinearOperator):
    """The identity operator :math:`I` of size ``n``."""

    def __init__(self, n: int, dtype: Any = None, device: Any = None) -> None:
        self.shape = (n, n)
        self.dtype = config.DEFAULT_DTYPE if dtype is None else dtype
        self.device = torch.device(config.DEFAULT_DEVICE if device is None else device)

    def matvec(self, x: torch.Tensor) -> torch.Tensor:
        return x.clone()


class ShiftedOperator(LinearOperator):
    """The shifted operator :math:`A + \\sigma I`.

    Parameters
    ----------
    base : LinearOperator
        Square operator :math:`A`.
    sigma : complex or float
        Diagonal shift.

    """

    def __init__(self, base: LinearOperator, sigma: Any) -> None:
        if base.num_rows != base.num_cols:
            msg = f"Shifted operator requires a square base, got shape {base.shape}"
            raise DimensionMismatch(msg)
        self.base = base
        self.sigma = sigma
        self.shape = base.shape
        self.dtype = base.dtype
        self.device = base.device

    def matvec(self, x: torch.Tensor) -> torch.Tensor:
        return self.base.matvec(x) + self.sigma * x


def aslinearoperator(A: Any) -> LinearOperator:
    """Wrap ``A`` as a :class:`LinearOperator`.

    Parameters
    ----------
    A : LinearOperator or torch.Tensor
        Existing operator (returned unchanged) or a 2-D dense/sparse tensor.

    Returns
    -------
    LinearOperator

    Raises
    ------
    TypeError
        If ``A`` is neither. Matrix-free callables must be wrapped in
        :class:`FunctionOperator` explicitly, since their size is unknown.

    """
    if isinstance(A, LinearOperator):
        return A
    if isinstance(A, torch.Tensor):
        return MatrixOperator(A)
    msg = f"Cannot interpret object of type {type(A).__name__} as a linear operator."
    raise TypeError(msg)
