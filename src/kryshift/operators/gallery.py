"""Model problems for testing and benchmarking the solvers.

Finite-difference Laplacians with Dirichlet boundaries. Both are symmetric
positive definite, which makes them natural test systems for CG and CG-M.

"""

from __future__ import annotations

from typing import Any

import torch

from kryshift.config import config
from kryshift.operators.linear import MatrixOperator


def _csr_from_triplets(
    rows: list[int],
    cols: list[int],
    vals: list[float],
    n: int,
    dtype: Any,
    device: Any,
) -> torch.Tensor:
    indices = torch.tensor([rows, cols], dtype=torch.int64)
    values = torch.tensor(vals, dtype=torch.float64)
    coo = torch.sparse_coo_tensor(indices, values, (n, n)).coalesce()
    return coo.to(dtype=dtype).to_sparse_csr().to(device)


def poisson1d(n: int, dtype: Any = None, device: Any = None) -> MatrixOperator:
    """1-D Poisson matrix ``tridiag(-1, 2, -1)`` of size ``n``.

    Parameters
    ----------
    n : int
        Number of grid points.
    dtype : torch.dtype, optional
        Defaults to ``config.DEFAULT_DTYPE``.
    device : torch.device, optional
        Defaults to ``config.DEFAULT_DEVICE``.

    Returns
    -------
    MatrixOperator
        Operator backed by a sparse CSR matrix.

    """
    if dtype is None:
        dtype = config.DEFAULT_DTYPE
    if device is None:
        device = config.DEFAULT_DEVICE

    rows: list[int] = []
    cols: list[int] = []
    vals: list[float] = []
    for i in range(n):
        rows.append(i)
        cols.append(i)
        vals.append(2.0)
        if i > 0:
            rows.append(i)
            cols.append(i - 1)
            vals.append(-1.0)
        if i < n - 1:
            rows.append(i)
            cols.append(i + 1)
            vals.append(-1.0)

    return MatrixOperator(_csr_from_triplets(rows, cols, vals, n, dtype, device))


def poisson2d(nx: int, ny: int, dtype: Any = None, device: Any = None) -> MatrixOperator:
    """5-point 2-D Poisson matrix on an ``nx`` by ``ny`` grid.

    Grid point ``(i, j)`` maps to row ``j * nx + i``. Connections across
    row boundaries are omitted.

    Returns
    -------
    MatrixOperator
        Operator of size ``nx * ny`` backed by a sparse CSR matrix.

    """
    if dtype is None:
        dtype = config.DEFAULT_DTYPE
    if device is None:
        device = config.DEFAULT_DEVICE

    n = nx * ny
    rows: list[int] = []
    cols: list[int] = []
    vals: list[float] = []
    for j in range(ny):
        for i in range(nx):
            k = j * nx + i
            rows.append(k)
            cols.append(k)
            vals.append(4.0)
            for di, dj in ((-1, 0), (1, 0), (0, -1), (0, 1)):
                ii, jj = i + di, j + dj
                if 0 <= ii < nx and 0 <= jj < ny:
                    rows.append(k)
                    cols.append(jj * nx + ii)
                    vals.append(-1.0)

    return MatrixOperator(_csr_from_triplets(rows, cols, vals, n, dtype, device))
