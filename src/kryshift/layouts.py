"""Layout system for stacked multi-shift vectors.

CG-M keeps one solution vector and one search direction per shift. These
live in a single flat buffer of length ``N * N_s``:

- **flat** layout: canonical storage, shape ``[N * N_s]``. Element
  ``shift * N + row`` belongs to shift ``shift``.

- **blocks** layout: a ``[N_s, N]`` view of the same memory, one row per
  shift. No data is copied.

The linear index of a (shift, row) pair is

.. math::

    k = s \\cdot N + i, \\qquad s = \\lfloor k / N \\rfloor, \\quad i = k \\bmod N

Example
-------
>>> import torch
>>> import kryshift as ks
>>> flat = torch.arange(6.0)
>>> blocks = ks.to_blocks(flat, n_shifts=2)
>>> print(blocks.shape)  # torch.Size([2, 3])
>>> ks.from_blocks(blocks).data_ptr() == flat.data_ptr()  # True

"""

from typing import Literal

import torch

from kryshift.errors import DimensionMismatch

# Layout type alias
LayoutType = Literal["flat", "blocks"]


def shift_index(k: int, n_rows: int) -> tuple[int, int]:
    """Split a flat index into its ``(shift, row)`` pair.

    Parameters
    ----------
    k : int
        Flat index into a stacked vector.
    n_rows : int
        Length ``N`` of one block.

    Returns
    -------
    tuple[int, int]
        ``(k // N, k % N)``.

    """
    return divmod(k, n_rows)


def to_blocks(flat: torch.Tensor, n_shifts: int) -> torch.Tensor:
    """View a flat stacked vector as ``[N_s, N]`` blocks.

    Parameters
    ----------
    flat : torch.Tensor
        1-D tensor of length ``N * n_shifts``.
    n_shifts : int
        Number of shifts ``N_s``.

    Returns
    -------
    torch.Tensor
        View with shape ``[n_shifts, N]`` sharing memory with ``flat``.
        In-place writes through the view update ``flat``.

    Raises
    ------
    DimensionMismatch
        If ``flat`` is not 1-D or its length is not a multiple of ``n_shifts``.

    """
    if flat.dim() != 1:
        msg = f"Stacked vectors must be 1-D, got shape {tuple(flat.shape)}"
        raise DimensionMismatch(msg)
    if n_shifts <= 0 or flat.shape[0] % n_shifts != 0:
        msg = f"Length {flat.shape[0]} is not a multiple of n_shifts={n_shifts}"
        raise DimensionMismatch(msg)
    return flat.view(n_shifts, flat.shape[0] // n_shifts)


def from_blocks(blocks: torch.Tensor) -> torch.Tensor:
    """Flatten ``[N_s, N]`` blocks back into the shift-major flat layout.

    This is the inverse of :func:`to_blocks`. For contiguous input the
    result is a view; otherwise a contiguous copy is made.

    """
    if blocks.dim() != 2:
        msg = f"Blocks must be 2-D, got shape {tuple(blocks.shape)}"
        raise DimensionMismatch(msg)
    return blocks.reshape(-1)
