"""Stacked vector container for multi-shift solves.

:class:`StackedVector` holds ``N_s`` vectors of length ``N`` in one flat
buffer, one block per shift, and exposes both layouts of
:mod:`kryshift.layouts`:

Example
-------
>>> import kryshift as ks
>>> x = ks.StackedVector.zeros(n_rows=100, n_shifts=4)
>>> print(x.flat.shape)  # [400]
>>> print(x.blocks.shape)  # [4, 100]
>>> x0 = x.block(0)  # solution for the first shift

"""

from __future__ import annotations

from typing import Any

import torch

from kryshift.config import config
from kryshift.layouts import LayoutType, from_blocks, to_blocks


class StackedVector:
    """Per-shift vectors stored shift-major in one buffer.

    Both layouts are views of the same memory, so writes through
    :attr:`blocks` are visible in :attr:`flat` and vice versa.

    Attributes
    ----------
    n_rows : int
        Length ``N`` of each per-shift vector.
    n_shifts : int
        Number of shifts ``N_s``.
    dtype : torch.dtype
        Data type of the buffer.
    device : torch.device
        Device (memory space) of the buffer.

    """

    def __init__(
        self,
        data: torch.Tensor,
        n_shifts: int,
        layout: LayoutType = "flat",
    ) -> None:
        """Initialize a stacked vector.

        Parameters
        ----------
        data : torch.Tensor
            Buffer. Shape depends on layout:
            - "flat": [N * n_shifts]
            - "blocks": [n_shifts, N]
        n_shifts : int
            Number of shifts.
        layout : LayoutType
            Layout of the input data.

        """
        if layout == "blocks":
            data = from_blocks(data)
        self._blocks = to_blocks(data, n_shifts)
        self._flat = data
        self._n_shifts = n_shifts

    @property
    def n_rows(self) -> int:
        """Length of one per-shift block."""
        return self._blocks.shape[1]

    @property
    def n_shifts(self) -> int:
        """Number of shifts."""
        return self._n_shifts

    @property
    def dtype(self) -> torch.dtype:
        """Data type of the buffer."""
        return self._flat.dtype

    @property
    def device(self) -> torch.device:
        """Device where the buffer is stored."""
        return self._flat.device

    @property
    def flat(self) -> torch.Tensor:
        """Buffer in flat layout ``[N * N_s]``."""
        return self._flat

    @property
    def blocks(self) -> torch.Tensor:
        """Buffer in blocks layout ``[N_s, N]`` (a view)."""
        return self._blocks

    def block(self, shift: int) -> torch.Tensor:
        """Return the vector belonging to one shift (a view)."""
        return self._blocks[shift]

    def clone(self) -> StackedVector:
        """Create a deep copy of this stacked vector."""
        return StackedVector(self._flat.clone(), self._n_shifts)

    def __len__(self) -> int:
        return self._flat.shape[0]

    def __repr__(self) -> str:
        return (
            f"StackedVector(n_rows={self.n_rows}, n_shifts={self.n_shifts}, "
            f"dtype={self.dtype}, device={self.device})"
        )

    @classmethod
    def zeros(
        cls,
        n_rows: int,
        n_shifts: int,
        dtype: Any = None,
        device: Any = None,
    ) -> StackedVector:
        """Create a zero-initialized stacked vector.

        Parameters
        ----------
        n_rows : int
            Length of each per-shift vector.
        n_shifts : int
            Number of shifts.
        dtype : torch.dtype, optional
            Data type. Defaults to ``config.DEFAULT_DTYPE``.
        device : torch.device, optional
            Device. Defaults to ``config.DEFAULT_DEVICE``.

        """
        if dtype is None:
            dtype = config.DEFAULT_DTYPE
        if device is None:
            device = config.DEFAULT_DEVICE
        data = torch.zeros(n_rows * n_shifts, dtype=dtype, device=device)
        return cls(data, n_shifts)

    @classmethod
    def random(
        cls,
        n_rows: int,
        n_shifts: int,
        dtype: Any = None,
        device: Any = None,
    ) -> StackedVector:
        """Create a stacked vector with standard normal entries.

        Complex dtypes get independent real and imaginary parts.

        """
        if dtype is None:
            dtype = config.DEFAULT_DTYPE
        if device is None:
            device = config.DEFAULT_DEVICE
        data = torch.randn(n_rows * n_shifts, dtype=dtype, device=device)
        return cls(data, n_shifts)
