"""Memory spaces for kryshift vectors.

A vector lives either in host memory or in accelerator memory. kryshift
maps these memory spaces onto :class:`torch.device` types, so a vector's
memory space is simply the device of its tensor.

All vectors passed to one solver call must share a memory space; the
solvers check this with :func:`assert_same_memory_space` before doing any
arithmetic.

Example
-------
>>> import torch
>>> from kryshift.memory import MemorySpace, memory_space_of, is_available
>>> memory_space_of(torch.zeros(3))
<MemorySpace.HOST: 1>
>>> is_available(MemorySpace.HOST)
True

"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

import torch

from kryshift.errors import MemorySpaceMismatch, MemorySpaceNotAvailableError

if TYPE_CHECKING:
    from typing import Any


class MemorySpace(Enum):
    """Storage domains a vector can be materialized in.

    Attributes
    ----------
    HOST : auto
        Host (CPU) memory. Always available.
    DEVICE : auto
        Accelerator (CUDA) memory. Requires a CUDA build of PyTorch and a GPU.

    """

    HOST = auto()
    DEVICE = auto()


def memory_space_of(tensor: torch.Tensor) -> MemorySpace:
    """Return the memory space a tensor lives in.

    Parameters
    ----------
    tensor : torch.Tensor
        Any tensor.

    Returns
    -------
    MemorySpace
        ``HOST`` for CPU tensors, ``DEVICE`` otherwise.

    """
    return MemorySpace.HOST if tensor.device.type == "cpu" else MemorySpace.DEVICE


def is_available(space: MemorySpace) -> bool:
    """Check if a memory space can be used on this machine.

    Parameters
    ----------
    space : MemorySpace
        The memory space to check.

    Returns
    -------
    bool
        True if tensors can be allocated in ``space``.

    """
    if space is MemorySpace.HOST:
        return True
    return torch.cuda.is_available()


def device_for(space: MemorySpace) -> torch.device:
    """Return the torch device backing a memory space.

    Raises
    ------
    MemorySpaceNotAvailableError
        If ``space`` is not available.

    """
    if not is_available(space):
        raise MemorySpaceNotAvailableError(space)
    return torch.device("cpu") if space is MemorySpace.HOST else torch.device("cuda")


def to_memory_space(tensor: torch.Tensor, space: MemorySpace) -> torch.Tensor:
    """Transfer a tensor into a memory space.

    Returns the input unchanged if it already lives there.

    Parameters
    ----------
    tensor : torch.Tensor
        Tensor to transfer.
    space : MemorySpace
        Target memory space.

    Returns
    -------
    torch.Tensor
        Tensor in the target memory space.

    Raises
    ------
    MemorySpaceNotAvailableError
        If ``space`` is not available.

    """
    if memory_space_of(tensor) is space:
        return tensor
    return tensor.to(device_for(space))


def _device_key(device: Any) -> tuple[str, int]:
    device = torch.device(device)
    return device.type, device.index or 0


def assert_same_memory_space(*operands: Any) -> None:
    """Check that all operands share one device.

    Tensors and anything exposing a ``device`` attribute (e.g. a
    :class:`~kryshift.operators.LinearOperator`) are compared. Other
    arguments (e.g. ``None``) are ignored.

    Raises
    ------
    MemorySpaceMismatch
        If two operands live on different devices.

    """
    devices = {
        _device_key(obj.device) for obj in operands if getattr(obj, "device", None) is not None
    }
    if len(devices) > 1:
        names = ", ".join(sorted(f"{kind}:{index}" for kind, index in devices))
        msg = f"Operands live in different memory spaces: {names}"
        raise MemorySpaceMismatch(msg)


__all__ = [
    "MemorySpace",
    "assert_same_memory_space",
    "device_for",
    "is_available",
    "memory_space_of",
    "to_memory_space",
]
