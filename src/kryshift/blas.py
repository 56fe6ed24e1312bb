"""BLAS-like vector primitives.

The Krylov solvers are written against this small set of level-1
operations on 1-D tensors:

- :func:`dotc`: conjugate-aware inner product :math:`(u, v) = \\sum_i \\bar{u}_i v_i`
- :func:`axpy`: :math:`v \\leftarrow v + a u`
- :func:`scal`: :math:`v \\leftarrow a v`
- :func:`copy`, :func:`fill`
- :func:`nrm2`: Euclidean norm

Every binary operation requires equal-length operands and raises
:class:`~kryshift.errors.DimensionMismatch` otherwise. The mutating
primitives work in place and return their output for chaining.

Scalars returned by :func:`dotc` stay 0-d tensors on the operands' device,
so later divisions follow IEEE semantics (``inf``/``nan``) instead of
raising :class:`ZeroDivisionError`.

"""

from __future__ import annotations

from typing import Any

import torch

from kryshift.errors import DimensionMismatch


def _length(v: Any) -> int:
    return v.shape[0] if isinstance(v, torch.Tensor) else len(v)


def assert_same_dimensions(*arrays: Any) -> None:
    """Check that all arrays have the same length.

    Parameters
    ----------
    *arrays
        Tensors or sequences.

    Raises
    ------
    DimensionMismatch
        If any two lengths differ.

    """
    lengths = [_length(a) for a in arrays]
    if len(set(lengths)) > 1:
        msg = f"Array dimensions do not match: {lengths}"
        raise DimensionMismatch(msg)


def dotc(u: torch.Tensor, v: torch.Tensor) -> torch.Tensor:
    """Conjugate-aware inner product ``(u, v)``.

    For real tensors this is the ordinary dot product.

    Returns
    -------
    torch.Tensor
        0-d tensor of the operands' dtype.

    """
    assert_same_dimensions(u, v)
    return torch.vdot(u, v)


def nrm2(v: torch.Tensor) -> float:
    """Euclidean norm of ``v`` as a Python float."""
    return torch.linalg.vector_norm(v).item()


def axpy(u: torch.Tensor, v: torch.Tensor, alpha: Any) -> torch.Tensor:
    """Compute ``v += alpha * u`` in place."""
    assert_same_dimensions(u, v)
    return v.add_(u * alpha)


def scal(v: torch.Tensor, alpha: Any) -> torch.Tensor:
    """Compute ``v *= alpha`` in place."""
    return v.mul_(alpha)


def copy(src: torch.Tensor, dst: torch.Tensor) -> torch.Tensor:
    """Copy ``src`` into ``dst``."""
    assert_same_dimensions(src, dst)
    return dst.copy_(src)


def fill(v: torch.Tensor, value: Any) -> torch.Tensor:
    """Set every element of ``v`` to ``value``."""
    return v.fill_(value)


__all__ = [
    "assert_same_dimensions",
    "axpy",
    "copy",
    "dotc",
    "fill",
    "nrm2",
    "scal",
]
