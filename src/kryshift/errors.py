"""Exception types raised by kryshift.

Precondition failures (wrong lengths, mixed memory spaces) are programmer
errors and surface immediately, before any arithmetic. Numerical breakdown is
not reported unless explicitly requested, see :class:`BreakdownError`.

"""

from __future__ import annotations


class KryshiftError(Exception):
    """Base class for all kryshift errors."""


class DimensionMismatch(KryshiftError, ValueError):
    """Raised when operand lengths violate a solver or kernel precondition.

    Parameters
    ----------
    message : str
        Description of the mismatch.

    """


class MemorySpaceMismatch(KryshiftError, ValueError):
    """Raised when operands of one call live in different memory spaces."""


class MemorySpaceNotAvailableError(KryshiftError):
    """Raised when a requested memory space is not available.

    Parameters
    ----------
    space : MemorySpace
        The memory space that was requested but not available.

    """

    def __init__(self, space: object) -> None:
        self.space = space
        name = getattr(space, "name", str(space))
        super().__init__(f"Memory space '{name}' is not available.")


class BreakdownError(KryshiftError, ArithmeticError):
    """Raised on a vanishing recurrence denominator.

    Only raised when breakdown checking is enabled; by default the solvers
    let ``nan``/``inf`` propagate.

    Parameters
    ----------
    quantity : str
        Name of the quantity that broke down (e.g. ``"pAp"``).
    iteration : int
        Iteration at which the breakdown was detected.

    """

    def __init__(self, quantity: str, iteration: int) -> None:
        self.quantity = quantity
        self.iteration = iteration
        super().__init__(f"Breakdown in '{quantity}' at iteration {iteration}.")
