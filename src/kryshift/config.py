"""Global configuration for kryshift.

This module provides global configuration settings for the kryshift library,
including the default data type for vectors and the default stopping rule
used when a solver is called without a monitor.

The default monitor declares convergence once

.. math::

    \\|r\\| \\le \\tau_{abs} + \\tau_{rel} \\, \\|b\\|

or once the iteration limit is reached.

Example
-------
>>> import kryshift as ks
>>> print(ks.config.DEFAULT_DTYPE)
torch.float64

>>> # Tighten the default stopping rule
>>> ks.config.RELATIVE_TOLERANCE = 1e-10

"""

from typing import Any

import torch


class KryshiftConfig:
    """Global configuration class for kryshift.

    This class holds global settings that affect the behavior of the library.

    Attributes
    ----------
    DEFAULT_DTYPE : torch.dtype
        Data type used by constructors that are not given one
        (operators, gallery matrices, :class:`~kryshift.fields.StackedVector`).
        Defaults to :obj:`torch.float64`.

    DEFAULT_DEVICE : torch.device
        Device (memory space) used by the same constructors.
        Defaults to CPU.

    ITERATION_LIMIT : int
        Iteration cap of the default monitor. Defaults to 500.

    RELATIVE_TOLERANCE : float
        Relative tolerance of the default monitor. Defaults to ``1e-5``.

    ABSOLUTE_TOLERANCE : float
        Absolute tolerance of the default monitor. Defaults to ``0.0``.

    CHECK_BREAKDOWN : bool
        When True, CG-M raises :class:`~kryshift.errors.BreakdownError` on a
        vanishing denominator instead of propagating ``nan``/``inf``.
        Defaults to False.

    Notes
    -----
    The tolerance defaults follow the classic ``default_monitor`` of
    GPU Krylov libraries. They suit single precision;
    double precision users usually lower ``RELATIVE_TOLERANCE``.

    """

    def __init__(self) -> None:
        """Initialize the configuration with default values."""
        self.reset()

    def reset(self) -> None:
        """Reset configuration to default values.

        Example
        -------
        >>> import kryshift as ks
        >>> ks.config.ITERATION_LIMIT = 10
        >>> ks.config.reset()
        >>> print(ks.config.ITERATION_LIMIT)
        500

        """
        self.DEFAULT_DTYPE: Any = torch.float64
        self.DEFAULT_DEVICE: Any = torch.device("cpu")
        self.ITERATION_LIMIT: int = 500
        self.RELATIVE_TOLERANCE: float = 1e-5
        self.ABSOLUTE_TOLERANCE: float = 0.0
        self.CHECK_BREAKDOWN: bool = False

    def __repr__(self) -> str:
        """Return a string representation of the configuration."""
        return (
            f"KryshiftConfig(\n"
            f"    DEFAULT_DTYPE={self.DEFAULT_DTYPE},\n"
            f"    DEFAULT_DEVICE={self.DEFAULT_DEVICE},\n"
            f"    ITERATION_LIMIT={self.ITERATION_LIMIT},\n"
            f"    RELATIVE_TOLERANCE={self.RELATIVE_TOLERANCE},\n"
            f"    ABSOLUTE_TOLERANCE={self.ABSOLUTE_TOLERANCE},\n"
            f"    CHECK_BREAKDOWN={self.CHECK_BREAKDOWN}\n"
            f")"
        )


# Global configuration instance
config = KryshiftConfig()
