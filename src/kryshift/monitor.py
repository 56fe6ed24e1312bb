"""Convergence monitors for the Krylov solvers.

A monitor decides, once per iteration, whether a solver should stop. The
solvers call :meth:`DefaultMonitor.finished` with the current residual
before every iteration (including the zeroth) and
:meth:`DefaultMonitor.increment` after every completed iteration. The solvers
keep no iteration cap of their own.

Stopping rule
-------------
The default monitor stops when

.. math::

    \\|r\\| \\le \\tau_{abs} + \\tau_{rel} \\, \\|b\\|

or when ``iteration_count >= iteration_limit``. Hitting the limit is not an
error: :meth:`DefaultMonitor.converged` simply returns False afterwards.

Example
-------
>>> import torch
>>> import kryshift as ks
>>> b = torch.ones(10, dtype=torch.float64)
>>> monitor = ks.DefaultMonitor(b, iteration_limit=100, relative_tolerance=1e-8)
>>> monitor.tolerance()  # 1e-8 * sqrt(10)

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kryshift.blas import nrm2
from kryshift.config import config

if TYPE_CHECKING:
    import torch

logger = logging.getLogger(__name__)


class DefaultMonitor:
    """Residual-norm stopping criterion with an iteration cap.

    Parameters
    ----------
    b : torch.Tensor
        Right-hand side; its norm scales the relative tolerance.
    iteration_limit : int, optional
        Maximum number of iterations. Defaults to ``config.ITERATION_LIMIT``.
    relative_tolerance : float, optional
        Defaults to ``config.RELATIVE_TOLERANCE``.
    absolute_tolerance : float, optional
        Defaults to ``config.ABSOLUTE_TOLERANCE``.

    Attributes
    ----------
    iteration_count : int
        Number of completed iterations.
    iteration_limit : int
        Iteration cap.
    relative_tolerance : float
        Relative tolerance.
    absolute_tolerance : float
        Absolute tolerance.

    """

    def __init__(
        self,
        b: torch.Tensor,
        iteration_limit: int | None = None,
        relative_tolerance: float | None = None,
        absolute_tolerance: float | None = None,
    ) -> None:
        self.b_norm = nrm2(b)
        self.iteration_limit = (
            config.ITERATION_LIMIT if iteration_limit is None else iteration_limit
        )
        self.relative_tolerance = (
            config.RELATIVE_TOLERANCE if relative_tolerance is None else relative_tolerance
        )
        self.absolute_tolerance = (
            config.ABSOLUTE_TOLERANCE if absolute_tolerance is None else absolute_tolerance
        )
        self.iteration_count = 0
        self._r_norm = float("inf")

    def tolerance(self) -> float:
        """Absolute residual-norm threshold for convergence."""
        return self.absolute_tolerance + self.relative_tolerance * self.b_norm

    def residual_norm(self) -> float:
        """Residual norm recorded by the last :meth:`finished` call."""
        return self._r_norm

    def relative_residual(self) -> float:
        """Last residual norm divided by ``||b||`` (or the norm itself if ``b = 0``)."""
        if self.b_norm > 0:
            return self._r_norm / self.b_norm
        return self._r_norm

    def converged(self) -> bool:
        """Whether the last recorded residual met the tolerance."""
        return self._r_norm <= self.tolerance()

    def finished(self, r: torch.Tensor) -> bool:
        """Record ``||r||`` and decide whether to stop.

        Parameters
        ----------
        r : torch.Tensor
            Current residual.

        Returns
        -------
        bool
            True if converged or the iteration limit is reached.

        """
        self._r_norm = nrm2(r)
        return self.converged() or self.iteration_count >= self.iteration_limit

    def increment(self) -> None:
        """Advance the iteration counter by one."""
        self.iteration_count += 1

    def reset(self) -> None:
        """Forget the iteration count and residual, keeping the tolerances."""
        self.iteration_count = 0
        self._r_norm = float("inf")

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(iteration_count={self.iteration_count}, "
            f"residual_norm={self._r_norm:.3e}, tolerance={self.tolerance():.3e})"
        )


def _log_start(monitor: DefaultMonitor) -> None:
    logger.info(
        "Solver will continue until residual norm %.3e or reaching %d iterations",
        monitor.tolerance(),
        monitor.iteration_limit,
    )


def _log_check(monitor: DefaultMonitor, done: bool) -> None:
    logger.info("%10d  %12.6e", monitor.iteration_count, monitor.residual_norm())
    if done:
        if monitor.converged():
            logger.info("Successfully converged after %d iterations.", monitor.iteration_count)
        else:
            logger.warning("Failed to converge after %d iterations.", monitor.iteration_count)


class VerboseMonitor(DefaultMonitor):
    """Monitor that logs the residual at every check.

    Progress goes to the ``kryshift.monitor`` logger at ``INFO`` level; a
    run that stops at the iteration limit is reported at ``WARNING``.

    """

    def __init__(
        self,
        b: torch.Tensor,
        iteration_limit: int | None = None,
        relative_tolerance: float | None = None,
        absolute_tolerance: float | None = None,
    ) -> None:
        super().__init__(b, iteration_limit, relative_tolerance, absolute_tolerance)
        _log_start(self)

    def finished(self, r: torch.Tensor) -> bool:
        """Record and log ``||r||``, then decide whether to stop."""
        done = super().finished(r)
        _log_check(self, done)
        return done


class ProgressReporter:
    """Log the progress of an arbitrary monitor.

    Forwards :meth:`finished` and :meth:`increment` to the wrapped monitor
    and logs exactly what :class:`VerboseMonitor` logs. Every other
    attribute is read from the wrapped monitor.

    Parameters
    ----------
    monitor : DefaultMonitor
        Monitor that keeps making the stopping decision.

    """

    def __init__(self, monitor: DefaultMonitor) -> None:
        self.monitor = monitor
        _log_start(monitor)

    def finished(self, r: torch.Tensor) -> bool:
        done = self.monitor.finished(r)
        _log_check(self.monitor, done)
        return done

    def increment(self) -> None:
        self.monitor.increment()

    def __getattr__(self, name: str) -> Any:
        return getattr(self.monitor, name)


def with_progress(monitor: DefaultMonitor, verbose: int) -> DefaultMonitor | ProgressReporter:
    """Return ``monitor``, wrapped in a :class:`ProgressReporter` when ``verbose > 0``.

    A :class:`VerboseMonitor` already logs and is returned unchanged.
    """
    if verbose > 0 and not isinstance(monitor, VerboseMonitor):
        return ProgressReporter(monitor)
    return monitor


__all__ = [
    "DefaultMonitor",
    "ProgressReporter",
    "VerboseMonitor",
    "with_progress",
]
