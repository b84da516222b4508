"""Stopwatch factory port and default adapter.

Code that benchmarks itself should depend on
:class:`StopwatchFactoryPort` rather than calling
:meth:`Stopwatch.create` directly.  Production wiring passes a
:class:`StopwatchFactory`; tests pass
:class:`~timebench.testing.VirtualStopwatchFactory` so that every
stopwatch the code creates reads a controllable virtual clock.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from timebench._clock import SystemTimeSource, TimeSource
from timebench._stopwatch import Stopwatch


@runtime_checkable
class StopwatchFactoryPort(Protocol):
    """Creates stopwatches."""

    def create(self) -> Stopwatch:
        """Create a stopwatch that has not been started."""
        ...

    def create_started(self) -> Stopwatch:
        """Create a stopwatch and start it immediately."""
        ...


class StopwatchFactory:
    """Factory sharing one :class:`TimeSource` across its stopwatches.

    Args:
        time_source: Source handed to every created stopwatch.
            Defaults to :class:`SystemTimeSource`.
    """

    def __init__(self, time_source: TimeSource | None = None) -> None:
        self._time_source: TimeSource = time_source or SystemTimeSource()

    @property
    def time_source(self) -> TimeSource:
        return self._time_source

    def create(self) -> Stopwatch:
        return Stopwatch.create(self._time_source)

    def create_started(self) -> Stopwatch:
        return Stopwatch.create_started(self._time_source)
