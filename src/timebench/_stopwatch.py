"""Stopwatch with named steps and pause/resume.

A :class:`Stopwatch` records instants read from a
:class:`~timebench._clock.TimeSource` and derives elapsed durations
from them on demand.  Recording is the only mutation; every
``elapsed*`` query is a pure function of the recorded instants (plus
one fresh ``now()`` while the stopwatch is still running).

Lifecycle::

    NOT_STARTED ──start()──▶ RUNNING ──stop()──▶ STOPPED
                              │   ▲
                       pause()│   │resume()
                              ▼   │
                              PAUSED ──stop()──▶ STOPPED

``PAUSED`` is a sub-state of running: :meth:`Stopwatch.is_running`
stays true while paused.  Steps and ``stop()`` are accepted while
paused.

Paused time is never counted.  A pause that is still open freezes the
reported time at the instant it began, even if ``stop()`` is called
much later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Self

from timebench._clock import SystemTimeSource, TimeSource
from timebench._errors import (
    AlreadyPausedError,
    AlreadyStartedError,
    AlreadyStoppedError,
    DuplicateStepError,
    NotPausedError,
    NotStartedError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


class TimeUnit(Enum):
    """Output unit for elapsed queries.

    The value is the number of nanoseconds in one unit.
    """

    SECONDS = 1_000_000_000
    MILLISECONDS = 1_000_000
    MICROSECONDS = 1_000

    @property
    def divisor(self) -> int:
        return self.value

    @property
    def symbol(self) -> str:
        return _UNIT_SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> TimeUnit:
        """Look up a unit by its short symbol (``s``, ``ms``, ``us``)."""
        for unit, candidate in _UNIT_SYMBOLS.items():
            if candidate == symbol:
                return unit
        choices = ", ".join(_UNIT_SYMBOLS.values())
        msg = f"Unknown time unit {symbol!r}. Choose from: {choices}"
        raise ValueError(msg)


_UNIT_SYMBOLS = {
    TimeUnit.SECONDS: "s",
    TimeUnit.MILLISECONDS: "ms",
    TimeUnit.MICROSECONDS: "us",
}


class StopwatchState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class PauseInterval:
    """A pause window.  ``end`` is ``None`` while the pause is open."""

    start: int
    end: int | None = None


# ---------------------------------------------------------------------------
# Stopwatch
# ---------------------------------------------------------------------------


class Stopwatch:
    """Elapsed-time stopwatch with steps and pause/resume.

    Instances are owned by a single caller and are not thread-safe;
    use one stopwatch per thread.

    Args:
        time_source: Source of instants.  Defaults to
            :class:`~timebench._clock.SystemTimeSource`.

    Usage::

        sw = Stopwatch.create_started()
        load()
        sw.step("load")
        sw.pause()
        unmeasured()
        sw.resume()
        process()
        sw.stop()
        sw.elapsed_milliseconds()
        sw.elapsed_steps_milliseconds()  # {"load": ...}
    """

    def __init__(self, time_source: TimeSource | None = None) -> None:
        self._time_source: TimeSource = time_source or SystemTimeSource()
        self._start: int | None = None
        self._stop: int | None = None
        self._steps: dict[str, int] = {}
        self._closed_pauses: list[PauseInterval] = []
        self._open_pause: int | None = None

    # -- construction ------------------------------------------------------

    @classmethod
    def create(cls, time_source: TimeSource | None = None) -> Self:
        """Create a stopwatch that has not been started."""
        return cls(time_source)

    @classmethod
    def create_started(cls, time_source: TimeSource | None = None) -> Self:
        """Create a stopwatch and start it immediately."""
        instance = cls(time_source)
        instance._start = instance._time_source.now()
        logger.debug("Stopwatch created started at %d", instance._start)
        return instance

    # -- mutators ----------------------------------------------------------

    def start(self) -> None:
        """Start the stopwatch.

        Raises:
            AlreadyStartedError: If the stopwatch was already started.
        """
        if self._start is not None:
            raise AlreadyStartedError
        self._start = self._time_source.now()
        logger.debug("Stopwatch started at %d", self._start)

    def stop(self) -> None:
        """Stop the stopwatch.  Permitted while paused.

        Raises:
            NotStartedError: If the stopwatch was not started.
            AlreadyStoppedError: If the stopwatch was already stopped.
        """
        self._require_running()
        self._stop = self._time_source.now()
        logger.debug("Stopwatch stopped at %d", self._stop)

    def step(self, name: str) -> None:
        """Mark a named step.  Permitted while paused.

        Raises:
            NotStartedError: If the stopwatch was not started.
            AlreadyStoppedError: If the stopwatch was already stopped.
            DuplicateStepError: If *name* was already used.  No state
                changes in that case.
        """
        self._require_running()
        if name in self._steps:
            raise DuplicateStepError(name)
        self._steps[name] = self._time_source.now()
        logger.debug("Step %r marked at %d", name, self._steps[name])

    def pause(self) -> None:
        """Pause the stopwatch.

        Raises:
            NotStartedError: If the stopwatch was not started.
            AlreadyStoppedError: If the stopwatch was already stopped.
            AlreadyPausedError: If the stopwatch is already paused.
        """
        self._require_running()
        if self._open_pause is not None:
            raise AlreadyPausedError
        self._open_pause = self._time_source.now()
        logger.debug("Stopwatch paused at %d", self._open_pause)

    def resume(self) -> None:
        """Resume a paused stopwatch.

        Raises:
            NotStartedError: If the stopwatch was not started.
            AlreadyStoppedError: If the stopwatch was already stopped.
            NotPausedError: If the stopwatch is not paused.
        """
        self._require_running()
        if self._open_pause is None:
            raise NotPausedError
        interval = PauseInterval(self._open_pause, self._time_source.now())
        self._closed_pauses.append(interval)
        self._open_pause = None
        logger.debug("Stopwatch resumed at %d", interval.end)

    # -- accessors ---------------------------------------------------------

    def was_started(self) -> bool:
        """True once started, even after stopping."""
        return self._start is not None

    def is_running(self) -> bool:
        """True between start and stop, paused or not."""
        return self._start is not None and self._stop is None

    def was_stopped(self) -> bool:
        return self._stop is not None

    def is_paused(self) -> bool:
        """True while running with an open pause.

        A paused stopwatch that gets stopped is no longer paused.
        """
        return self.is_running() and self._open_pause is not None

    def step_count(self) -> int:
        return len(self._steps)

    @property
    def state(self) -> StopwatchState:
        if self._start is None:
            return StopwatchState.NOT_STARTED
        if self._stop is not None:
            return StopwatchState.STOPPED
        if self._open_pause is not None:
            return StopwatchState.PAUSED
        return StopwatchState.RUNNING

    @property
    def pauses(self) -> tuple[PauseInterval, ...]:
        """All pause windows in chronological order, the open one last."""
        if self._open_pause is None:
            return tuple(self._closed_pauses)
        return (*self._closed_pauses, PauseInterval(self._open_pause))

    # -- queries -----------------------------------------------------------

    def elapsed(self, unit: TimeUnit = TimeUnit.SECONDS) -> float:
        """Running time from start to stop (or now), excluding pauses.

        Raises:
            NotStartedError: If the stopwatch was not started.
        """
        start = self._require_started()
        end = self._stop if self._stop is not None else self._time_source.now()
        paused = sum(p.end - p.start for p in self._closed_pauses if p.end is not None)
        if self._open_pause is not None:
            end = self._open_pause
        return (end - start - paused) / unit.divisor

    def elapsed_steps(self, unit: TimeUnit = TimeUnit.SECONDS) -> dict[str, float]:
        """Running time at each step, in step order, excluding pauses.

        A step marked while paused reads the time at which that pause
        began.  Comparisons are strict: a step at exactly the pause
        instant counts as before the pause, a step at exactly the
        resume instant counts as inside it.

        Raises:
            NotStartedError: If the stopwatch was not started.
        """
        start = self._require_started()
        pauses = self.pauses
        result: dict[str, float] = {}

        # Steps and pauses are both chronological, so one forward scan
        # with a shared cursor reconciles them.
        cursor = 0
        paused = 0
        frozen_at: int | None = None
        for name, instant in self._steps.items():
            effective = instant
            while True:
                if frozen_at is None:
                    if cursor < len(pauses) and pauses[cursor].start < instant:
                        frozen_at = pauses[cursor].start
                        continue
                    break
                end = pauses[cursor].end
                if end is not None and end < instant:
                    paused += end - frozen_at
                    cursor += 1
                    frozen_at = None
                    continue
                effective = frozen_at
                break
            result[name] = (effective - start - paused) / unit.divisor
        return result

    def elapsed_seconds(self) -> float:
        return self.elapsed(TimeUnit.SECONDS)

    def elapsed_milliseconds(self) -> float:
        return self.elapsed(TimeUnit.MILLISECONDS)

    def elapsed_microseconds(self) -> float:
        return self.elapsed(TimeUnit.MICROSECONDS)

    def elapsed_steps_seconds(self) -> dict[str, float]:
        return self.elapsed_steps(TimeUnit.SECONDS)

    def elapsed_steps_milliseconds(self) -> dict[str, float]:
        return self.elapsed_steps(TimeUnit.MILLISECONDS)

    def elapsed_steps_microseconds(self) -> dict[str, float]:
        return self.elapsed_steps(TimeUnit.MICROSECONDS)

    # -- context manager ---------------------------------------------------

    def __enter__(self) -> Self:
        if self._start is None:
            self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self.is_running():
            self.stop()

    def __repr__(self) -> str:
        return f"<Stopwatch state={self.state.value} steps={len(self._steps)}>"

    # -- internals ---------------------------------------------------------

    def _require_started(self) -> int:
        if self._start is None:
            raise NotStartedError
        return self._start

    def _require_running(self) -> None:
        self._require_started()
        if self._stop is not None:
            raise AlreadyStoppedError
