"""Unit tests for pause-aware elapsed-time accounting.

All tests use a frozen VirtualTimeSource, so every instant is an exact
integer number of nanoseconds and results can be compared with ``==``.

Test Techniques Used:
    - Specification-based Testing: Totals and per-step values for
      hand-computed timelines
    - Boundary Value Analysis: Steps coinciding with pause and resume
      instants (strict-less-than tie-break)
    - Metamorphic Testing: Adding pauses after a step does not change
      it; steps inside a pause read the pause instant
"""

from __future__ import annotations

import pytest

from timebench._errors import NotStartedError
from timebench._stopwatch import Stopwatch, TimeUnit
from timebench.testing import VirtualTimeSource


@pytest.fixture
def clock(frozen_time: VirtualTimeSource) -> VirtualTimeSource:
    return frozen_time


def advance(clock: VirtualTimeSource, ms: int) -> None:
    clock.add_shift(ms / 1000)


# ---------------------------------------------------------------------------
# Total elapsed
# ---------------------------------------------------------------------------


class TestTotalElapsed:
    """Technique: Specification-based Testing."""

    def test_start_stop(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.stop()
        advance(clock, 500)

        assert sw.elapsed_milliseconds() == 10.0

    def test_running_reads_current_time(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 5)
        assert sw.elapsed_milliseconds() == 5.0
        advance(clock, 5)
        assert sw.elapsed_milliseconds() == 10.0

    def test_non_decreasing_while_running(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        readings = []
        for _ in range(5):
            advance(clock, 3)
            readings.append(sw.elapsed_microseconds())

        assert readings == sorted(readings)

    def test_closed_pause_is_excluded(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        advance(clock, 100)
        sw.resume()
        advance(clock, 10)
        sw.stop()

        assert sw.elapsed_milliseconds() == 20.0

    def test_multiple_pauses_are_excluded(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        for _ in range(3):
            advance(clock, 10)
            sw.pause()
            advance(clock, 40)
            sw.resume()
        advance(clock, 10)
        sw.stop()

        assert sw.elapsed_milliseconds() == 40.0

    def test_open_pause_freezes_while_running(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        advance(clock, 1000)

        assert sw.elapsed_milliseconds() == 10.0

    def test_stop_while_paused_freezes_at_pause(
        self, clock: VirtualTimeSource
    ) -> None:
        """Stopping later does not count the open pause."""
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        advance(clock, 100)
        sw.stop()

        assert sw.elapsed_milliseconds() == 10.0

    def test_open_pause_after_closed_pauses(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        advance(clock, 50)
        sw.resume()
        advance(clock, 20)
        sw.pause()
        advance(clock, 70)
        sw.stop()

        assert sw.elapsed_milliseconds() == 30.0

    def test_immediate_resume_contributes_nothing(
        self, clock: VirtualTimeSource
    ) -> None:
        paused = Stopwatch.create_started(clock)
        plain = Stopwatch.create_started(clock)
        advance(clock, 10)
        paused.pause()
        paused.resume()
        advance(clock, 10)

        assert paused.elapsed_milliseconds() == plain.elapsed_milliseconds() == 20.0

    def test_unit_conversions(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 250)
        sw.stop()

        assert sw.elapsed_seconds() == 0.25
        assert sw.elapsed_milliseconds() == 250.0
        assert sw.elapsed_microseconds() == 250_000.0
        assert sw.elapsed() == sw.elapsed(TimeUnit.SECONDS)

    def test_not_started_raises(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create(clock)

        with pytest.raises(NotStartedError):
            sw.elapsed_milliseconds()

    def test_started_later_measures_from_start(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create(clock)
        advance(clock, 100)
        sw.start()
        advance(clock, 7)

        assert sw.elapsed_milliseconds() == 7.0


# ---------------------------------------------------------------------------
# Per-step elapsed
# ---------------------------------------------------------------------------


class TestStepElapsed:
    """Technique: Specification-based Testing — hand-computed timelines."""

    def test_no_steps(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)

        assert sw.elapsed_steps_milliseconds() == {}

    def test_steps_without_pauses(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.step("step1")
        advance(clock, 30)
        sw.step("step2")
        advance(clock, 160)
        sw.stop()

        assert sw.elapsed_steps_milliseconds() == {"step1": 10.0, "step2": 40.0}

    def test_insertion_order_is_kept(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        for name in ("zeta", "alpha", "mid"):
            advance(clock, 1)
            sw.step(name)

        assert list(sw.elapsed_steps()) == ["zeta", "alpha", "mid"]

    def test_steps_with_pauses(self, clock: VirtualTimeSource) -> None:
        """Steps inside, between and after several pauses.

        Timeline (ms): pause@10, step1@110, resume@210, pause@230,
        resume@330, step2@340, pause@400, step3@500, stop@600.
        """
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        advance(clock, 100)
        sw.step("step1")
        advance(clock, 100)
        sw.resume()
        advance(clock, 20)
        sw.pause()
        advance(clock, 100)
        sw.resume()
        advance(clock, 10)
        sw.step("step2")
        advance(clock, 60)
        sw.pause()
        advance(clock, 100)
        sw.step("step3")
        advance(clock, 100)
        sw.stop()

        assert sw.elapsed_steps_milliseconds() == {
            "step1": 10.0,
            "step2": 40.0,
            "step3": 100.0,
        }
        assert sw.elapsed_milliseconds() == 100.0

    def test_step_units_are_scaled(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        advance(clock, 100)
        sw.resume()
        advance(clock, 30)
        sw.step("a")

        assert sw.elapsed_steps_seconds() == {"a": 0.04}
        assert sw.elapsed_steps_milliseconds() == {"a": 40.0}
        assert sw.elapsed_steps_microseconds() == {"a": 40_000.0}

    def test_two_steps_in_same_pause(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        advance(clock, 5)
        sw.step("a")
        advance(clock, 5)
        sw.step("b")
        advance(clock, 5)
        sw.resume()
        advance(clock, 5)
        sw.step("c")

        assert sw.elapsed_steps_milliseconds() == {"a": 10.0, "b": 10.0, "c": 15.0}

    def test_step_before_pause_is_unaffected(self, clock: VirtualTimeSource) -> None:
        """Pauses after a step never change that step's value."""
        with_pause = Stopwatch.create_started(clock)
        without = Stopwatch.create_started(clock)
        advance(clock, 12)
        with_pause.step("a")
        without.step("a")
        advance(clock, 3)
        with_pause.pause()
        advance(clock, 50)
        with_pause.resume()

        assert with_pause.elapsed_steps() == without.elapsed_steps()

    def test_step_inside_pause_reads_pause_instant(
        self, clock: VirtualTimeSource
    ) -> None:
        """A step during a pause equals a step taken as the pause began."""
        inside = Stopwatch.create_started(clock)
        at_pause = Stopwatch.create_started(clock)
        advance(clock, 10)
        inside.pause()
        at_pause.step("a")
        at_pause.pause()
        advance(clock, 25)
        inside.step("a")

        assert inside.elapsed_steps() == at_pause.elapsed_steps()

    def test_not_started_raises(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create(clock)

        with pytest.raises(NotStartedError):
            sw.elapsed_steps_milliseconds()

    def test_queries_do_not_mutate(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        sw.step("a")

        first = sw.elapsed_steps()
        first["a"] = -1.0

        assert sw.elapsed_steps() == {"a": 0.01}
        assert sw.is_paused()


# ---------------------------------------------------------------------------
# Tie-break at identical instants
# ---------------------------------------------------------------------------


class TestBoundaryInstants:
    """Technique: Boundary Value Analysis — strict ``<`` comparisons."""

    def test_step_at_pause_instant_counts_before_pause(
        self, clock: VirtualTimeSource
    ) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        sw.step("a")
        advance(clock, 30)
        sw.resume()
        advance(clock, 5)
        sw.step("b")

        assert sw.elapsed_steps_milliseconds() == {"a": 10.0, "b": 15.0}

    def test_step_at_resume_instant_counts_inside_pause(
        self, clock: VirtualTimeSource
    ) -> None:
        sw = Stopwatch.create_started(clock)
        advance(clock, 10)
        sw.pause()
        advance(clock, 50)
        sw.resume()
        sw.step("at_resume")
        advance(clock, 5)
        sw.step("after")

        assert sw.elapsed_steps_milliseconds() == {"at_resume": 10.0, "after": 15.0}

    def test_step_at_start_instant(self, clock: VirtualTimeSource) -> None:
        sw = Stopwatch.create_started(clock)
        sw.step("zero")

        assert sw.elapsed_steps() == {"zero": 0.0}
