"""Snapshot reports of stopwatch measurements.

:func:`build_report` reads a stopwatch once and freezes the result in
a :class:`StopwatchReport`, which can be rendered as aligned text for
terminals or serialised to JSON for machines.  Building a report never
mutates the stopwatch.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from timebench._stopwatch import Stopwatch, StopwatchState, TimeUnit


@dataclass(frozen=True, slots=True)
class StopwatchReport:
    """Immutable snapshot of a stopwatch's elapsed values."""

    state: StopwatchState
    unit: TimeUnit
    total: float
    steps: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "unit": self.unit.symbol,
            "total": self.total,
            "steps": dict(self.steps),
        }

    def to_json(self) -> str:
        """Serialise to a JSON string.  Step order is preserved."""
        return json.dumps(self.to_dict())

    def render_text(self, precision: int = 3) -> str:
        """Render one aligned ``name  value unit`` line per step plus total.

        Example output::

            load      12.503 ms
            process   40.018 ms
            total     52.774 ms
        """
        rows = [*self.steps.items(), ("total", self.total)]
        width = max(len(name) for name, _ in rows)
        values = [f"{value:.{precision}f}" for _, value in rows]
        value_width = max(len(v) for v in values)
        return "\n".join(
            f"{name:<{width}}  {value:>{value_width}} {self.unit.symbol}"
            for (name, _), value in zip(rows, values, strict=True)
        )


def build_report(
    stopwatch: Stopwatch,
    *,
    unit: TimeUnit = TimeUnit.MILLISECONDS,
) -> StopwatchReport:
    """Capture *stopwatch*'s current elapsed values.

    Raises:
        NotStartedError: If the stopwatch was never started.
    """
    return StopwatchReport(
        state=stopwatch.state,
        unit=unit,
        total=stopwatch.elapsed(unit),
        steps=stopwatch.elapsed_steps(unit),
    )
