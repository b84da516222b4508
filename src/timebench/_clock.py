"""Monotonic time source port and system adapter.

Provides :class:`TimeSource` (Protocol) and :class:`SystemTimeSource`
for reading instants.

**Why nanosecond integers?** ``time.perf_counter_ns()`` is monotonic,
has the highest resolution the platform offers, and returns an ``int``.
Keeping instants as integers makes every difference exact; precision is
only lost once, when a duration is divided into a float unit.  The
epoch is arbitrary — only *differences* between ``now()`` calls are
meaningful (PEP 418).
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class TimeSource(Protocol):
    """Monotonic source of instants for elapsed-time accounting.

    The default implementation wraps ``time.perf_counter_ns()``.
    Tests inject a :class:`~timebench.testing.VirtualTimeSource` to
    simulate elapsed time without sleeping.
    """

    def now(self) -> int:
        """Return the current instant in nanoseconds.

        Returns:
            An integer count of nanoseconds from an arbitrary epoch.
            Successive calls never decrease.
        """
        ...


class SystemTimeSource:
    """Production time source wrapping ``time.perf_counter_ns()``.

    Satisfies :class:`TimeSource` via structural subtyping — no
    base-class inheritance required (PEP 544).

    Usage::

        source = SystemTimeSource()
        start = source.now()
        # ... some work ...
        elapsed_ns = source.now() - start
    """

    def now(self) -> int:
        """Return monotonic time in nanoseconds."""
        return time.perf_counter_ns()
