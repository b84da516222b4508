"""Stopwatch usage errors and structured error payloads.

Every precondition violation on a :class:`~timebench.Stopwatch` raises
its own subclass of :class:`StopwatchError`.  These are protocol errors
made by the caller: they are raised synchronously, never retried, and
there is nothing to recover from internally.

Hierarchy::

    StopwatchError
    ├── AlreadyStartedError
    ├── NotStartedError
    ├── AlreadyStoppedError
    ├── DuplicateStepError
    ├── AlreadyPausedError
    └── NotPausedError

For reporting (the CLI, log aggregators) :func:`build_error_payload`
converts an exception into a structured JSON-serialisable payload::

    {
        "error_type": "duplicate_step",
        "message": "Step \\"load\\" already used",
        "timestamp": "2026-02-14T12:34:56+00:00",
        "details": {"step": "load"}
    }

Unknown exceptions fall back to the generic ``"error"`` type.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class StopwatchError(Exception):
    """Base class for stopwatch usage errors."""


class AlreadyStartedError(StopwatchError):
    def __init__(self) -> None:
        super().__init__("Stopwatch was already started")


class NotStartedError(StopwatchError):
    def __init__(self) -> None:
        super().__init__("Stopwatch was not started")


class AlreadyStoppedError(StopwatchError):
    def __init__(self) -> None:
        super().__init__("Stopwatch was already stopped")


class DuplicateStepError(StopwatchError):
    """A step with the same name was already recorded.

    Attributes:
        name: The offending step name.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f'Step "{name}" already used')
        self.name = name


class AlreadyPausedError(StopwatchError):
    def __init__(self) -> None:
        super().__init__("Stopwatch is already paused")


class NotPausedError(StopwatchError):
    def __init__(self) -> None:
        super().__init__("Stopwatch is not paused")


DEFAULT_ERROR_TYPES: dict[type[Exception], str] = {
    AlreadyStartedError: "already_started",
    NotStartedError: "not_started",
    AlreadyStoppedError: "already_stopped",
    DuplicateStepError: "duplicate_step",
    AlreadyPausedError: "already_paused",
    NotPausedError: "not_paused",
}

# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ErrorPayload:
    """Immutable structured error payload."""

    error_type: str
    message: str
    timestamp: str
    details: dict[str, object] = field(default_factory=dict)

    def to_json(self) -> str:
        """Serialise to a JSON string."""
        return json.dumps(asdict(self))


# ---------------------------------------------------------------------------
# Payload builder
# ---------------------------------------------------------------------------


def build_error_payload(
    error: Exception,
    *,
    error_type_map: dict[type[Exception], str] | None = None,
    details: dict[str, object] | None = None,
    clock: Callable[[], datetime] | None = None,
) -> ErrorPayload:
    """Convert an exception into a structured :class:`ErrorPayload`.

    Looks up the exact class of the exception; subclasses are not matched.

    Args:
        error: The exception to convert.
        error_type_map: Mapping from exception types to machine-readable
            ``error_type`` strings.  Defaults to
            :data:`DEFAULT_ERROR_TYPES`.  Unmapped types become
            ``"error"``.
        details: Optional dict of additional context.  A
            :class:`DuplicateStepError` always contributes ``step``.
        clock: Optional callable returning a :class:`~datetime.datetime`.
            Defaults to ``datetime.now(UTC)``.

    Returns:
        A frozen dataclass ready for serialisation.
    """
    resolved_map = DEFAULT_ERROR_TYPES if error_type_map is None else error_type_map
    error_type = resolved_map.get(type(error), "error")
    now = clock() if clock is not None else datetime.now(UTC)
    merged: dict[str, object] = dict(details or {})
    if isinstance(error, DuplicateStepError):
        merged.setdefault("step", error.name)
    return ErrorPayload(
        error_type=error_type,
        message=str(error),
        timestamp=now.isoformat(),
        details=merged,
    )
