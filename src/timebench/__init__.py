"""timebench.

A stopwatch for benchmarking code sections, with named steps and
pause/resume that are excluded from measured time.
"""

from importlib.metadata import PackageNotFoundError, version

from timebench._clock import SystemTimeSource, TimeSource
from timebench._errors import (
    AlreadyPausedError,
    AlreadyStartedError,
    AlreadyStoppedError,
    DuplicateStepError,
    ErrorPayload,
    NotPausedError,
    NotStartedError,
    StopwatchError,
    build_error_payload,
)
from timebench._factory import StopwatchFactory, StopwatchFactoryPort
from timebench._logging import JsonFormatter, configure_logging
from timebench._report import StopwatchReport, build_report
from timebench._settings import LoggingSettings, ReportSettings, Settings
from timebench._stopwatch import PauseInterval, Stopwatch, StopwatchState, TimeUnit

try:
    __version__ = version("timebench")
except PackageNotFoundError:
    # Running from a source checkout without installed metadata
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Stopwatch
    "PauseInterval",
    "Stopwatch",
    "StopwatchState",
    "TimeUnit",
    # Factory
    "StopwatchFactory",
    "StopwatchFactoryPort",
    # Time source
    "SystemTimeSource",
    "TimeSource",
    # Errors
    "AlreadyPausedError",
    "AlreadyStartedError",
    "AlreadyStoppedError",
    "DuplicateStepError",
    "ErrorPayload",
    "NotPausedError",
    "NotStartedError",
    "StopwatchError",
    "build_error_payload",
    # Report
    "StopwatchReport",
    "build_report",
    # Logging
    "JsonFormatter",
    "configure_logging",
    # Settings
    "LoggingSettings",
    "ReportSettings",
    "Settings",
]
