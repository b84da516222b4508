"""Application configuration via pydantic-settings.

Configuration is loaded from environment variables and/or ``.env``
files.  Variables carry the ``TIMEBENCH_`` prefix and nested models
use ``__`` as the delimiter, e.g. ``TIMEBENCH_REPORT__UNIT=us``.

The schema covers two concerns:

* **Logging** — level, format, optional file sink, rotation.
* **Report** — unit, precision and output format of benchmark reports.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from timebench._stopwatch import TimeUnit

# -------------------------------------------------------------------
# Sub-models (BaseModel, NOT BaseSettings, nested via composition)
# -------------------------------------------------------------------


class LoggingSettings(BaseModel):
    """Logging configuration.

    When ``file`` is set, logs are also written to a rotating file
    (size-based rotation, ``backup_count`` generations kept).  When
    ``None``, logs go to stderr only.

    The ``format`` field selects the output format:

    - ``"text"`` (default) — human-readable timestamped lines for
      terminal use.
    - ``"json"`` — structured JSON lines for log aggregators.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root log level.",
    )
    format: Literal["json", "text"] = Field(
        default="text",
        description=(
            "Log output format. "
            "'json' emits structured JSON lines; "
            "'text' emits human-readable timestamped lines."
        ),
    )
    file: str | None = Field(
        default=None,
        description="Optional log file path. ``None`` means stderr only.",
    )
    max_file_size_mb: Annotated[int, Field(ge=1)] = Field(
        default=10,
        description=(
            "Maximum log file size in megabytes before rotation. "
            "Only applies when ``file`` is set."
        ),
    )
    backup_count: Annotated[int, Field(ge=0)] = Field(
        default=3,
        description="Number of rotated log files to keep.",
    )


class ReportSettings(BaseModel):
    """Benchmark report rendering.

    Environment variables (with ``__`` nesting)::

        TIMEBENCH_REPORT__UNIT=us
        TIMEBENCH_REPORT__PRECISION=1
        TIMEBENCH_REPORT__FORMAT=json
    """

    unit: Literal["s", "ms", "us"] = Field(
        default="ms",
        description="Unit used for reported durations.",
    )
    precision: Annotated[int, Field(ge=0, le=9)] = Field(
        default=3,
        description="Decimal places in text reports.",
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Report output format.",
    )

    @property
    def time_unit(self) -> TimeUnit:
        return TimeUnit.from_symbol(self.unit)


# -------------------------------------------------------------------
# Root settings
# -------------------------------------------------------------------


class Settings(BaseSettings):
    """Root settings for timebench.

    Example ``.env``::

        TIMEBENCH_LOGGING__LEVEL=DEBUG
        TIMEBENCH_LOGGING__FORMAT=json
        TIMEBENCH_REPORT__UNIT=s
    """

    model_config = SettingsConfigDict(
        env_prefix="TIMEBENCH_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
    """``extra="ignore"`` keeps unrelated ``TIMEBENCH_*`` keys in a shared
    ``.env`` file from failing validation."""

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration.",
    )
    report: ReportSettings = Field(
        default_factory=ReportSettings,
        description="Report rendering configuration.",
    )
