"""Command-line benchmark runner (Typer-based).

Provides :func:`build_cli` which constructs a Typer app whose ``run``
command times a sequence of shell commands with one stopwatch, marking
a step as each command finishes::

    $ timebench run "make build" "make test" --name build --name test
    build   8123.004 ms
    test   20448.911 ms
    total  20448.911 ms

Framework-level options (``--log-level``, ``--log-format``,
``--env-file``) override the :class:`~timebench._settings.Settings`
loaded from the environment.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from typing import Annotated, get_args

import typer
from pydantic import ValidationError

import timebench
from timebench._errors import StopwatchError, build_error_payload
from timebench._factory import StopwatchFactory, StopwatchFactoryPort
from timebench._logging import configure_logging
from timebench._report import build_report
from timebench._settings import LoggingSettings, ReportSettings, Settings

logger = logging.getLogger(__name__)

CommandRunner = Callable[[str], int]
"""Runs one shell command and returns its exit status."""

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_RUNTIME_ERROR = 3
EXIT_COMMAND_FAILED = 4

# ---------------------------------------------------------------------------
# Allowed values (extracted from the settings Literal types)
# ---------------------------------------------------------------------------

_VALID_LOG_LEVELS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["level"].annotation,
)
_VALID_LOG_FORMATS: tuple[str, ...] = get_args(
    LoggingSettings.model_fields["format"].annotation,
)
_VALID_UNITS: tuple[str, ...] = get_args(
    ReportSettings.model_fields["unit"].annotation,
)
_VALID_REPORT_FORMATS: tuple[str, ...] = get_args(
    ReportSettings.model_fields["format"].annotation,
)


def _run_shell(command: str) -> int:
    return subprocess.run(command, shell=True, check=False).returncode  # noqa: S602


def _check_choice(value: str | None, choices: tuple[str, ...], option: str) -> None:
    if value is not None and value not in choices:
        raise typer.BadParameter(
            f"Invalid value '{value}'. Choose from: {', '.join(choices)}",
            param_hint=f"'{option}'",
        )


def build_cli(
    *,
    factory: StopwatchFactoryPort | None = None,
    runner: CommandRunner | None = None,
) -> typer.Typer:
    """Construct the ``timebench`` Typer CLI.

    Args:
        factory: Creates the stopwatch used by ``run``.  Defaults to
            a :class:`StopwatchFactory` on the system clock.
        runner: Executes one command.  Defaults to running it through
            the shell with :func:`subprocess.run`.

    Returns:
        A configured :class:`typer.Typer` ready to invoke.
    """
    stopwatch_factory = factory or StopwatchFactory()
    run_command = runner or _run_shell

    cli = typer.Typer(
        help=f"timebench v{timebench.__version__}: time shell commands step by step",
    )

    @cli.callback(invoke_without_command=True)
    def main(
        ctx: typer.Context,
        version_flag: Annotated[
            bool | None,
            typer.Option(
                "--version",
                is_eager=True,
                help="Show version and exit.",
            ),
        ] = None,
    ) -> None:
        if version_flag:
            typer.echo(f"timebench v{timebench.__version__}")
            raise typer.Exit()
        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())

    @cli.command()
    def run(
        commands: Annotated[
            list[str],
            typer.Argument(help="Shell commands to time, in order."),
        ],
        names: Annotated[
            list[str] | None,
            typer.Option("--name", "-n", help="Step name for each command."),
        ] = None,
        keep_going: Annotated[
            bool,
            typer.Option("--keep-going", help="Continue after a failed command."),
        ] = False,
        unit: Annotated[
            str | None,
            typer.Option("--unit", help="Report unit (s, ms, us)."),
        ] = None,
        precision: Annotated[
            int | None,
            typer.Option("--precision", help="Decimal places in text reports."),
        ] = None,
        report_format: Annotated[
            str | None,
            typer.Option("--format", help="Report format (text, json)."),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option("--log-level", help="Override log level."),
        ] = None,
        log_format: Annotated[
            str | None,
            typer.Option("--log-format", help="Override log format."),
        ] = None,
        env_file: Annotated[
            str,
            typer.Option("--env-file", help="Path to .env file."),
        ] = ".env",
    ) -> None:
        """Run COMMANDS in sequence and report the time taken by each."""
        # -- validate enum-like options -------------------------------------
        if log_level is not None:
            log_level = log_level.upper()
        if log_format is not None:
            log_format = log_format.lower()
        _check_choice(log_level, _VALID_LOG_LEVELS, "--log-level")
        _check_choice(log_format, _VALID_LOG_FORMATS, "--log-format")
        _check_choice(unit, _VALID_UNITS, "--unit")
        _check_choice(report_format, _VALID_REPORT_FORMATS, "--format")
        labels = names or list(commands)
        if len(labels) != len(commands):
            raise typer.BadParameter(
                f"Got {len(labels)} names for {len(commands)} commands",
                param_hint="'--name'",
            )

        # -- build settings -------------------------------------------------
        try:
            settings = Settings(_env_file=env_file)  # type: ignore[call-arg]
            logging_updates = {
                key: value
                for key, value in (("level", log_level), ("format", log_format))
                if value is not None
            }
            report_updates = {
                key: value
                for key, value in (
                    ("unit", unit),
                    ("precision", precision),
                    ("format", report_format),
                )
                if value is not None
            }
            settings.logging = LoggingSettings.model_validate(
                settings.logging.model_dump() | logging_updates,
            )
            settings.report = ReportSettings.model_validate(
                settings.report.model_dump() | report_updates,
            )
        except ValidationError as exc:
            typer.echo(f"Configuration error: {exc}", err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR) from exc

        configure_logging(settings.logging, version=timebench.__version__)
        time_unit = settings.report.time_unit

        # -- run the commands -----------------------------------------------
        failed = False
        try:
            stopwatch = stopwatch_factory.create_started()
            for label, command in zip(labels, commands, strict=True):
                logger.info("Running %s", command)
                status = run_command(command)
                stopwatch.step(label)
                logger.info(
                    "Step %s finished with status %d",
                    label,
                    status,
                    extra={
                        "step": label,
                        "elapsed": stopwatch.elapsed(time_unit),
                        "unit": time_unit.symbol,
                    },
                )
                if status != 0:
                    failed = True
                    logger.warning("Command %r exited with status %d", command, status)
                    if not keep_going:
                        break
            stopwatch.stop()
            report = build_report(stopwatch, unit=time_unit)
        except StopwatchError as exc:
            typer.echo(build_error_payload(exc).to_json(), err=True)
            raise typer.Exit(EXIT_CONFIG_ERROR) from exc
        except OSError as exc:
            logger.error("Runtime error: %s", exc)
            raise typer.Exit(EXIT_RUNTIME_ERROR) from exc

        if settings.report.format == "json":
            typer.echo(report.to_json())
        else:
            typer.echo(report.render_text(settings.report.precision))

        if failed:
            raise typer.Exit(EXIT_COMMAND_FAILED)

    return cli


def main() -> None:
    """Console-script entry point."""
    build_cli()()
