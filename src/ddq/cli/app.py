"""CLI application factory."""

from typing import Optional

import typer
from pydantic import ValidationError

from .. import __version__
from ..config.settings import (
    LogLevel,
    OutputFormat,
    Settings,
    build_settings,
    format_validation_error,
)
from ..domain.app_error import AppError
from ..infrastructure.logging import setup_logging
from .commands import events, logs, metrics, raw
from .runner import fail
from .state import CLIState


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ddq {__version__}")
        raise typer.Exit()


def create_cli_app(
    settings: Settings | None = None,
    state: CLIState | None = None,
) -> typer.Typer:
    """Create CLI application with optional settings or state override.

    Args:
        settings: Optional Settings override for testing; CLI flags and
            environment are ignored when given
        state: Optional CLIState override for testing, e.g. with a mocked
            client factory; takes precedence over ``settings``

    Returns:
        Configured Typer application with commands registered
    """
    app = typer.Typer(
        name="ddq",
        help="Query Datadog APIs from the command line and print JSON.",
        no_args_is_help=True,
    )

    @app.callback()
    def setup(
        ctx: typer.Context,
        site: Optional[str] = typer.Option(
            None,
            "--site",
            help=(
                "Datadog site suffix or full API base URL, e.g. datadoghq.eu "
                "or https://api.datadoghq.com (falls back to DD_SITE)"
            ),
        ),
        api_key: Optional[str] = typer.Option(
            None, "--api-key", help="Datadog API key (falls back to DD_API_KEY)"
        ),
        app_key: Optional[str] = typer.Option(
            None,
            "--app-key",
            help=(
                "Datadog application key (falls back to DD_APP_KEY or "
                "DD_APPLICATION_KEY)"
            ),
        ),
        compact: bool = typer.Option(
            False,
            "--compact",
            help="Print compact JSON. Deprecated: prefer --output json",
        ),
        output: Optional[OutputFormat] = typer.Option(
            None, "--output", case_sensitive=False, help="Output format"
        ),
        retries: Optional[int] = typer.Option(
            None,
            "--retries",
            help="Number of retry attempts for retryable upstream failures",
        ),
        retry_backoff_ms: Optional[int] = typer.Option(
            None,
            "--retry-backoff-ms",
            help="Base retry backoff in milliseconds (exponential, capped)",
        ),
        retry_max_backoff_ms: Optional[int] = typer.Option(
            None,
            "--retry-max-backoff-ms",
            help="Maximum retry backoff in milliseconds",
        ),
        retry_rate_limit: Optional[bool] = typer.Option(
            None,
            "--retry-rate-limit/--no-retry-rate-limit",
            help="Whether to retry rate-limited (HTTP 429) responses",
        ),
        timeout_seconds: Optional[float] = typer.Option(
            None,
            "--timeout-seconds",
            help="HTTP timeout per attempt in seconds",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Enable verbose output (DEBUG logging on stderr)",
        ),
        version: bool = typer.Option(
            False,
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit",
        ),
    ) -> None:
        """Global options available to all commands."""
        if state is not None:
            resolved_state = state
        elif settings is not None:
            resolved_state = CLIState(settings)
        else:
            try:
                resolved_settings = build_settings(
                    site=site,
                    api_key=api_key,
                    app_key=app_key,
                    compact=compact or None,
                    output=output,
                    retries=retries,
                    retry_backoff_ms=retry_backoff_ms,
                    retry_max_backoff_ms=retry_max_backoff_ms,
                    retry_rate_limit=retry_rate_limit,
                    timeout_seconds=timeout_seconds,
                    log_level=LogLevel.DEBUG if verbose else None,
                )
            except ValidationError as e:
                compact_output = compact or output is not OutputFormat.PRETTY
                fail(AppError.usage(format_validation_error(e)), compact_output)
            resolved_state = CLIState(resolved_settings)

        setup_logging(resolved_state.settings)
        ctx.obj = resolved_state

    app.command()(logs)
    app.command()(metrics)
    app.command()(events)
    app.command()(raw)

    return app
