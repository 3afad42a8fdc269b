"""Shared execution path for subcommands.

Runs an API operation on a fresh client, prints the result and turns
every failure into a JSON error envelope plus its exit code.
"""

import asyncio
import typing as t

import typer

from ..api.client import DatadogClient
from ..domain.app_error import AppError
from ..domain.exceptions import ConfigurationError
from ..domain.outcome import ClassifiedError, Outcome, Success
from ..infrastructure.logging import get_logger
from .output.rendering import emit_error, emit_payload
from .state import CLIState

Operation = t.Callable[[DatadogClient], t.Awaitable[Outcome]]

logger = get_logger(__name__)


def fail(error: AppError, compact: bool) -> t.NoReturn:
    """Print ``error`` and exit with its code."""
    emit_error(error, compact)
    raise typer.Exit(code=error.exit_code)


async def _run_operation(client: DatadogClient, operation: Operation) -> Outcome:
    async with client:
        return await operation(client)


def run_request(state: CLIState, operation: Operation) -> None:
    """Execute ``operation`` and render its outcome.

    Args:
        state: CLI state providing settings and the client factory
        operation: Coroutine function performing the API call. It may
            raise ``AppError`` for local validation failures.

    Raises:
        typer.Exit: With the error's exit code on any failure
    """
    compact = state.settings.compact_output

    try:
        client = state.create_client()
        outcome = asyncio.run(_run_operation(client, operation))

        match outcome:
            case Success(payload=payload):
                emit_payload(payload, compact)
            case ClassifiedError() as error:
                raise AppError.from_classified(error)

    except typer.Exit:
        # Re-raise typer.Exit to preserve exit codes
        raise
    except AppError as e:
        fail(e, compact)
    except ConfigurationError as e:
        fail(AppError.usage(str(e)), compact)
    except Exception as e:
        logger.debug(f"Unexpected {type(e).__name__} while running command: {e}")
        fail(AppError.internal(str(e) or type(e).__name__), compact)
