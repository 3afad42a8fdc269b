"""JSON rendering of results and error envelopes.

Results go to stdout and errors to stderr, each as exactly one JSON
document, compact or indented depending on settings.
"""

import json
import typing as t

import typer

from ...domain.app_error import AppError

# Printed when even the error envelope cannot be serialised
FALLBACK_ERROR_ENVELOPE = (
    '{"error":{"category":"internal","exit_code":1,'
    '"message":"Failed serializing error output"}}'
)


def render_json(value: t.Any, compact: bool) -> str:
    """Serialise ``value`` as strict JSON.

    Raises:
        TypeError: If ``value`` holds objects JSON cannot represent
        ValueError: If ``value`` holds NaN or infinite floats
    """
    if compact:
        return json.dumps(
            value, ensure_ascii=False, allow_nan=False, separators=(",", ":")
        )
    return json.dumps(value, ensure_ascii=False, allow_nan=False, indent=2)


def emit_payload(value: t.Any, compact: bool) -> None:
    """Print a successful result to stdout.

    Raises:
        AppError: Internal error if the payload cannot be serialised
    """
    try:
        rendered = render_json(value, compact)
    except (TypeError, ValueError) as e:
        raise AppError.internal(f"Failed serializing response output: {e}") from e
    typer.echo(rendered)


def emit_error(error: AppError, compact: bool) -> None:
    """Print an error envelope to stderr.

    Raises:
        typer.Exit: With code 1 if the envelope cannot be serialised
    """
    try:
        rendered = render_json(error.to_json(), compact)
    except (TypeError, ValueError):
        typer.echo(FALLBACK_ERROR_ENVELOPE, err=True)
        raise typer.Exit(code=1)
    typer.echo(rendered, err=True)
