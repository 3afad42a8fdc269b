"""Raw command implementation for endpoints without a dedicated command."""

import json
import typing as t
from pathlib import Path
from typing import Optional

import aiofiles
import typer

from ...api.client import DatadogClient
from ...domain.app_error import AppError
from ...domain.outcome import Outcome
from ..runner import run_request
from ..state import CLIState


def parse_query_params(pairs: t.Sequence[str]) -> list[tuple[str, str]]:
    """Split repeated ``key=value`` options on the first ``=``.

    Raises:
        AppError: Usage error for a missing ``=`` or an empty key
    """
    params = []
    for pair in pairs:
        key, separator, value = pair.partition("=")
        if not separator:
            raise AppError.usage(f"Invalid query param `{pair}`. Expected key=value.")
        if not key:
            raise AppError.usage(f"Query param key cannot be empty in `{pair}`.")
        params.append((key, value))
    return params


def _parse_json(text: str, context: str) -> t.Any:
    try:
        return json.loads(text)
    except ValueError as e:
        raise AppError.usage(f"{context}: {e}") from e


async def load_raw_body(body: str | None, body_file: Path | None) -> t.Any | None:
    """Resolve the request body from ``--body`` or ``--body-file``.

    Raises:
        AppError: Usage error if both are given, the file cannot be read
            or the content is not valid JSON
    """
    match (body, body_file):
        case (str(), Path()):
            raise AppError.usage(
                "Provide only one of --body or --body-file for raw requests."
            )
        case (str() as text, None):
            return _parse_json(text, "Invalid JSON passed to --body for raw request")
        case (None, Path() as path):
            try:
                async with aiofiles.open(path, encoding="utf-8") as file_handle:
                    contents = await file_handle.read()
            except (OSError, UnicodeDecodeError) as e:
                raise AppError.usage(
                    f"Failed reading raw body file `{path}`: {e}"
                ) from e
            return _parse_json(contents, f"Invalid JSON in raw body file `{path}`")
        case _:
            return None


def raw(
    ctx: typer.Context,
    method: str = typer.Option(
        ..., "--method", help="HTTP method (GET, POST, PUT, DELETE)"
    ),
    path: str = typer.Option(
        ..., "--path", help="Path beginning with /api/... or full URL"
    ),
    query_params: Optional[list[str]] = typer.Option(
        None, "--query", help="Query parameters as repeated key=value"
    ),
    body: Optional[str] = typer.Option(None, "--body", help="Raw JSON body string"),
    body_file: Optional[Path] = typer.Option(
        None, "--body-file", help="Read JSON body from file"
    ),
) -> None:
    """Generic Datadog API call for unsupported endpoints.

    Examples:
        ddq raw --method GET --path /api/v1/validate
        ddq raw --method GET --path /api/v2/metrics --query filter[tags]=env:prod
        ddq raw --method POST --path /api/v1/events --body-file event.json
    """
    state: CLIState = ctx.obj

    async def operation(client: DatadogClient) -> Outcome:
        params = parse_query_params(query_params or [])
        payload = await load_raw_body(body, body_file)
        return await client.raw(method, path, params, payload)

    run_request(state, operation)
