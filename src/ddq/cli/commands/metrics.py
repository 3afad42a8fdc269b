"""Metrics command implementation."""

from datetime import datetime, timezone

import typer

from ...api.client import DatadogClient
from ...domain.app_error import AppError
from ...domain.exceptions import TimeExpressionError
from ...domain.outcome import Outcome
from ...domain.time_expressions import parse_to_unix
from ..runner import run_request
from ..state import CLIState


def resolve_window(from_time: str, to_time: str, now: datetime) -> tuple[int, int]:
    """Resolve both ends of a metrics window against the same ``now``.

    Raises:
        AppError: Usage error for unparsable expressions or an empty window
    """
    try:
        from_unix = parse_to_unix(from_time, now)
        to_unix = parse_to_unix(to_time, now)
    except TimeExpressionError as e:
        raise AppError.usage(str(e)) from e

    if to_unix <= from_unix:
        raise AppError.usage(
            "Invalid metrics time window: `to` must be greater than `from`."
        )
    return from_unix, to_unix


def metrics(
    ctx: typer.Context,
    query: str = typer.Argument(
        ..., metavar="QUERY", help="Datadog metric query expression"
    ),
    from_time: str = typer.Option(
        "now-15m",
        "--from",
        help="Start time; unix seconds, RFC3339, now-15m, now-1h, now-2d",
    ),
    to_time: str = typer.Option(
        "now", "--to", help="End time; unix seconds, RFC3339, now"
    ),
) -> None:
    """Query metrics via /api/v1/query.

    Examples:
        ddq metrics "avg:system.cpu.user{*}"
        ddq metrics "sum:requests{env:prod}" --from now-1h --to now
    """
    state: CLIState = ctx.obj

    async def operation(client: DatadogClient) -> Outcome:
        from_unix, to_unix = resolve_window(
            from_time, to_time, datetime.now(timezone.utc)
        )
        return await client.query_metrics(query, from_unix, to_unix)

    run_request(state, operation)
