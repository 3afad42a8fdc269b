"""Logs command implementation."""

from typing import Optional

import typer

from ...domain.requests import LogsQuery
from ..runner import run_request
from ..state import CLIState


def logs(
    ctx: typer.Context,
    query: str = typer.Argument(..., metavar="QUERY", help="Datadog log query string"),
    from_time: str = typer.Option(
        "now-15m",
        "--from",
        help="Start time; RFC3339 or relative expressions like now-15m",
    ),
    to_time: str = typer.Option(
        "now", "--to", help="End time; RFC3339 or relative expressions like now"
    ),
    limit: int = typer.Option(50, "--limit", min=0, help="Result count"),
    sort: str = typer.Option("desc", "--sort", help="Sort order: asc or desc"),
    cursor: Optional[str] = typer.Option(
        None, "--cursor", help="Pagination cursor from previous response"
    ),
) -> None:
    """Query logs via /api/v2/logs/events/search.

    Examples:
        ddq logs "service:web status:error"
        ddq logs "service:web" --from now-1h --limit 10 --sort asc
    """
    state: CLIState = ctx.obj

    logs_query = LogsQuery(
        query=query,
        from_time=from_time,
        to_time=to_time,
        limit=limit,
        sort=sort,
        cursor=cursor,
    )
    run_request(state, lambda client: client.query_logs(logs_query))
