"""Events command implementation."""

from typing import Optional

import typer

from ...domain.requests import EventsQuery
from ..runner import run_request
from ..state import CLIState


def events(
    ctx: typer.Context,
    query: Optional[str] = typer.Option(
        None, "--query", help="Optional Datadog event query string"
    ),
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
) -> None:
    """Query events via /api/v2/events.

    Examples:
        ddq events
        ddq events --query "source:deploy" --from now-1d --sort asc
    """
    state: CLIState = ctx.obj

    events_query = EventsQuery(
        query=query,
        from_time=from_time,
        to_time=to_time,
        limit=limit,
        sort=sort,
    )
    run_request(state, lambda client: client.query_events(events_query))
