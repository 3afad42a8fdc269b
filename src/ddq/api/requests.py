"""Builders that turn subcommand inputs into LogicalRequests."""

import typing as t

from ..domain.exceptions import InvalidRequestError
from ..domain.requests import EventsQuery, LogicalRequest, LogsQuery, QueryParams

LOGS_SEARCH_PATH = "/api/v2/logs/events/search"
METRICS_QUERY_PATH = "/api/v1/query"
EVENTS_PATH = "/api/v2/events"

_SORT_FIELDS = {
    "asc": "timestamp",
    "desc": "-timestamp",
}


def resolve_sort(sort: str, resource: str) -> str:
    """Map ``asc``/``desc`` (any case) onto the API's sort field.

    Raises:
        InvalidRequestError: For any other value
    """
    field = _SORT_FIELDS.get(sort.lower())
    if field is None:
        raise InvalidRequestError(
            f"Invalid sort `{sort}`. Use `asc` or `desc` for {resource} queries."
        )
    return field


def build_logs_search(query: LogsQuery) -> LogicalRequest:
    """POST /api/v2/logs/events/search with filter, sort and page body."""
    page: dict[str, t.Any] = {"limit": query.limit}
    if query.cursor is not None:
        page["cursor"] = query.cursor

    body = {
        "filter": {
            "query": query.query,
            "from": query.from_time,
            "to": query.to_time,
        },
        "sort": resolve_sort(query.sort, "logs"),
        "page": page,
    }
    return LogicalRequest(method="POST", path=LOGS_SEARCH_PATH, body=body)


def build_metrics_query(query: str, from_unix: int, to_unix: int) -> LogicalRequest:
    """GET /api/v1/query; timestamps must already be unix seconds."""
    params: QueryParams = (
        ("query", query),
        ("from", str(from_unix)),
        ("to", str(to_unix)),
    )
    return LogicalRequest(method="GET", path=METRICS_QUERY_PATH, params=params)


def build_events_search(query: EventsQuery) -> LogicalRequest:
    """GET /api/v2/events with filter/page/sort parameters."""
    params = [
        ("filter[from]", query.from_time),
        ("filter[to]", query.to_time),
        ("page[limit]", str(query.limit)),
        ("sort", resolve_sort(query.sort, "events")),
    ]
    if query.query is not None:
        params.append(("filter[query]", query.query))
    return LogicalRequest(method="GET", path=EVENTS_PATH, params=tuple(params))


def build_raw_request(
    method: str,
    path: str,
    params: t.Iterable[tuple[str, str]] = (),
    body: t.Any | None = None,
) -> LogicalRequest:
    """Pass a caller-supplied request through unchanged.

    The method is validated by the engine, not here.
    """
    return LogicalRequest(method=method, path=path, params=tuple(params), body=body)
