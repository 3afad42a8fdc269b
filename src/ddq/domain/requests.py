"""Request models consumed by the request engine."""

import typing as t
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

QueryParams = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class LogicalRequest:
    """A fully formed API request, independent of transport.

    Query parameters keep the order they were given in. The same headers
    and body are re-sent unchanged on every retry.
    """

    method: str
    path: str
    params: QueryParams = ()
    body: t.Any | None = None


class LogsQuery(BaseModel):
    """Input for a logs search."""

    model_config = ConfigDict(frozen=True)

    query: str = Field(description="Datadog log query string")
    from_time: str = Field(
        default="now-15m", description="Start time, RFC3339 or relative"
    )
    to_time: str = Field(default="now", description="End time, RFC3339 or relative")
    limit: int = Field(default=50, ge=0, description="Maximum number of results")
    sort: str = Field(default="desc", description="Sort order: asc or desc")
    cursor: str | None = Field(
        default=None, description="Pagination cursor from a previous response"
    )


class EventsQuery(BaseModel):
    """Input for an events search."""

    model_config = ConfigDict(frozen=True)

    query: str | None = Field(default=None, description="Optional event query")
    from_time: str = Field(
        default="now-15m", description="Start time, RFC3339 or relative"
    )
    to_time: str = Field(default="now", description="End time, RFC3339 or relative")
    limit: int = Field(default=50, ge=0, description="Maximum number of results")
    sort: str = Field(default="desc", description="Sort order: asc or desc")
