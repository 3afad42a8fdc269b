"""Datadog API client: request builders wired to the execution engine."""

import types
import typing as t

from ..config.settings import Settings
from ..domain.exceptions import InvalidRequestError
from ..domain.outcome import ClassifiedError, Outcome
from ..domain.requests import EventsQuery, LogicalRequest, LogsQuery
from ..infrastructure.http import AiohttpClient
from ..infrastructure.logging import get_logger
from .engine import RequestEngine
from .requests import (
    build_events_search,
    build_logs_search,
    build_metrics_query,
    build_raw_request,
)

if t.TYPE_CHECKING:
    import loguru


class DatadogClient:
    """Facade over the API endpoints the CLI exposes.

    Every query method returns an ``Outcome``; requests rejected by the
    builders come back as an ``INVALID_REQUEST`` error without touching
    the network.
    """

    def __init__(
        self,
        engine: RequestEngine,
        http_client: AiohttpClient,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        self.engine = engine
        self.http_client = http_client
        self.logger = logger

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: AiohttpClient | None = None,
    ) -> "DatadogClient":
        """Wire a client from settings.

        Raises:
            ConfigurationError: If API or application key is missing
        """
        http_client = http_client or AiohttpClient()
        engine = RequestEngine(
            client=http_client,
            base_url=settings.base_url,
            credentials=settings.credentials(),
            policy=settings.retry_policy,
            timeout_seconds=settings.timeout_seconds,
        )
        return cls(engine=engine, http_client=http_client)

    async def __aenter__(self) -> "DatadogClient":
        await self.http_client.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        await self.http_client.close()

    async def query_logs(self, query: LogsQuery) -> Outcome:
        """Search logs via /api/v2/logs/events/search."""
        return await self._execute(build_logs_search, query)

    async def query_metrics(self, query: str, from_unix: int, to_unix: int) -> Outcome:
        """Query timeseries via /api/v1/query."""
        return await self._execute(build_metrics_query, query, from_unix, to_unix)

    async def query_events(self, query: EventsQuery) -> Outcome:
        """Search events via /api/v2/events."""
        return await self._execute(build_events_search, query)

    async def raw(
        self,
        method: str,
        path: str,
        params: t.Sequence[tuple[str, str]] = (),
        body: t.Any | None = None,
    ) -> Outcome:
        """Call any endpoint; ``path`` may also be a full URL."""
        return await self._execute(build_raw_request, method, path, params, body)

    async def _execute(
        self, builder: t.Callable[..., LogicalRequest], *args: t.Any
    ) -> Outcome:
        try:
            request = builder(*args)
        except InvalidRequestError as e:
            self.logger.debug(f"Request rejected by builder: {e}")
            return ClassifiedError.invalid_request(str(e))

        self.logger.debug(f"Executing {request.method} {request.path}")
        return await self.engine.execute(request)
