"""aiohttp session wrapper with an explicit open/close lifecycle."""

import types
import typing as t

import aiohttp
from yarl import URL

from ...domain.exceptions import ClientNotInitialisedError
from .factories import create_secure_connector


class AiohttpClient:
    """Owns (or borrows) the aiohttp ClientSession used for API calls.

    A session passed in by the caller is used as-is and left open on
    close; otherwise one is created on ``open()`` with a certifi-backed
    connector and closed on ``close()``.

    Example:
        ```python
        async with AiohttpClient() as client:
            async with client.request("GET", url) as response:
                body = await response.read()
        ```
    """

    def __init__(self, session: aiohttp.ClientSession | None = None) -> None:
        self._session = session
        self._owns_session = session is None

    async def open(self) -> None:
        """Create the session if there is none yet. Safe to call twice."""
        if self._session is None:
            self._session = aiohttp.ClientSession(connector=create_secure_connector())

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()

    @property
    def closed(self) -> bool:
        return self._session is None or self._session.closed

    def request(
        self,
        method: str,
        url: URL | str,
        **kwargs: t.Any,
    ) -> t.Any:
        """Start a request; use the result as an async context manager.

        Raises:
            ClientNotInitialisedError: If called before ``open()``
        """
        if self._session is None:
            raise ClientNotInitialisedError(
                "HTTP client not initialised. Use 'async with' or call open()."
            )
        return self._session.request(method, url, **kwargs)

    async def __aenter__(self) -> "AiohttpClient":
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        await self.close()
