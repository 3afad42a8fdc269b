"""Request execution engine with exponential backoff retries.

This module provides a RequestEngine that sends one LogicalRequest to the
API, retries transient failures according to a RetryPolicy and reduces
every terminal result to an Outcome.
"""

import asyncio
import re
import typing as t

import aiohttp
from yarl import URL

from ..domain.credentials import Credentials
from ..domain.exceptions import InvalidRequestError
from ..domain.outcome import ClassifiedError, ErrorKind, Outcome, Success
from ..domain.requests import LogicalRequest, QueryParams
from ..domain.retry import RetryPolicy
from ..infrastructure.http import AiohttpClient
from ..infrastructure.logging import get_logger
from .classifier import (
    TRANSPORT_ERRORS,
    Classification,
    ResponseClass,
    classify_response,
    decode_payload,
    describe_transport_error,
)

if t.TYPE_CHECKING:
    import loguru

# RFC 9110 token characters
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

# Hosts as yarl stores them: IDNA-encoded names and bare IPv4/IPv6 addresses
_HOST_CHARS = re.compile(r"[A-Za-z0-9._:-]+")

_JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

Sleep = t.Callable[[float], t.Awaitable[None]]


class RequestEngine:
    """Executes logical requests with retries and error classification.

    Implementation decisions:
    - The retry loop is an explicit loop over an attempt counter, so the
      number of attempts made is always known for error messages
    - ``execute`` never raises for network or API failures; they all
      come back as ``ClassifiedError``
    - 401/403 end the loop immediately, whatever budget remains
    - A 429 waits for ``Retry-After`` when the header carries seconds,
      otherwise for the computed backoff
    - The timeout applies to each attempt separately
    - Credentials go into request headers only and are never logged
    - Redirects are not followed; a 3xx is an API error
    """

    def __init__(
        self,
        client: AiohttpClient,
        base_url: str,
        credentials: Credentials,
        policy: RetryPolicy,
        timeout_seconds: float,
        logger: "loguru.Logger" = get_logger(__name__),
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """
        Initialise the engine.

        Args:
            client: Opened HTTP client used for every attempt
            base_url: API base URL that relative paths are appended to
            credentials: Keys attached as headers on every attempt
            policy: Retry budget and backoff window
            timeout_seconds: Timeout applied to each attempt independently
            logger: Logger for retry and failure diagnostics
            sleep: Awaitable used for backoff delays, in seconds
        """
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.policy = policy
        self.logger = logger
        self._credentials = credentials
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._sleep = sleep

    async def execute(self, request: LogicalRequest) -> Outcome:
        """
        Send ``request`` and return its single final outcome.

        Args:
            request: The request to execute; reused unchanged for retries

        Returns:
            ``Success`` with the decoded payload, or ``ClassifiedError``
        """
        try:
            method = normalise_method(request.method)
            url = self.resolve_url(request.path, request.params)
        except InvalidRequestError as e:
            self.logger.debug(f"Rejected request before sending: {e}")
            return ClassifiedError.invalid_request(str(e))

        headers = self._build_headers()
        attempt = 0

        while True:
            tries = attempt + 1
            try:
                status, response_headers, body = await self._send(
                    method, url, headers, request.body
                )
            except TRANSPORT_ERRORS as e:
                reason = describe_transport_error(e)
                if self.policy.can_retry(attempt):
                    await self._backoff(
                        method, url, attempt, self.policy.delay_ms(attempt), reason
                    )
                    attempt += 1
                    continue

                self.logger.debug(f"{method} {url} failed after {tries} attempt(s)")
                return _exhausted(reason, tries)

            verdict = classify_response(status, response_headers, body)

            match verdict.response_class:
                case ResponseClass.SUCCESS:
                    return Success(payload=decode_payload(body), attempts=tries)

                case ResponseClass.AUTH:
                    return self._fail(ErrorKind.AUTH, verdict, tries)

                case ResponseClass.RATE_LIMITED:
                    if self.policy.retry_on_rate_limit and self.policy.can_retry(
                        attempt
                    ):
                        delay_ms = (
                            verdict.retry_after_ms
                            if verdict.retry_after_ms is not None
                            else self.policy.delay_ms(attempt)
                        )
                        await self._backoff(
                            method, url, attempt, delay_ms, f"HTTP {status}"
                        )
                        attempt += 1
                        continue
                    return self._fail(ErrorKind.RATE_LIMITED, verdict, tries)

                case ResponseClass.RETRYABLE:
                    if self.policy.can_retry(attempt):
                        await self._backoff(
                            method,
                            url,
                            attempt,
                            self.policy.delay_ms(attempt),
                            f"HTTP {status}",
                        )
                        attempt += 1
                        continue
                    reason = f"Datadog API returned {status}"
                    if verdict.detail:
                        reason = f"{reason}: {verdict.detail}"
                    return _exhausted(reason, tries, status=status)

                case ResponseClass.API_ERROR:
                    return self._fail(ErrorKind.API_ERROR, verdict, tries)

                case _:
                    t.assert_never(verdict.response_class)

    def resolve_url(self, path: str, params: QueryParams = ()) -> URL:
        """
        Build the absolute request URL.

        Absolute ``http(s)://`` paths are used verbatim; anything else is
        appended to the base URL with a leading ``/``. Query parameters
        are appended in the given order.

        Raises:
            InvalidRequestError: If the result is not an absolute URL with
                a well-formed host
        """
        if path.startswith(("http://", "https://")):
            raw = path
        else:
            normalised_path = path if path.startswith("/") else f"/{path}"
            raw = f"{self.base_url}{normalised_path}"

        try:
            url = URL(raw)
        except ValueError as e:
            raise InvalidRequestError(f"Invalid request URL `{raw}`: {e}") from e

        if (
            not url.is_absolute()
            or not url.raw_host
            or not _HOST_CHARS.fullmatch(url.raw_host)
        ):
            raise InvalidRequestError(f"Invalid request URL `{raw}`")

        if params:
            url = url.extend_query(list(params))
        return url

    def _build_headers(self) -> dict[str, str]:
        return {**self._credentials.as_headers(), **_JSON_HEADERS}

    async def _send(
        self,
        method: str,
        url: URL,
        headers: dict[str, str],
        body: t.Any | None,
    ) -> tuple[int, t.Mapping[str, str], str]:
        """Perform one attempt and read the whole response body."""
        # Redirects are not followed: key headers must not leave the API origin
        kwargs: dict[str, t.Any] = {
            "headers": headers,
            "timeout": self._timeout,
            "allow_redirects": False,
        }
        if body is not None:
            kwargs["json"] = body

        async with self.client.request(method, url, **kwargs) as response:
            raw = await response.read()
            return (
                response.status,
                response.headers,
                raw.decode("utf-8", errors="replace"),
            )

    async def _backoff(
        self, method: str, url: URL, attempt: int, delay_ms: int, reason: str
    ) -> None:
        self.logger.warning(
            f"Retrying {method} {url} (attempt {attempt + 2}/"
            f"{self.policy.max_attempts}) in {delay_ms}ms: {reason}"
        )
        await self._sleep(delay_ms / 1000)

    def _fail(
        self, kind: ErrorKind, verdict: Classification, tries: int
    ) -> ClassifiedError:
        message = verdict.detail or f"Datadog API returned {verdict.status}"
        self.logger.debug(f"Request failed with HTTP {verdict.status} ({kind.value})")
        return ClassifiedError(
            kind=kind,
            message=message,
            status=verdict.status,
            retry_after_ms=verdict.retry_after_ms,
            attempts=tries,
        )


def normalise_method(method: str) -> str:
    """Upper-case ``method`` after checking it is a valid HTTP token.

    Raises:
        InvalidRequestError: If the method is empty or has invalid characters
    """
    candidate = method.strip()
    if not _METHOD_TOKEN.fullmatch(candidate):
        raise InvalidRequestError(f"Invalid HTTP method `{method}` for raw query.")
    return candidate.upper()


def _exhausted(
    reason: str, tries: int, status: int | None = None
) -> ClassifiedError:
    """Error for a retryable failure that used up the retry budget."""
    return ClassifiedError(
        kind=ErrorKind.RETRYABLE,
        message=f"Request failed after {tries} attempt(s): {reason}",
        status=status,
        attempts=tries,
    )
