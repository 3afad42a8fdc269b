"""Classification of HTTP responses and transport failures.

Pure functions only: nothing here performs I/O or decides whether a
retry budget remains. The engine combines these verdicts with its
``RetryPolicy``.
"""

import asyncio
import json
import typing as t
from dataclasses import dataclass
from enum import Enum

import aiohttp

from ..domain.outcome import JsonValue

# Error messages never embed more than this many bytes of a response body
MAX_BODY_BYTES = 2048
TRUNCATION_MARKER = "...[truncated]"

RETRY_AFTER_HEADER = "Retry-After"

AUTH_STATUSES = frozenset({401, 403})
RATE_LIMIT_STATUS = 429
REQUEST_TIMEOUT_STATUS = 408

# Failures raised by aiohttp while sending or reading; all are retryable
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
)


class ResponseClass(Enum):
    """What a single HTTP response means for the retry loop."""

    SUCCESS = "success"
    AUTH = "auth"
    RATE_LIMITED = "rate_limited"
    RETRYABLE = "retryable"
    API_ERROR = "api_error"


@dataclass(frozen=True)
class Classification:
    """Verdict for one response, with the details error messages need."""

    response_class: ResponseClass
    status: int
    detail: str
    retry_after_ms: int | None = None


def classify_status(status: int) -> ResponseClass:
    """Map a status code to its response class.

    Checked in order auth, rate limit, retryable, generic error.
    """
    if 200 <= status < 300:
        return ResponseClass.SUCCESS
    if status in AUTH_STATUSES:
        return ResponseClass.AUTH
    if status == RATE_LIMIT_STATUS:
        return ResponseClass.RATE_LIMITED
    if status == REQUEST_TIMEOUT_STATUS or 500 <= status < 600:
        return ResponseClass.RETRYABLE
    return ResponseClass.API_ERROR


def classify_response(
    status: int, headers: t.Mapping[str, str], body: str
) -> Classification:
    """Classify a complete response.

    ``retry_after_ms`` is only populated for rate-limited responses; the
    header is ignored for every other class.
    """
    response_class = classify_status(status)
    retry_after_ms = (
        parse_retry_after(headers)
        if response_class is ResponseClass.RATE_LIMITED
        else None
    )
    return Classification(
        response_class=response_class,
        status=status,
        detail=truncate_body(body),
        retry_after_ms=retry_after_ms,
    )


def parse_retry_after(headers: t.Mapping[str, str]) -> int | None:
    """Read ``Retry-After`` as whole seconds and return milliseconds.

    Any other form, HTTP-dates included, yields None so the caller falls
    back to its computed backoff.
    """
    raw = headers.get(RETRY_AFTER_HEADER)
    if raw is None:
        return None

    value = raw.strip()
    if not value.isascii() or not value.isdigit():
        return None
    return int(value) * 1000


def truncate_body(body: str, limit: int = MAX_BODY_BYTES) -> str:
    """Cap ``body`` at ``limit`` UTF-8 bytes, marking truncation.

    Cuts on a character boundary, so the kept prefix may be a few bytes
    shorter than ``limit`` for multi-byte text.
    """
    encoded = body.encode("utf-8")
    if len(encoded) <= limit:
        return body
    kept = encoded[:limit].decode("utf-8", errors="ignore")
    return f"{kept}{TRUNCATION_MARKER}"


def _reject_constant(name: str) -> t.NoReturn:
    raise ValueError(f"Non-standard JSON constant {name}")


def decode_payload(body: str) -> JsonValue:
    """Decode a successful response body.

    An empty body becomes ``{}``. A body that is not strict JSON is
    wrapped as ``{"raw": body}``: a 2xx status is trusted even when the
    payload is not.
    """
    if not body.strip():
        return {}
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except ValueError:
        return {"raw": body}


def describe_transport_error(exc: BaseException) -> str:
    """Describe a transport failure for error messages and logs."""
    match exc:
        # Timeouts first: aiohttp's timeout errors are also ClientErrors
        case asyncio.TimeoutError():
            category = "Request timed out"
        case aiohttp.ClientSSLError():
            category = "SSL/TLS error"
        case aiohttp.ClientConnectorError():
            category = "Failed to connect"
        case aiohttp.ServerDisconnectedError():
            category = "Server disconnected"
        case aiohttp.ClientPayloadError():
            category = "Invalid response payload"
        case aiohttp.ClientOSError():
            category = "Network error"
        case aiohttp.InvalidURL():
            category = "Invalid request URL"
        case _:
            category = "Request failed"

    detail = str(exc)
    return f"{category}: {detail}" if detail else f"{category} ({type(exc).__name__})"
