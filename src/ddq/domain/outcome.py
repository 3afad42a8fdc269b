"""Result of executing one logical request."""

import typing as t
from dataclasses import dataclass, field
from enum import Enum

JsonValue = t.Any


class ErrorKind(Enum):
    """Terminal failure classes produced by the request engine."""

    INVALID_REQUEST = "invalid_request"  # Rejected locally, never sent
    AUTH = "auth"  # 401/403, never retried
    RATE_LIMITED = "rate_limited"  # 429 with retries exhausted or disabled
    RETRYABLE = "retryable"  # Transport failure or 408/5xx, retries exhausted
    API_ERROR = "api_error"  # Any other non-2xx status


@dataclass(frozen=True)
class Success:
    """Decoded JSON payload of a 2xx response."""

    payload: JsonValue = field(default_factory=dict)
    attempts: int = 1


@dataclass(frozen=True)
class ClassifiedError:
    """A request that ended in one of the ``ErrorKind`` classes.

    ``attempts`` is the number of requests actually sent, so it is 0
    for requests rejected before reaching the network.
    """

    kind: ErrorKind
    message: str
    status: int | None = None
    retry_after_ms: int | None = None
    attempts: int = 0

    @classmethod
    def invalid_request(cls, message: str) -> "ClassifiedError":
        return cls(kind=ErrorKind.INVALID_REQUEST, message=message)


Outcome = Success | ClassifiedError
