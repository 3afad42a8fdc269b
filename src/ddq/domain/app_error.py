"""User-facing error categories, exit codes and the JSON error envelope."""

import typing as t
from enum import Enum

from .exceptions import DdqError
from .outcome import ClassifiedError, ErrorKind


class ErrorCategory(Enum):
    """Categories surfaced to callers, each with its own exit code."""

    USAGE = "usage"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    UPSTREAM = "upstream"
    API = "api"
    INTERNAL = "internal"


EXIT_CODES: dict[ErrorCategory, int] = {
    ErrorCategory.INTERNAL: 1,
    ErrorCategory.USAGE: 2,
    ErrorCategory.AUTH: 3,
    ErrorCategory.RATE_LIMIT: 4,
    ErrorCategory.UPSTREAM: 5,
    ErrorCategory.API: 6,
}

RATE_LIMIT_STATUS = 429


class AppError(DdqError):
    """A failure ready to be rendered for the caller.

    ``retryable`` tells the *caller* that running the same command again
    may succeed; it is only set for upstream failures.
    """

    def __init__(
        self,
        category: ErrorCategory,
        message: str,
        *,
        status: int | None = None,
        retry_after_ms: int | None = None,
    ) -> None:
        self.category = category
        self.message = message
        self.status = status
        self.retry_after_ms = retry_after_ms
        super().__init__(message)

    @classmethod
    def usage(cls, message: str) -> "AppError":
        return cls(ErrorCategory.USAGE, message)

    @classmethod
    def internal(cls, message: str) -> "AppError":
        return cls(ErrorCategory.INTERNAL, message)

    @classmethod
    def from_classified(cls, error: ClassifiedError) -> "AppError":
        """Map an engine error onto its user-facing category."""
        match error.kind:
            case ErrorKind.INVALID_REQUEST:
                return cls.usage(error.message)
            case ErrorKind.AUTH:
                return cls(ErrorCategory.AUTH, error.message, status=error.status)
            case ErrorKind.RATE_LIMITED:
                return cls(
                    ErrorCategory.RATE_LIMIT,
                    error.message,
                    status=RATE_LIMIT_STATUS,
                    retry_after_ms=error.retry_after_ms,
                )
            case ErrorKind.RETRYABLE:
                return cls(ErrorCategory.UPSTREAM, error.message, status=error.status)
            case ErrorKind.API_ERROR:
                return cls(ErrorCategory.API, error.message, status=error.status)
            case _:
                t.assert_never(error.kind)

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.category]

    @property
    def retryable(self) -> bool:
        return self.category is ErrorCategory.UPSTREAM

    def to_json(self) -> dict[str, t.Any]:
        """Build the ``{"error": {...}}`` envelope.

        ``status`` is left out for usage and internal errors, which never
        reach the network. ``retry_after_ms`` is only present for rate
        limiting, where it may be null.
        """
        body: dict[str, t.Any] = {
            "category": self.category.value,
            "exit_code": self.exit_code,
        }
        if self.category not in (ErrorCategory.USAGE, ErrorCategory.INTERNAL):
            body["status"] = self.status
        body["retryable"] = self.retryable
        if self.category is ErrorCategory.RATE_LIMIT:
            body["retry_after_ms"] = self.retry_after_ms
        body["message"] = self.message
        return {"error": body}
