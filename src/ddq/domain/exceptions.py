"""Custom exceptions for ddq."""


class DdqError(Exception):
    """Base exception for ddq errors."""

    pass


class ConfigurationError(DdqError):
    """Raised when settings are incomplete or inconsistent.

    Typically a missing API or application key, discovered when a client
    is built from settings rather than when settings are loaded.
    """

    pass


class InvalidRequestError(DdqError):
    """Raised when a request fails local validation.

    Covers bad sort values, malformed HTTP methods and URLs that cannot
    be parsed. Always raised before any network attempt is made.
    """

    pass


class TimeExpressionError(DdqError, ValueError):
    """Raised when a time expression cannot be resolved to unix seconds."""

    pass


class ClientNotInitialisedError(DdqError):
    """Raised when the HTTP client is used before its session is opened."""

    pass
