"""Domain models: requests, outcomes, retry policy and errors."""

from .app_error import AppError, ErrorCategory
from .credentials import Credentials
from .exceptions import (
    ClientNotInitialisedError,
    ConfigurationError,
    DdqError,
    InvalidRequestError,
    TimeExpressionError,
)
from .outcome import ClassifiedError, ErrorKind, Outcome, Success
from .requests import EventsQuery, LogicalRequest, LogsQuery
from .retry import RetryPolicy
from .time_expressions import parse_to_unix

__all__ = [
    # Requests
    "LogicalRequest",
    "LogsQuery",
    "EventsQuery",
    "Credentials",
    # Outcomes
    "Outcome",
    "Success",
    "ClassifiedError",
    "ErrorKind",
    # Errors
    "AppError",
    "ErrorCategory",
    "DdqError",
    "ConfigurationError",
    "InvalidRequestError",
    "TimeExpressionError",
    "ClientNotInitialisedError",
    # Policies and helpers
    "RetryPolicy",
    "parse_to_unix",
]
