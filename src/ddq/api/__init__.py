"""Datadog API access - request builders, classifier and execution engine."""

from .client import DatadogClient
from .engine import RequestEngine, normalise_method
from .requests import (
    build_events_search,
    build_logs_search,
    build_metrics_query,
    build_raw_request,
    resolve_sort,
)

__all__ = [
    # Client
    "DatadogClient",
    # Engine
    "RequestEngine",
    "normalise_method",
    # Builders
    "build_logs_search",
    "build_metrics_query",
    "build_events_search",
    "build_raw_request",
    "resolve_sort",
]
