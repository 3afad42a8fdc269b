"""Configuration management."""

from .settings import (
    Environment,
    LogLevel,
    OutputFormat,
    Settings,
    build_settings,
    normalize_base_url,
)

__all__ = [
    "Environment",
    "LogLevel",
    "OutputFormat",
    "Settings",
    "build_settings",
    "normalize_base_url",
]
