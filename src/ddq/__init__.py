"""ddq - query Datadog APIs from the command line."""

__version__ = "0.1.0"
