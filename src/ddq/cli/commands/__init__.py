"""CLI subcommands."""

from .events import events
from .logs import logs
from .metrics import metrics
from .raw import raw

__all__ = ["events", "logs", "metrics", "raw"]
