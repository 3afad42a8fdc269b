"""Resolution of CLI time expressions to unix timestamps."""

import re
from datetime import datetime, timedelta, timezone

from .exceptions import TimeExpressionError

_INTEGER = re.compile(r"[+-]?\d+")

_UNITS = {
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}


def parse_to_unix(expr: str, now: datetime) -> int:
    """Convert a time expression to unix seconds.

    Supported forms:
        - ``now``
        - unix seconds, e.g. ``1700000000``
        - relative offsets, e.g. ``now-15m``, ``now-2d`` (units s, m, h, d, w)
        - RFC3339 timestamps with an explicit offset, e.g.
          ``2024-01-01T00:00:00Z``

    Args:
        expr: The expression to resolve
        now: Reference instant for ``now`` and relative offsets

    Returns:
        Unix timestamp in seconds

    Raises:
        TimeExpressionError: If the expression matches none of the forms
    """
    trimmed = expr.strip()
    if trimmed == "now":
        return int(now.timestamp())

    if _INTEGER.fullmatch(trimmed):
        return int(trimmed)

    if trimmed.startswith("now-"):
        return _parse_relative(trimmed.removeprefix("now-"), now)

    return _parse_rfc3339(trimmed)


def _parse_relative(offset: str, now: datetime) -> int:
    if len(offset) < 2:
        raise TimeExpressionError(
            f"Invalid relative time `{offset}`. Expected e.g. now-15m."
        )

    quantity, unit = offset[:-1], offset[-1]
    if not _INTEGER.fullmatch(quantity):
        raise TimeExpressionError(f"Invalid relative duration quantity `{quantity}`")

    step = _UNITS.get(unit)
    if step is None:
        raise TimeExpressionError(
            f"Invalid relative duration unit `{unit}`. Use one of s,m,h,d,w."
        )

    try:
        return int((now - step * int(quantity)).timestamp())
    except OverflowError as exc:
        raise TimeExpressionError(f"Relative time `now-{offset}` is out of range") from exc


def _parse_rfc3339(value: str) -> int:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise TimeExpressionError(f"Unsupported time format `{value}`") from exc

    # RFC3339 requires an offset; naive timestamps are ambiguous
    if parsed.tzinfo is None:
        raise TimeExpressionError(f"Unsupported time format `{value}`")

    return int(parsed.astimezone(timezone.utc).timestamp())
