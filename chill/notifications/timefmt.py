"""Human-readable phrasing for hangout times."""

from __future__ import annotations

from datetime import datetime, timezone

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def _span(delta: float) -> str:
    if delta < HOUR_MS:
        return _plural(int(delta // MINUTE_MS), "minute")
    if delta < DAY_MS:
        return _plural(int(delta // HOUR_MS), "hour")
    return _plural(int(delta // DAY_MS), "day")


def describe_time(time_ms: float | None, now_ms: float) -> str:
    """Describe when a hangout happens relative to now, e.g. "in 3 days"."""
    if time_ms is None:
        return "soon"
    delta = time_ms - now_ms
    if -MINUTE_MS < delta < MINUTE_MS:
        return "now"
    if delta < 0:
        return f"{_span(-delta)} ago"
    return f"in {_span(delta)}"


def happening(time_ms: float | None, now_ms: float) -> str:
    """The verb phrase for a notification body, e.g. "is happening in 3 days"."""
    when = describe_time(time_ms, now_ms)
    if when.endswith(" ago"):
        return f"happened {when}"
    return f"is happening {when}"


def format_date(time_ms: float) -> str:
    """Format an epoch-millisecond timestamp as a UTC calendar date and time."""
    moment = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)
    return moment.strftime("%a, %b %d at %H:%M UTC")
