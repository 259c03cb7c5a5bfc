"""Timestamps for log directories, result directories and event records."""

from datetime import datetime

# (seconds per unit, suffix), largest first
_UNITS = ((86400, "d"), (3600, "h"), (60, "m"), (1, "s"))


def now() -> str:
    """Compact stamp for session log directories, e.g. "20261018_142501"."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """ISO 8601 with microseconds; event records are ordered by this."""
    return datetime.now().isoformat()


def today() -> str:
    """Dated results directory name, e.g. "2026-10-18"."""
    return datetime.now().strftime("%Y-%m-%d")


def format_timestamp(iso_timestamp: str, relative: bool = False) -> str:
    """
    Render an event timestamp for the terminal.

    Absolute form is "YYYY-MM-DD HH:MM:SS"; relative form uses the largest
    whole unit ("42s ago", "3h ago", "2d from now"). Unparseable input is
    returned unchanged.
    """
    try:
        moment = datetime.fromisoformat(iso_timestamp)
    except (ValueError, TypeError):
        return iso_timestamp

    if not relative:
        return moment.strftime("%Y-%m-%d %H:%M:%S")

    seconds = int((datetime.now() - moment).total_seconds())
    suffix = "ago" if seconds >= 0 else "from now"
    seconds = abs(seconds)
    for size, unit in _UNITS:
        if seconds >= size or size == 1:
            return f"{seconds // size}{unit} {suffix}"
