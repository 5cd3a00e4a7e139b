"""Shared utility functions for liveconfig."""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def preview(text: str, limit: int) -> str:
    """Truncate text for log output.

    Args:
        text: The text to shorten.
        limit: Maximum number of characters kept.

    Returns:
        ``text`` unchanged when it fits, otherwise the first ``limit``
        characters followed by an ellipsis.
    """
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
