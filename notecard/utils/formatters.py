"""
Value formatting utilities.
Human-readable durations, runtimes and relative times for metadata cards.
"""

import re
from typing import Optional

import isodate


def format_clock(duration_seconds: int) -> str:
    """
    Format a duration as a video clock.

    Args:
        duration_seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "05:30", "1:25:45")
    """
    if duration_seconds < 0:
        return "00:00"

    hours = duration_seconds // 3600
    minutes = (duration_seconds % 3600) // 60
    seconds = duration_seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    else:
        return f"{minutes:02d}:{seconds:02d}"


def iso_duration_to_seconds(value: Optional[str]) -> Optional[int]:
    """
    Parse an ISO 8601 duration ("PT1H2M3S") into whole seconds.

    Returns:
        Seconds, or None when the value is missing or not a duration
    """
    if not value or not isinstance(value, str):
        return None
    try:
        duration = isodate.parse_duration(value.strip())
    except (isodate.ISO8601Error, ValueError):
        return None
    # Year/month durations come back as isodate.Duration
    if isinstance(duration, isodate.Duration):
        duration = duration.totimedelta(start=isodate.parse_datetime("2000-01-01T00:00:00"))
    return int(duration.total_seconds())


def format_track_length(seconds: int) -> str:
    """Music track length as M:SS (e.g., "3:33")."""
    seconds = max(int(seconds), 0)
    return f"{seconds // 60}:{seconds % 60:02d}"


def parse_runtime_minutes(text: Optional[str]) -> Optional[int]:
    """
    Read a film runtime in minutes from page text.

    Understands "142 min", "142 minutes", "142m" and "2h 22m".
    """
    if not text:
        return None

    hours_match = re.search(r'(\d+)\s*h(?:ours?|rs?)?\b\s*(?:(\d+)\s*m(?:in(?:ute)?s?)?\b)?', text, re.IGNORECASE)
    if hours_match:
        return int(hours_match.group(1)) * 60 + int(hours_match.group(2) or 0)

    minutes_match = re.search(r'(\d+)\s*m(?:in(?:ute)?s?)?\b', text, re.IGNORECASE)
    if minutes_match:
        return int(minutes_match.group(1))

    return None


def format_runtime(minutes: int) -> str:
    """Runtime as "2h 5m", or "45m" under an hour."""
    hours, remaining = divmod(int(minutes), 60)
    return f"{hours}h {remaining}m" if hours > 0 else f"{int(minutes)}m"


def format_relative_time(created_utc: float, now: float) -> str:
    """
    Age of a post relative to now (both epoch seconds).

    Returns:
        "Xh ago" under a day, "Xd ago" otherwise
    """
    hours = max(int((now - created_utc) // 3600), 0)
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"
