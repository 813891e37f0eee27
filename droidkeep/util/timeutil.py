"""Utility functions for time operations."""

from datetime import datetime, timezone
from typing import Optional, Union


def now_iso() -> str:
    """Get current timestamp in ISO 8601 format."""
    return datetime.now(timezone.utc).isoformat()


def timestamp_to_iso(timestamp: Union[int, float]) -> str:
    """Convert Unix timestamp to ISO 8601 format."""
    dt = datetime.fromtimestamp(timestamp, timezone.utc)
    return dt.isoformat()


def android_ms_to_iso(value: str) -> str:
    """Convert an Android millisecond timestamp string to ISO 8601 ("" if invalid)."""
    try:
        return timestamp_to_iso(int(value) / 1000)
    except (ValueError, TypeError):
        return ""


def format_duration(seconds: float) -> str:
    """Format duration in human readable format."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = seconds / 60
        return f"{minutes:.1f}m"
    else:
        hours = seconds / 3600
        return f"{hours:.1f}h"


def generate_session_name(timestamp: Optional[datetime] = None) -> str:
    """Name of a backup session directory, e.g. android_backup_20240131_235959."""
    if timestamp is None:
        timestamp = datetime.now()
    return f"android_backup_{timestamp.strftime('%Y%m%d_%H%M%S')}"
