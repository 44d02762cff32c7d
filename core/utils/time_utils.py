"""
Time formatting utilities
"""
from datetime import datetime
from typing import Optional


def format_elapsed_time(start_time: datetime, end_time: Optional[datetime] = None) -> str:
    """
    Format elapsed time as day-HH:MM:SS

    Args:
        start_time: Start time
        end_time: End time (defaults to now if not provided)

    Returns:
        Formatted string like "0-00:39:20" or "2-14:30:45"
    """
    if end_time is None:
        end_time = datetime.now(start_time.tzinfo)

    delta = end_time - start_time
    days = delta.days
    seconds = delta.seconds

    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    return f"{days}-{hours:02d}:{minutes:02d}:{secs:02d}"


def format_duration(seconds: float) -> str:
    """
    Format a duration given in seconds as HH:MM:SS or D-HH:MM:SS

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string like "0:05:00" or "1-12:30:00"
    """
    total_seconds = max(int(seconds), 0)
    days = total_seconds // 86400
    remaining_seconds = total_seconds % 86400

    hours = remaining_seconds // 3600
    mins = (remaining_seconds % 3600) // 60
    secs = remaining_seconds % 60

    if days > 0:
        return f"{days}-{hours:02d}:{mins:02d}:{secs:02d}"
    else:
        return f"{hours}:{mins:02d}:{secs:02d}"
