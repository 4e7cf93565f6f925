# activities/datetime_utils.py
"""
Centralized datetime handling for activities.

All "has it started yet?" checks go through here so the enrollment path
and the dashboards agree on what "now" means.
"""
from datetime import datetime
from typing import Optional
from django.utils import timezone


def now() -> datetime:
    """
    Get current datetime (timezone-aware when USE_TZ=True).
    """
    return timezone.now()


def is_activity_upcoming(activity) -> bool:
    """Check if activity hasn't started yet."""
    if not activity.start_date:
        return False
    return activity.start_date > now()


def format_for_display(dt: Optional[datetime], format_str: str = "%A, %d %B %Y, %I:%M %p") -> Optional[str]:
    """
    Format datetime for human-readable display (emails).

    Default format: "Monday, 01 January 2026, 02:30 PM"
    """
    if dt is None:
        return None
    return dt.strftime(format_str)
