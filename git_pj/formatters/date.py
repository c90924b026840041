"""Date and time formatting utilities."""

from datetime import datetime, timezone
from typing import Optional


def format_relative(moment: datetime, now: Optional[datetime] = None) -> str:
    """
    Format how long ago ``moment`` was, e.g. ``5m``, ``3h``, ``12d``.

    Args:
        moment: Timezone-aware datetime
        now: Reference time (defaults to the current UTC time)

    Returns:
        Short relative age string
    """
    now = now or datetime.now(timezone.utc)
    seconds = max(0, int((now - moment).total_seconds()))
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"
