"""
SLA deadline monitor: at least 2 quotes within 24 hours of project creation.

Stateless - everything derives from the creation time and the quote count.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from .cooldown import parse_timestamp
from .models import SLAStatus

SLA_WINDOW = timedelta(hours=24)
SLA_TARGET_QUOTES = 2


def sla_deadline(created_at: datetime) -> datetime:
    return created_at + SLA_WINDOW


def evaluate_sla(
    created_at: datetime | str,
    quote_count: int,
    now: Optional[datetime] = None,
) -> SLAStatus:
    """
    Evaluate the quote guarantee for a project.

    Args:
        created_at: Project creation time (datetime or ISO string)
        quote_count: Quotes received so far
        now: Evaluation instant (defaults to current UTC time)

    Returns:
        SLAStatus with deadline, met flag and remaining time (never negative)
    """
    created = parse_timestamp(created_at)
    now = now or datetime.now(timezone.utc)
    deadline = sla_deadline(created)
    remaining = max(timedelta(0), deadline - now)

    return SLAStatus(
        deadline=deadline,
        met=quote_count >= SLA_TARGET_QUOTES,
        remaining=remaining,
        quote_count=quote_count,
        target_count=SLA_TARGET_QUOTES,
    )


def format_time_remaining(remaining: timedelta) -> str:
    """
    Human-readable countdown.

    Examples:
        2h30m -> "2시간 30분 남음"
        45m   -> "45분 남음"
        0     -> "마감됨"
    """
    total_seconds = int(remaining.total_seconds())
    if total_seconds <= 0:
        return "마감됨"

    hours, rest = divmod(total_seconds, 3600)
    minutes = rest // 60
    if hours > 0:
        return f"{hours}시간 {minutes}분 남음"
    return f"{minutes}분 남음"
