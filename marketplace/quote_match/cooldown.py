"""
Cooldown rules for distribution rounds.

Every round opens a fixed window during which the same project cannot be
distributed again. The store-backed tracker reads the latest round and
asks `check_cooldown` whether it still blocks.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Union

COOLDOWN_WINDOW = timedelta(minutes=30)


def compute_cooldown_until(distributed_at: datetime) -> datetime:
    """cooldown_until is always distributed_at + 30 minutes."""
    return distributed_at + COOLDOWN_WINDOW


def check_cooldown(
    latest: Optional[Union[Mapping[str, Any], datetime]],
    now: datetime,
) -> Optional[datetime]:
    """
    Decide whether a project is throttled.

    Args:
        latest: Most recent distribution record (mapping with `cooldown_until`),
            a bare cooldown deadline, or None if the project was never distributed
        now: Evaluation instant

    Returns:
        The blocking deadline if it is strictly in the future, else None
    """
    if latest is None:
        return None

    if isinstance(latest, datetime):
        cooldown_until = latest
    else:
        raw = latest.get("cooldown_until")
        if not raw:
            return None
        cooldown_until = parse_timestamp(raw)

    if cooldown_until > now:
        return cooldown_until
    return None


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
