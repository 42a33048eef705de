from __future__ import annotations

from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Optional

# Jira Server sends 2025-12-17T14:00:00.000+0000, agile endpoints send RFC 3339.
JIRA_DATETIME_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
)


def parse_jira_datetime(value: Optional[str], to_utc: bool = True) -> Optional[datetime]:
    """Parse a Jira timestamp into an aware datetime.

    Naive values are taken as UTC. Returns None for empty or unparseable input
    so callers can skip the record instead of failing.
    """
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    parsed = None
    for layout in JIRA_DATETIME_FORMATS:
        try:
            parsed = datetime.strptime(value, layout)
            break
        except ValueError:
            continue
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    if to_utc:
        parsed = parsed.astimezone(timezone.utc)
    return parsed


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def month_range_utc(now: datetime):
    now = now.astimezone(timezone.utc)
    start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)
    if now.month == 12:
        next_month = datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        next_month = datetime(now.year, now.month + 1, 1, tzinfo=timezone.utc)
    end = next_month - timedelta(seconds=1)
    return start, end
