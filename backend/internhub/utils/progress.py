"""
Date and progress calculations for internship views.

Every function is pure: callers pass ``now`` explicitly so results are
deterministic. All datetimes are naive UTC, the storage convention of the
models; use ``to_utc_naive`` on anything that may carry a timezone.
"""

import math
from datetime import datetime, timezone
from typing import Optional

SECONDS_PER_DAY = 24 * 60 * 60


def to_utc_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values pass through"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def calculate_duration(start: datetime, end: datetime) -> str:
    """
    Human duration between two dates.

    Week and month buckets always floor: 13 days is "1 weeks".
    """
    diff_days = math.ceil(abs((end - start).total_seconds()) / SECONDS_PER_DAY)

    if diff_days < 7:
        return f"{diff_days} days"
    if diff_days < 30:
        return f"{diff_days // 7} weeks"
    return f"{diff_days // 30} months"


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; 12.5 must give 13
    return int(math.floor(value + 0.5))


def calculate_progress(start: datetime, end: datetime, now: datetime) -> int:
    """Elapsed share of the internship as an integer percentage in [0, 100]"""
    total = (end - start).total_seconds()
    if total <= 0:
        return 0

    elapsed = (now - start).total_seconds()
    progress = min(max(elapsed / total * 100, 0), 100)
    return _round_half_up(progress)


def calculate_days_left(end: datetime, now: datetime) -> int:
    """Raw days until ``end``, rounded up; negative once overdue"""
    return math.ceil((end - now).total_seconds() / SECONDS_PER_DAY)


def is_overdue(end: datetime, now: datetime) -> bool:
    return end < now


def format_display_date(value: Optional[datetime]) -> str:
    """Format as "Mon Jan 01 2024", the shape used on certificates and emails"""
    if value is None:
        return ""
    return value.strftime("%a %b %d %Y")
