# vmatch-backend/core/datetime_utils.py
"""
Centralized datetime handling.

All deadline checks and date parsing go through these helpers so that
"now" has a single source of truth (and can be patched in tests).
"""
import math
from datetime import date, datetime, time, timedelta
from typing import Optional
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


def now() -> datetime:
    """
    Get current datetime (timezone-aware when USE_TZ=True).
    """
    return timezone.now()


def is_deadline_passed(deadline: Optional[datetime]) -> bool:
    """A missing deadline never blocks; otherwise the deadline instant itself is already too late."""
    if deadline is None:
        return False
    return now() >= deadline


def days_until(deadline: Optional[datetime]) -> Optional[int]:
    """Whole days (rounded up) until the deadline; 0 once it has passed."""
    if deadline is None:
        return None
    seconds = (deadline - now()).total_seconds()
    if seconds <= 0:
        return 0
    return math.ceil(seconds / 86400)


def parse_iso(iso_string: str, end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse an ISO 8601 date or datetime string.

    A bare date ("2026-05-01") becomes midnight, or 23:59:59.999999 when
    end_of_day is set so that it can close an inclusive range.
    Returns None if parsing fails.
    """
    if not iso_string:
        return None
    value = iso_string.strip()
    try:
        day = parse_date(value)
    except ValueError:
        day = None

    if day is not None:
        parsed = datetime.combine(day, time.max if end_of_day else time.min)
    else:
        try:
            parsed = parse_datetime(value.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is None:
            return None

    # Keep comparisons consistent with the project's USE_TZ setting
    if timezone.is_aware(parsed) and not timezone.is_aware(now()):
        parsed = timezone.make_naive(parsed)
    elif not timezone.is_aware(parsed) and timezone.is_aware(now()):
        parsed = timezone.make_aware(parsed)
    return parsed


def format_date_only(value) -> Optional[str]:
    """YYYY-MM-DD, the short form used by the dashboard views."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def window_end(days: int) -> datetime:
    return now() + timedelta(days=days)
