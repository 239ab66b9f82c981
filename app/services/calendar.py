"""Week arithmetic and date parsing for the booking calendar view."""

from __future__ import annotations

from datetime import datetime, timezone

import dateparser
from dateutil.relativedelta import MO, relativedelta

from app.domain.models import as_utc


def parse_calendar_date(raw: str | None, now: datetime) -> datetime | None:
    """Parse the calendar ``date`` parameter into a UTC datetime.

    ISO 8601 is tried first; anything else ("next monday", "in 2 weeks") is
    handed to ``dateparser`` relative to *now*. Returns ``None`` when the
    text cannot be understood.
    """
    if not raw:
        return now
    try:
        return as_utc(datetime.fromisoformat(raw))
    except ValueError:
        pass
    settings = {
        "PREFER_DATES_FROM": "future",
        "RELATIVE_BASE": now.replace(tzinfo=None),
        "RETURN_AS_TIMEZONE_AWARE": False,
    }
    result = dateparser.parse(raw, settings=settings)
    if result is None:
        return None
    return result.replace(tzinfo=timezone.utc)


def week_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """Return the Monday 00:00 start and the last instant of the Sunday
    of the week containing *moment*."""
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    start = midnight + relativedelta(weekday=MO(-1))
    end = start + relativedelta(weeks=1, microseconds=-1)
    return start, end
