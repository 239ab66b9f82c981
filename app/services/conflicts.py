"""Service for detecting scheduling conflicts between bookings."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from app.domain.models import Booking


def overlaps(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Return True if the half-open intervals ``[start_a, end_a)`` and
    ``[start_b, end_b)`` intersect.

    Exact boundary touches (end == start) are NOT considered overlaps.
    """
    return start_a < end_b and start_b < end_a


def find_conflicts(
    new_start: datetime,
    new_end: datetime,
    existing_bookings: Iterable[Booking],
    exclude_id: str | None = None,
) -> list[Booking]:
    """Return existing bookings that overlap with the given time range.

    The booking whose id equals *exclude_id* is skipped, so an update is
    never reported as conflicting with its own previous state.
    """
    return [
        booking
        for booking in existing_bookings
        if booking.id != exclude_id
        and overlaps(new_start, new_end, booking.start_time, booking.end_time)
    ]


def has_conflict(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_bookings: Iterable[Booking],
    exclude_id: str | None = None,
) -> bool:
    """Return True on the first stored booking overlapping the candidate."""
    return any(
        booking.id != exclude_id
        and overlaps(candidate_start, candidate_end, booking.start_time, booking.end_time)
        for booking in existing_bookings
    )
