"""Serialized check-then-write for bookings and the records they point at.

Every write that can change the occupied time axis, or the users and
services a booking refers to, runs under one lock. Two concurrent requests
for overlapping slots cannot both pass the conflict check before either is
stored, and a user or service cannot disappear between the reference check
and the booking write. Bookings share a single global time axis, hence a
single lock.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any

from app.domain.errors import (
    BookingConflictError,
    BookingNotFoundError,
    InvalidBookingWindowError,
    ServiceInUseError,
    UnknownReferenceError,
)
from app.domain.models import Booking
from app.repos.memory import BookingRepository, ServiceRepository, UserRepository
from app.services.conflicts import has_conflict

logger = logging.getLogger(__name__)


class BookingScheduler:
    def __init__(
        self,
        booking_repo: BookingRepository,
        user_repo: UserRepository,
        service_repo: ServiceRepository,
    ) -> None:
        self.booking_repo = booking_repo
        self.user_repo = user_repo
        self.service_repo = service_repo
        self._lock = threading.Lock()

    def is_available(
        self, start: datetime, end: datetime, exclude_id: str | None = None
    ) -> bool:
        """Return True if ``[start, end)`` overlaps no stored booking."""
        return not has_conflict(start, end, self.booking_repo.list_all(), exclude_id)

    def create(self, booking: Booking) -> Booking:
        with self._lock:
            self._ensure_references(booking.user_ids, booking.service_ids)
            self._ensure_free(booking.start_time, booking.end_time)
            self.booking_repo.add(booking)
        logger.info(
            "Booking %s created for %s - %s",
            booking.id,
            booking.start_time.isoformat(),
            booking.end_time.isoformat(),
        )
        return booking

    def update(self, booking_id: str, changes: dict[str, Any]) -> Booking:
        """Apply a partial update to a stored booking.

        *changes* holds only the fields the caller supplied. The conflict
        check runs when either bound moves, and always excludes the booking
        being updated.
        """
        with self._lock:
            stored = self.booking_repo.get(booking_id)
            if stored is None:
                raise BookingNotFoundError(booking_id)

            self._ensure_references(
                changes.get("user_ids"), changes.get("service_ids")
            )

            start = changes.get("start_time") or stored.start_time
            end = changes.get("end_time") or stored.end_time
            if end <= start:
                raise InvalidBookingWindowError()

            if start != stored.start_time or end != stored.end_time:
                self._ensure_free(start, end, exclude_id=booking_id)

            updated = stored.model_copy(
                update={
                    **changes,
                    "start_time": start,
                    "end_time": end,
                    "updated_at": datetime.now(timezone.utc),
                }
            )
            self.booking_repo.add(updated)
        logger.info("Booking %s updated", booking_id)
        return updated

    def delete(self, booking_id: str) -> None:
        with self._lock:
            if self.booking_repo.get(booking_id) is None:
                raise BookingNotFoundError(booking_id)
            self.booking_repo.delete(booking_id)
        logger.info("Booking %s deleted", booking_id)

    def delete_user(self, user_id: str) -> list[str]:
        """Delete a user and drop them from every booking.

        Returns the ids of the bookings that lost the user.
        """
        with self._lock:
            self.user_repo.delete(user_id)
            affected = self.booking_repo.detach_user(user_id)
        logger.info("User %s deleted, detached from %d booking(s)", user_id, len(affected))
        return affected

    def delete_service(self, service_id: str) -> None:
        """Delete a service unless a stored booking still uses it."""
        with self._lock:
            if self.booking_repo.references_service(service_id):
                raise ServiceInUseError(service_id)
            self.service_repo.delete(service_id)
        logger.info("Service %s deleted", service_id)

    def _ensure_references(
        self, user_ids: list[str] | None, service_ids: list[str] | None
    ) -> None:
        missing_users = [uid for uid in user_ids or [] if self.user_repo.get(uid) is None]
        if missing_users:
            raise UnknownReferenceError("user", missing_users)
        missing_services = [
            sid for sid in service_ids or [] if self.service_repo.get(sid) is None
        ]
        if missing_services:
            raise UnknownReferenceError("service", missing_services)

    def _ensure_free(
        self, start: datetime, end: datetime, exclude_id: str | None = None
    ) -> None:
        conflicts = self.booking_repo.list_overlapping(start, end, exclude_id=exclude_id)
        if conflicts:
            conflicting_ids = [b.id for b in conflicts]
            logger.warning(
                "Rejected slot %s - %s, overlaps %s",
                start.isoformat(),
                end.isoformat(),
                ", ".join(conflicting_ids),
            )
            raise BookingConflictError(conflicting_ids)
