"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

import logging

from app.domain.bus import EventBus
from app.domain.events import (
    BookingCreated,
    BookingDeleted,
    BookingUpdated,
    StaffPicturesDiscarded,
    UserDeleted,
)
from app.repos.memory import BookingRepository
from app.services.storage import PictureStorage

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to the stores."""

    def __init__(
        self,
        bus: EventBus,
        booking_repo: BookingRepository,
        picture_storage: PictureStorage,
    ) -> None:
        self.bus = bus
        self.booking_repo = booking_repo
        self.picture_storage = picture_storage
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(BookingCreated, self.on_booking_created)
        self.bus.subscribe(BookingUpdated, self.on_booking_updated)
        self.bus.subscribe(BookingDeleted, self.on_booking_deleted)
        self.bus.subscribe(UserDeleted, self.on_user_deleted)
        self.bus.subscribe(StaffPicturesDiscarded, self.on_staff_pictures_discarded)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_booking_created(self, event: BookingCreated) -> None:
        stored = self.booking_repo.get(event.booking_id)
        if stored is None:
            return
        logger.info(
            "Booking %s holds %d user(s), %d service(s)",
            stored.id,
            len(stored.user_ids),
            len(stored.service_ids),
        )

    def on_booking_updated(self, event: BookingUpdated) -> None:
        if event.rescheduled:
            logger.info("Booking %s was rescheduled", event.booking_id)

    def on_booking_deleted(self, event: BookingDeleted) -> None:
        logger.info("Booking %s removed from the calendar", event.booking_id)

    def on_user_deleted(self, event: UserDeleted) -> None:
        for booking_id in event.booking_ids:
            logger.info("Booking %s lost user %s", booking_id, event.user_id)

    def on_staff_pictures_discarded(self, event: StaffPicturesDiscarded) -> None:
        removed = sum(1 for url in event.pictures if self.picture_storage.delete(url))
        logger.info(
            "Discarded %d/%d picture(s) of staff member %s",
            removed,
            len(event.pictures),
            event.staff_member_id,
        )
