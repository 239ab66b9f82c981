"""Domain events emitted by the booking portal."""

from __future__ import annotations

from pydantic import BaseModel


class BookingCreated(BaseModel):
    """Fired after a new Booking is persisted."""

    booking_id: str


class BookingUpdated(BaseModel):
    booking_id: str
    rescheduled: bool = False


class BookingDeleted(BaseModel):
    booking_id: str


class UserDeleted(BaseModel):
    """Fired after a user is removed and detached from their bookings."""

    user_id: str
    booking_ids: list[str] = []


class StaffPicturesDiscarded(BaseModel):
    """Fired when staff pictures are replaced or their owner is deleted."""

    staff_member_id: str
    pictures: list[str]
