"""Booking routes: listing, weekly calendar, availability and CRUD.

Every write that touches the time axis goes through ``scheduler`` so the
overlap check and the write happen atomically.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import (
    booking_repo,
    event_bus,
    get_current_user,
    scheduler,
    service_repo,
    user_repo,
)
from app.domain.errors import (
    BookingConflictError,
    BookingNotFoundError,
    InvalidBookingWindowError,
    UnknownReferenceError,
)
from app.domain.events import BookingCreated, BookingDeleted, BookingUpdated
from app.domain.models import (
    AvailabilityResponse,
    Booking,
    BookingCreate,
    BookingRead,
    BookingStatus,
    BookingUpdate,
    CalendarBooking,
    MessageResponse,
    ServiceSummary,
    UserSummary,
    as_utc,
)
from app.services.calendar import parse_calendar_date, week_bounds

router = APIRouter(
    prefix="/bookings", tags=["bookings"], dependencies=[Depends(get_current_user)]
)

CONFLICT_DETAIL = "Time slot conflicts with existing booking"


# ── Helpers ───────────────────────────────────────────────────────────


def _users_of(booking: Booking) -> list[UserSummary]:
    users = (user_repo.get(uid) for uid in booking.user_ids)
    return [UserSummary.model_validate(u.model_dump()) for u in users if u is not None]


def _services_of(booking: Booking) -> list[ServiceSummary]:
    services = (service_repo.get(sid) for sid in booking.service_ids)
    return [
        ServiceSummary.model_validate(s.model_dump()) for s in services if s is not None
    ]


def _to_read(booking: Booking) -> BookingRead:
    return BookingRead(
        id=booking.id,
        start_time=booking.start_time,
        end_time=booking.end_time,
        status=booking.status,
        notes=booking.notes,
        users=_users_of(booking),
        services=_services_of(booking),
        created_at=booking.created_at,
        updated_at=booking.updated_at,
    )


def _to_calendar(booking: Booking) -> CalendarBooking:
    users = _users_of(booking)
    services = _services_of(booking)
    user_name = users[0].name if users else "Unknown"
    service_name = services[0].name if services else "Unknown Service"
    return CalendarBooking(
        id=booking.id,
        title=f"{user_name} - {service_name}",
        start=booking.start_time,
        end=booking.end_time,
        status=booking.status,
        notes=booking.notes,
        users=users,
        services=services,
    )


# ── Routes ────────────────────────────────────────────────────────────


@router.get("", response_model=list[BookingRead])
def list_bookings(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    status: BookingStatus | None = None,
    user_id: str | None = None,
    service_id: str | None = None,
) -> list[BookingRead]:
    bookings = booking_repo.list(
        start_date=as_utc(start_date) if start_date else None,
        end_date=as_utc(end_date) if end_date else None,
        status=status,
        user_id=user_id,
        service_id=service_id,
    )
    return [_to_read(b) for b in bookings]


@router.get("/calendar", response_model=list[CalendarBooking])
def calendar(date: str | None = None) -> list[CalendarBooking]:
    """Return the bookings of the Monday-to-Sunday week containing *date*.

    *date* may be ISO 8601 or a phrase such as "next monday"; it defaults
    to today.
    """
    moment = parse_calendar_date(date, datetime.now(timezone.utc))
    if moment is None:
        raise HTTPException(status_code=422, detail=f"Could not understand date {date!r}")
    week_start, week_end = week_bounds(moment)
    bookings = booking_repo.list(start_date=week_start, end_date=week_end)
    return [_to_calendar(b) for b in bookings]


@router.get("/availability", response_model=AvailabilityResponse)
def availability(
    start_time: datetime, end_time: datetime, exclude_id: str | None = None
) -> AvailabilityResponse:
    start, end = as_utc(start_time), as_utc(end_time)
    if end <= start:
        raise HTTPException(status_code=422, detail="end_time must be after start_time")
    return AvailabilityResponse(
        available=scheduler.is_available(start, end, exclude_id=exclude_id)
    )


@router.get("/{booking_id}", response_model=BookingRead)
def get_booking(booking_id: str) -> BookingRead:
    booking = booking_repo.get(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _to_read(booking)


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create_booking(payload: BookingCreate) -> BookingRead:
    try:
        booking = scheduler.create(Booking(**payload.model_dump()))
    except UnknownReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except BookingConflictError:
        raise HTTPException(status_code=409, detail=CONFLICT_DETAIL) from None

    event_bus.publish(BookingCreated(booking_id=booking.id))
    return _to_read(booking)


@router.put("/{booking_id}", response_model=BookingRead)
def update_booking(booking_id: str, payload: BookingUpdate) -> BookingRead:
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key == "notes"
    }
    try:
        booking = scheduler.update(booking_id, changes)
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found") from None
    except UnknownReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    except InvalidBookingWindowError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    except BookingConflictError:
        raise HTTPException(status_code=409, detail=CONFLICT_DETAIL) from None

    event_bus.publish(
        BookingUpdated(
            booking_id=booking.id,
            rescheduled="start_time" in changes or "end_time" in changes,
        )
    )
    return _to_read(booking)


@router.delete("/{booking_id}", response_model=MessageResponse)
def delete_booking(booking_id: str) -> MessageResponse:
    try:
        scheduler.delete(booking_id)
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found") from None

    event_bus.publish(BookingDeleted(booking_id=booking_id))
    return MessageResponse(message="Booking deleted successfully")
