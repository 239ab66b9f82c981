"""In-memory repositories for users, services, staff and bookings."""

from __future__ import annotations

from datetime import datetime

from app.domain.models import (
    Booking,
    BookingStatus,
    Service,
    StaffMember,
    User,
    UserRole,
)
from app.services.conflicts import find_conflicts


def _matches(search: str, *values: str | None) -> bool:
    needle = search.lower()
    return any(needle in value.lower() for value in values if value)


class UserRepository:
    """Dict-backed store for User instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, User] = {}

    def add(self, user: User) -> None:
        self._store[user.id] = user

    def get(self, user_id: str) -> User | None:
        return self._store.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        email = email.lower()
        return next((u for u in list(self._store.values()) if u.email == email), None)

    def list(self, role: UserRole | None = None, search: str | None = None) -> list[User]:
        """Return users filtered by role and name/email search, newest first."""
        users = [
            u
            for u in list(self._store.values())
            if (role is None or u.role == role)
            and (not search or _matches(search, u.name, u.email))
        ]
        return sorted(users, key=lambda u: u.created_at, reverse=True)

    def delete(self, user_id: str) -> None:
        self._store.pop(user_id, None)


class ServiceRepository:
    """Dict-backed store for Service instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Service] = {}

    def add(self, service: Service) -> None:
        self._store[service.id] = service

    def get(self, service_id: str) -> Service | None:
        return self._store.get(service_id)

    def list(self, is_active: bool | None = None, search: str | None = None) -> list[Service]:
        services = [
            s
            for s in list(self._store.values())
            if (is_active is None or s.is_active == is_active)
            and (not search or _matches(search, s.name, s.description))
        ]
        return sorted(services, key=lambda s: s.name)

    def delete(self, service_id: str) -> None:
        self._store.pop(service_id, None)


class StaffRepository:
    """Dict-backed store for StaffMember instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, StaffMember] = {}

    def add(self, member: StaffMember) -> None:
        self._store[member.id] = member

    def get(self, member_id: str) -> StaffMember | None:
        return self._store.get(member_id)

    def get_by_staff_id(self, staff_id: str) -> StaffMember | None:
        return next((m for m in list(self._store.values()) if m.staff_id == staff_id), None)

    def list(self, search: str | None = None) -> list[StaffMember]:
        members = [
            m
            for m in list(self._store.values())
            if not search or _matches(search, m.name, m.staff_id)
        ]
        return sorted(members, key=lambda m: m.created_at, reverse=True)

    def delete(self, member_id: str) -> None:
        self._store.pop(member_id, None)


class BookingRepository:
    """Dict-backed store for Booking instances, keyed by id.

    Mutations are not synchronised here; callers that need check-then-write
    atomicity go through ``BookingScheduler``. Reads iterate over a snapshot
    so a concurrent ``add`` cannot change the dict mid-loop.
    """

    def __init__(self) -> None:
        self._store: dict[str, Booking] = {}

    def add(self, booking: Booking) -> None:
        self._store[booking.id] = booking

    def get(self, booking_id: str) -> Booking | None:
        return self._store.get(booking_id)

    def list_all(self) -> list[Booking]:
        return list(self._store.values())

    def list(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        status: BookingStatus | None = None,
        user_id: str | None = None,
        service_id: str | None = None,
    ) -> list[Booking]:
        """Return bookings ordered by start time.

        The date window only applies when both bounds are given and is
        inclusive on ``start_time``.
        """
        bookings = self.list_all()
        if start_date is not None and end_date is not None:
            bookings = [b for b in bookings if start_date <= b.start_time <= end_date]
        if status is not None:
            bookings = [b for b in bookings if b.status == status]
        if user_id:
            bookings = [b for b in bookings if user_id in b.user_ids]
        if service_id:
            bookings = [b for b in bookings if service_id in b.service_ids]
        return sorted(bookings, key=lambda b: b.start_time)

    def list_overlapping(
        self, start: datetime, end: datetime, exclude_id: str | None = None
    ) -> list[Booking]:
        return find_conflicts(start, end, self.list_all(), exclude_id=exclude_id)

    def references_service(self, service_id: str) -> bool:
        return any(service_id in b.service_ids for b in self.list_all())

    def detach_user(self, user_id: str) -> list[str]:
        """Remove *user_id* from every booking; return the affected booking ids."""
        affected: list[str] = []
        for booking in self.list_all():
            if user_id in booking.user_ids:
                booking.user_ids = [uid for uid in booking.user_ids if uid != user_id]
                affected.append(booking.id)
        return affected

    def delete(self, booking_id: str) -> None:
        self._store.pop(booking_id, None)


# ---------------------------------------------------------------------------
# Seed data – an admin account and a few services for a fresh portal
# ---------------------------------------------------------------------------


def seed_demo_data(
    user_repo: UserRepository,
    service_repo: ServiceRepository,
    admin_email: str,
    admin_password_hash: str,
) -> None:
    if user_repo.get_by_email(admin_email) is None:
        user_repo.add(
            User(
                email=admin_email.lower(),
                name="Admin User",
                phone="+1234567890",
                role=UserRole.ADMIN,
                password_hash=admin_password_hash,
            )
        )

    if not service_repo.list():
        service_repo.add(
            Service(
                name="Consultation",
                description="Initial consultation session",
                duration=60,
                price=100.0,
            )
        )
        service_repo.add(
            Service(
                name="Follow-up",
                description="Follow-up appointment",
                duration=30,
                price=50.0,
            )
        )
        service_repo.add(
            Service(
                name="Emergency",
                description="Emergency appointment",
                duration=45,
                price=150.0,
            )
        )
