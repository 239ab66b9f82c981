"""Domain models for the booking admin portal."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

PHONE_PATTERN = r"^\+?[0-9][0-9 ()\-]{6,19}$"


class UserRole(StrEnum):
    ADMIN = "ADMIN"
    USER = "USER"


class BookingStatus(StrEnum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


class StaffStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _normalize_email(value: str) -> str:
    return value.strip().lower()


NormalizedEmail = Annotated[EmailStr, AfterValidator(_normalize_email)]


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class User(BaseModel):
    id: str = Field(default_factory=_new_id)
    email: str
    name: str
    phone: str | None = None
    role: UserRole = UserRole.USER
    password_hash: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Service(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: str | None = None
    duration: int = Field(ge=1)
    price: float | None = Field(default=None, ge=0)
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class StaffMember(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    staff_id: str
    pictures: list[str] = Field(default_factory=list)
    status: StaffStatus = StaffStatus.ACTIVE
    remarks: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Booking(BaseModel):
    """A reservation occupying the half-open interval ``[start_time, end_time)``."""

    id: str = Field(default_factory=_new_id)
    start_time: datetime
    end_time: datetime
    status: BookingStatus = BookingStatus.CONFIRMED
    notes: str | None = None
    user_ids: list[str] = Field(default_factory=list)
    service_ids: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def _end_after_start(self) -> Booking:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    email: NormalizedEmail
    password: str = Field(min_length=6)


class RegisterRequest(BaseModel):
    email: NormalizedEmail
    password: str = Field(min_length=6)
    name: str = Field(min_length=2)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)


class AuthUser(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole


class AuthResponse(BaseModel):
    token: str
    user: AuthUser


class UserRead(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    email: NormalizedEmail
    name: str = Field(min_length=2)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    role: UserRole = UserRole.USER


class UserUpdate(BaseModel):
    email: NormalizedEmail | None = None
    name: str | None = Field(default=None, min_length=2)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    role: UserRole | None = None


class ServiceCreate(BaseModel):
    name: str = Field(min_length=2)
    description: str | None = None
    duration: int = Field(ge=1)
    price: float | None = Field(default=None, ge=0)
    is_active: bool = True


class ServiceUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2)
    description: str | None = None
    duration: int | None = Field(default=None, ge=1)
    price: float | None = Field(default=None, ge=0)
    is_active: bool | None = None


class BookingCreate(BaseModel):
    start_time: datetime
    end_time: datetime
    user_ids: list[str] = Field(min_length=1)
    service_ids: list[str] = Field(min_length=1)
    notes: str | None = None
    status: BookingStatus = BookingStatus.CONFIRMED

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def _end_after_start(self) -> BookingCreate:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class BookingUpdate(BaseModel):
    start_time: datetime | None = None
    end_time: datetime | None = None
    user_ids: list[str] | None = None
    service_ids: list[str] | None = None
    notes: str | None = None
    status: BookingStatus | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None


class UserSummary(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None


class ServiceSummary(BaseModel):
    id: str
    name: str
    duration: int
    price: float | None = None


class BookingRead(BaseModel):
    id: str
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    notes: str | None = None
    users: list[UserSummary] = Field(default_factory=list)
    services: list[ServiceSummary] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class CalendarBooking(BaseModel):
    id: str
    title: str
    start: datetime
    end: datetime
    status: BookingStatus
    notes: str | None = None
    users: list[UserSummary] = Field(default_factory=list)
    services: list[ServiceSummary] = Field(default_factory=list)


class AvailabilityResponse(BaseModel):
    available: bool


class MessageResponse(BaseModel):
    message: str
