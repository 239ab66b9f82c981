"""Process-wide singletons and the FastAPI auth dependencies built on them."""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.domain.bus import EventBus
from app.domain.handlers import HandlerRegistry
from app.domain.models import User, UserRole
from app.repos.memory import (
    BookingRepository,
    ServiceRepository,
    StaffRepository,
    UserRepository,
)
from app.services.auth import decode_access_token
from app.services.scheduler import BookingScheduler
from app.services.storage import PictureStorage

logger = logging.getLogger(__name__)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
user_repo = UserRepository()
service_repo = ServiceRepository()
staff_repo = StaffRepository()
booking_repo = BookingRepository()
scheduler = BookingScheduler(booking_repo, user_repo, service_repo)
picture_storage = PictureStorage(
    root=settings.upload_dir,
    max_bytes=settings.max_picture_bytes,
    max_files=settings.max_pictures,
)

handler_registry = HandlerRegistry(
    bus=event_bus,
    booking_repo=booking_repo,
    picture_storage=picture_storage,
)

bearer = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Access token required")

    claims = decode_access_token(credentials.credentials)
    user = user_repo.get(claims.get("userId", "")) if claims else None
    if user is None:
        raise HTTPException(status_code=403, detail="Invalid or expired token")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN:
        logger.warning("User %s denied admin access", user.id)
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
