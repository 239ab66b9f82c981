"""User management. Reads need a session; writes need an admin."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import (
    event_bus,
    get_current_user,
    require_admin,
    scheduler,
    user_repo,
)
from app.domain.events import UserDeleted
from app.domain.models import (
    MessageResponse,
    User,
    UserCreate,
    UserRead,
    UserRole,
    UserUpdate,
)

router = APIRouter(prefix="/users", tags=["users"])


def _get_or_404(user_id: str) -> User:
    user = user_repo.get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _to_read(user: User) -> UserRead:
    return UserRead.model_validate(user.model_dump(exclude={"password_hash"}))


@router.get("", response_model=list[UserRead], dependencies=[Depends(get_current_user)])
def list_users(role: UserRole | None = None, search: str | None = None) -> list[UserRead]:
    return [_to_read(u) for u in user_repo.list(role=role, search=search)]


@router.get("/{user_id}", response_model=UserRead, dependencies=[Depends(get_current_user)])
def get_user(user_id: str) -> UserRead:
    return _to_read(_get_or_404(user_id))


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_user(payload: UserCreate) -> UserRead:
    if user_repo.get_by_email(payload.email) is not None:
        raise HTTPException(
            status_code=400, detail="User with this email already exists"
        )
    user = User(**payload.model_dump())
    user_repo.add(user)
    return _to_read(user)


@router.put("/{user_id}", response_model=UserRead, dependencies=[Depends(require_admin)])
def update_user(user_id: str, payload: UserUpdate) -> UserRead:
    user = _get_or_404(user_id)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    email = changes.get("email")
    if email and email != user.email and user_repo.get_by_email(email) is not None:
        raise HTTPException(
            status_code=400, detail="User with this email already exists"
        )

    updated = user.model_copy(
        update={**changes, "updated_at": datetime.now(timezone.utc)}
    )
    user_repo.add(updated)
    return _to_read(updated)


@router.delete(
    "/{user_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)]
)
def delete_user(user_id: str) -> MessageResponse:
    _get_or_404(user_id)
    detached = scheduler.delete_user(user_id)
    event_bus.publish(UserDeleted(user_id=user_id, booking_ids=detached))
    return MessageResponse(message="User deleted successfully")
