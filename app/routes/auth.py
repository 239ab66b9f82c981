"""Login and self-registration."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from app.dependencies import user_repo
from app.domain.models import (
    AuthResponse,
    AuthUser,
    LoginRequest,
    RegisterRequest,
    User,
    UserRole,
)
from app.services.auth import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user),
        user=AuthUser(id=user.id, email=user.email, name=user.name, role=user.role),
    )


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest) -> AuthResponse:
    user = user_repo.get_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _auth_response(user)


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
def register(payload: RegisterRequest) -> AuthResponse:
    if user_repo.get_by_email(payload.email) is not None:
        raise HTTPException(status_code=400, detail="User already exists")

    user = User(
        email=payload.email,
        name=payload.name,
        phone=payload.phone,
        role=UserRole.USER,
        password_hash=hash_password(payload.password),
    )
    user_repo.add(user)
    logger.info("Registered user %s", user.id)
    return _auth_response(user)
