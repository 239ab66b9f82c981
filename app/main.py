"""FastAPI application — entry point for the booking admin portal API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.responses import FileResponse

from app.config import settings
from app.dependencies import (  # noqa: F401 - re-exported for tests and tooling
    booking_repo,
    event_bus,
    picture_storage,
    scheduler,
    service_repo,
    staff_repo,
    user_repo,
)
from app.repos.memory import seed_demo_data
from app.routes import auth, bookings, services, staff, users
from app.services.auth import hash_password
from app.services.storage import STAFF_SUBDIR, URL_PREFIX

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.seed_demo_data:
        seed_demo_data(
            user_repo,
            service_repo,
            admin_email=settings.admin_email,
            admin_password_hash=hash_password(settings.admin_password),
        )
        logger.info("Seeded demo data (admin: %s)", settings.admin_email)
    yield


app = FastAPI(title="Booking Admin Portal", lifespan=lifespan)

api = APIRouter(prefix="/api")
api.include_router(auth.router)
api.include_router(users.router)
api.include_router(services.router)
api.include_router(staff.router)
api.include_router(bookings.router)


@api.get("/health")
def health() -> dict:
    return {"status": "ok"}


app.include_router(api)


@app.get(f"{URL_PREFIX}/{STAFF_SUBDIR}/{{filename}}", include_in_schema=False)
def staff_picture(filename: str) -> FileResponse:
    """Serve a stored staff picture."""
    path = picture_storage.staff_dir / Path(filename).name
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(path)
