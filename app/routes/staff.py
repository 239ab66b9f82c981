"""Staff directory, with picture uploads via multipart forms."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app.dependencies import (
    event_bus,
    get_current_user,
    picture_storage,
    require_admin,
    staff_repo,
)
from app.domain.errors import PictureRejectedError
from app.domain.events import StaffPicturesDiscarded
from app.domain.models import MessageResponse, StaffMember, StaffStatus

router = APIRouter(prefix="/staff", tags=["staff"])


def _get_or_404(member_id: str) -> StaffMember:
    member = staff_repo.get(member_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return member


def _store_pictures(pictures: list[UploadFile] | None) -> list[str] | None:
    """Persist uploaded pictures; None means no pictures were sent."""
    uploads = [p for p in pictures or [] if p.filename]
    if not uploads:
        return None
    try:
        return picture_storage.save_staff_pictures(uploads)
    except PictureRejectedError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e)) from None


@router.get("", response_model=list[StaffMember], dependencies=[Depends(get_current_user)])
def list_staff(search: str | None = None) -> list[StaffMember]:
    return staff_repo.list(search=search)


@router.get(
    "/{member_id}", response_model=StaffMember, dependencies=[Depends(get_current_user)]
)
def get_staff_member(member_id: str) -> StaffMember:
    return _get_or_404(member_id)


@router.post(
    "",
    response_model=StaffMember,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_staff_member(
    name: str = Form(..., min_length=2),
    staff_id: str = Form(..., min_length=1),
    status: StaffStatus = Form(...),
    remarks: str | None = Form(None),
    pictures: list[UploadFile] | None = File(None),
) -> StaffMember:
    if staff_repo.get_by_staff_id(staff_id) is not None:
        raise HTTPException(status_code=400, detail="Staff with this ID already exists")

    member = StaffMember(
        name=name,
        staff_id=staff_id,
        status=status,
        remarks=remarks,
        pictures=_store_pictures(pictures) or [],
    )
    staff_repo.add(member)
    return member


@router.put(
    "/{member_id}", response_model=StaffMember, dependencies=[Depends(require_admin)]
)
def update_staff_member(
    member_id: str,
    name: str | None = Form(None, min_length=2),
    staff_id: str | None = Form(None, min_length=1),
    status: StaffStatus | None = Form(None),
    remarks: str | None = Form(None),
    pictures: list[UploadFile] | None = File(None),
) -> StaffMember:
    member = _get_or_404(member_id)

    if staff_id and staff_id != member.staff_id and staff_repo.get_by_staff_id(staff_id):
        raise HTTPException(status_code=400, detail="Staff with this ID already exists")

    changes: dict = {
        key: value
        for key, value in (("name", name), ("staff_id", staff_id), ("status", status))
        if value
    }
    if remarks is not None:
        changes["remarks"] = remarks

    new_pictures = _store_pictures(pictures)
    if new_pictures is not None:
        changes["pictures"] = new_pictures

    updated = member.model_copy(
        update={**changes, "updated_at": datetime.now(timezone.utc)}
    )
    staff_repo.add(updated)

    if new_pictures is not None and member.pictures:
        event_bus.publish(
            StaffPicturesDiscarded(staff_member_id=member.id, pictures=member.pictures)
        )
    return updated


@router.delete(
    "/{member_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)]
)
def delete_staff_member(member_id: str) -> MessageResponse:
    member = _get_or_404(member_id)
    staff_repo.delete(member_id)
    if member.pictures:
        event_bus.publish(
            StaffPicturesDiscarded(staff_member_id=member.id, pictures=member.pictures)
        )
    return MessageResponse(message="Staff member deleted successfully")
