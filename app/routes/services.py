"""Bookable services catalogue."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_current_user, require_admin, scheduler, service_repo
from app.domain.errors import ServiceInUseError
from app.domain.models import MessageResponse, Service, ServiceCreate, ServiceUpdate

router = APIRouter(prefix="/services", tags=["services"])


def _get_or_404(service_id: str) -> Service:
    service = service_repo.get(service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.get("", response_model=list[Service], dependencies=[Depends(get_current_user)])
def list_services(is_active: bool | None = None, search: str | None = None) -> list[Service]:
    return service_repo.list(is_active=is_active, search=search)


@router.get(
    "/{service_id}", response_model=Service, dependencies=[Depends(get_current_user)]
)
def get_service(service_id: str) -> Service:
    return _get_or_404(service_id)


@router.post(
    "",
    response_model=Service,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_service(payload: ServiceCreate) -> Service:
    service = Service(**payload.model_dump())
    service_repo.add(service)
    return service


@router.put("/{service_id}", response_model=Service, dependencies=[Depends(require_admin)])
def update_service(service_id: str, payload: ServiceUpdate) -> Service:
    service = _get_or_404(service_id)
    # description and price may be cleared explicitly with null
    changes = payload.model_dump(exclude_unset=True)
    for field in ("name", "duration", "is_active"):
        if changes.get(field) is None:
            changes.pop(field, None)

    updated = service.model_copy(
        update={**changes, "updated_at": datetime.now(timezone.utc)}
    )
    service_repo.add(updated)
    return updated


@router.delete(
    "/{service_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_service(service_id: str) -> MessageResponse:
    _get_or_404(service_id)
    try:
        scheduler.delete_service(service_id)
    except ServiceInUseError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    return MessageResponse(message="Service deleted successfully")
