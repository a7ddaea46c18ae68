# api/app/api/v1/endpoints/halaqah.py
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps.errors import to_http
from app.api.deps.repos import get_halaqah_service
from app.core.exceptions import DomainError
from app.core.security import CurrentUser, get_current_user, get_staff_user
from app.schemas.halaqah import HalaqahIn, HalaqahOut
from app.services.halaqah import HalaqahService

router = APIRouter(prefix="/halaqah", tags=["halaqah"])


@router.get("", response_model=List[HalaqahOut])
def list_halaqah(
    service: HalaqahService = Depends(get_halaqah_service),
    current: CurrentUser = Depends(get_staff_user),
):
    return service.list_all()


@router.post("", response_model=HalaqahOut, status_code=status.HTTP_201_CREATED)
def create_halaqah(
    payload: HalaqahIn,
    service: HalaqahService = Depends(get_halaqah_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return service.create(current, name=payload.name, teacher_id=payload.teacher_id,
                              description=payload.description)
    except DomainError as e:
        raise to_http(e)


@router.delete("/{halaqah_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_halaqah(
    halaqah_id: UUID,
    service: HalaqahService = Depends(get_halaqah_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        service.delete(current, halaqah_id)
    except DomainError as e:
        raise to_http(e)
