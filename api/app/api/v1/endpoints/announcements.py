# api/app/api/v1/endpoints/announcements.py
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps.errors import to_http
from app.api.deps.repos import get_announcement_service
from app.core.exceptions import DomainError
from app.core.security import CurrentUser, get_current_user
from app.schemas.announcements import AnnouncementIn, AnnouncementOut
from app.services.announcements import AnnouncementService

router = APIRouter(prefix="/announcements", tags=["announcements"])


@router.get("", response_model=List[AnnouncementOut])
def list_announcements(
    service: AnnouncementService = Depends(get_announcement_service),
    current: CurrentUser = Depends(get_current_user),
):
    return service.list_for(current)


@router.post("", response_model=AnnouncementOut, status_code=status.HTTP_201_CREATED)
def create_announcement(
    payload: AnnouncementIn,
    service: AnnouncementService = Depends(get_announcement_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return service.create(current, title=payload.title, content=payload.content)
    except DomainError as e:
        raise to_http(e)


@router.put("/{announcement_id}", response_model=AnnouncementOut)
def update_announcement(
    announcement_id: UUID,
    payload: AnnouncementIn,
    service: AnnouncementService = Depends(get_announcement_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return service.update(current, announcement_id, title=payload.title, content=payload.content)
    except DomainError as e:
        raise to_http(e)


@router.post("/{announcement_id}/toggle", response_model=AnnouncementOut)
def toggle_announcement(
    announcement_id: UUID,
    service: AnnouncementService = Depends(get_announcement_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return service.toggle(current, announcement_id)
    except DomainError as e:
        raise to_http(e)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_announcement(
    announcement_id: UUID,
    service: AnnouncementService = Depends(get_announcement_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        service.delete(current, announcement_id)
    except DomainError as e:
        raise to_http(e)
