# api/app/api/v1/endpoints/admin_references.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from app.api.deps.errors import to_http
from app.api.deps.repos import get_reference_service
from app.core.exceptions import DomainError
from app.core.security import CurrentUser, get_admin_user
from app.schemas.references import CriteriaIn, CriteriaOut, SessionIn, SessionOut
from app.services.references import ReferenceService

router = APIRouter(tags=["admin/references"])


# ----------------------- kriteria -----------------------

@router.get("/criteria", response_model=List[CriteriaOut])
def list_criteria(
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_admin_user),
):
    return service.list_criteria()


@router.post("/criteria", response_model=CriteriaOut, status_code=status.HTTP_201_CREATED)
def create_criteria(
    payload: CriteriaIn,
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        return service.create_criteria(current, **payload.model_dump())
    except DomainError as e:
        raise to_http(e)


@router.put("/criteria/{criteria_id}", response_model=CriteriaOut)
def update_criteria(
    criteria_id: int,
    payload: CriteriaIn,
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        return service.update_criteria(current, criteria_id, **payload.model_dump())
    except DomainError as e:
        raise to_http(e)


@router.post("/criteria/{criteria_id}/toggle", response_model=CriteriaOut)
def toggle_criteria(
    criteria_id: int,
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        return service.toggle_criteria(current, criteria_id)
    except DomainError as e:
        raise to_http(e)


# ----------------------- sesi -----------------------

@router.get("/sessions", response_model=List[SessionOut])
def list_sessions(
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_admin_user),
):
    return service.list_sessions()


@router.post("/sessions", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionIn,
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        return service.create_session(current, **payload.model_dump())
    except DomainError as e:
        raise to_http(e)


@router.put("/sessions/{session_id}", response_model=SessionOut)
def update_session(
    session_id: int,
    payload: SessionIn,
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        return service.update_session(current, session_id, **payload.model_dump())
    except DomainError as e:
        raise to_http(e)


@router.post("/sessions/{session_id}/toggle", response_model=SessionOut)
def toggle_session(
    session_id: int,
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        return service.toggle_session(current, session_id)
    except DomainError as e:
        raise to_http(e)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: int,
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        service.delete_session(current, session_id)
    except DomainError as e:
        raise to_http(e)
