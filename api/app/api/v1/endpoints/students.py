# api/app/api/v1/endpoints/students.py
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps.errors import to_http
from app.api.deps.repos import get_student_service
from app.core.exceptions import DomainError
from app.core.security import CurrentUser, get_current_user
from app.schemas.students import StudentIn, StudentOut, WhatsappLinkOut
from app.services.students import StudentService

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=List[StudentOut])
def list_students(
    q: Optional[str] = Query(None, description="Cari nama atau halaqah"),
    service: StudentService = Depends(get_student_service),
    current: CurrentUser = Depends(get_current_user),
):
    return service.list_for(current, q=q)


@router.get("/{student_id}", response_model=StudentOut)
def get_student(
    student_id: UUID,
    service: StudentService = Depends(get_student_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return service.get_for(current, student_id)
    except DomainError as e:
        raise to_http(e)


@router.post("", response_model=StudentOut, status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentIn,
    service: StudentService = Depends(get_student_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return service.create(current, **payload.model_dump())
    except DomainError as e:
        raise to_http(e)


@router.put("/{student_id}", response_model=StudentOut)
def update_student(
    student_id: UUID,
    payload: StudentIn,
    service: StudentService = Depends(get_student_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return service.update(current, student_id, **payload.model_dump())
    except DomainError as e:
        raise to_http(e)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    student_id: UUID,
    service: StudentService = Depends(get_student_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        service.delete(current, student_id)
    except DomainError as e:
        raise to_http(e)


@router.get("/{student_id}/whatsapp", response_model=WhatsappLinkOut)
def student_whatsapp(
    student_id: UUID,
    service: StudentService = Depends(get_student_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return WhatsappLinkOut(url=service.whatsapp(current, student_id))
    except DomainError as e:
        raise to_http(e)
