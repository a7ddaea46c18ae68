# api/app/api/v1/endpoints/curriculum.py
from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import Response

from app.api.deps.errors import to_http
from app.api.deps.repos import get_curriculum_service
from app.core.exceptions import DomainError
from app.core.security import CurrentUser, get_admin_user, get_staff_user
from app.schemas.scores import CurriculumImportOut, CurriculumIn, CurriculumOut
from app.services.curriculum import CurriculumService
from app.services.student_import import decode_upload

router = APIRouter(prefix="/curriculum", tags=["curriculum"])

CategoryQuery = Query("Surah", description="Surah atau Kitab")


@router.get("", response_model=List[CurriculumOut])
def list_curriculum(
    service: CurriculumService = Depends(get_curriculum_service),
    current: CurrentUser = Depends(get_staff_user),
):
    return service.list_all()


@router.post("", response_model=CurriculumOut, status_code=status.HTTP_201_CREATED)
def create_curriculum(
    payload: CurriculumIn,
    service: CurriculumService = Depends(get_curriculum_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        return service.create(current, **payload.model_dump())
    except DomainError as e:
        raise to_http(e)


@router.put("/{item_id}", response_model=CurriculumOut)
def update_curriculum(
    item_id: UUID,
    payload: CurriculumIn,
    service: CurriculumService = Depends(get_curriculum_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        return service.update(current, item_id, **payload.model_dump())
    except DomainError as e:
        raise to_http(e)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_curriculum(
    item_id: UUID,
    service: CurriculumService = Depends(get_curriculum_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        service.delete(current, item_id)
    except DomainError as e:
        raise to_http(e)


@router.get("/template")
def download_curriculum_template(
    category: str = CategoryQuery,
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        filename, content = CurriculumService.template(category)
    except DomainError as e:
        raise to_http(e)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=CurriculumImportOut)
async def import_curriculum_csv(
    file: UploadFile = File(..., description="Surah: name,surah_number,ayat_start,ayat_end,page_start,page_end"),
    category: str = CategoryQuery,
    service: CurriculumService = Depends(get_curriculum_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        raw = await file.read()
    finally:
        await file.close()
    try:
        count = service.import_csv(current, decode_upload(raw), category)
    except DomainError as e:
        raise to_http(e)
    return CurriculumImportOut(category=category, imported=count, message=f"Berhasil import {count} item.")
