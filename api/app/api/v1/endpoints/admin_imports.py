# api/app/api/v1/endpoints/admin_imports.py
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response

from app.api.deps.errors import to_http
from app.api.deps.repos import get_student_importer
from app.core.exceptions import DomainError
from app.core.security import CurrentUser, get_admin_user
from app.schemas.imports import (
    ImportSummary, PreviewRow, RowError, StudentsImportOut, StudentsPreviewOut,
)
from app.services.student_import import (
    TEMPLATE_CSV, TEMPLATE_FILENAME, ParsedCSV, StudentImporter, decode_upload, parse_student_csv,
)

router = APIRouter(tags=["admin/imports"])


async def _read_csv(file: UploadFile) -> ParsedCSV:
    try:
        raw = await file.read()
    finally:
        await file.close()
    parsed = parse_student_csv(decode_upload(raw))
    if parsed.error:
        raise HTTPException(status_code=400, detail=parsed.error)
    return parsed


@router.get("/imports/students/template")
def download_template(current_admin: CurrentUser = Depends(get_admin_user)):
    return Response(
        content=TEMPLATE_CSV,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'},
    )


@router.post("/imports/students/preview", response_model=StudentsPreviewOut)
async def preview_students_csv(
    file: UploadFile = File(..., description="CSV dengan header: Nama Lengkap,Halaqah,Nama Wali,No HP Wali"),
    current_admin: CurrentUser = Depends(get_admin_user),
):
    parsed = await _read_csv(file)
    return StudentsPreviewOut(
        delimiter=parsed.delimiter,
        total=len(parsed.rows),
        valid=len(parsed.valid_rows),
        invalid=len(parsed.invalid_rows),
        rows=[
            PreviewRow(
                row=r.line, name=r.name, halaqah=r.halaqah,
                wali_name=r.wali_name, wali_phone=r.wali_phone,
                valid=r.valid, error=r.error,
            )
            for r in parsed.rows
        ],
    )


@router.post("/imports/students", response_model=StudentsImportOut)
async def import_students_csv(
    file: UploadFile = File(..., description="CSV dengan header: Nama Lengkap,Halaqah,Nama Wali,No HP Wali"),
    dry_run: bool = Query(False, description="Jika true, validasi & hitung tanpa menulis ke DB"),
    importer: StudentImporter = Depends(get_student_importer),
    current_admin: CurrentUser = Depends(get_admin_user),
):
    parsed = await _read_csv(file)
    try:
        result = importer.run(parsed.rows, dry_run=dry_run)
    except DomainError as e:
        raise to_http(e)

    return StudentsImportOut(
        dry_run=result.dry_run,
        summary=ImportSummary(
            success=result.success,
            failed=result.failed,
            duplicates=result.duplicates,
            invalid=result.invalid,
        ),
        created_halaqah=result.created_halaqah,
        message=result.message,
        errors=[RowError(row=r.line, message=r.error or "") for r in parsed.invalid_rows],
    )
