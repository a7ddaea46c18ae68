# api/app/schemas/imports.py
from typing import List, Optional
from pydantic import BaseModel, Field

class RowError(BaseModel):
    row: int = Field(..., description="Nomor baris (1-based, termasuk header)")
    message: str

class PreviewRow(BaseModel):
    row: int
    name: str
    halaqah: str
    wali_name: Optional[str] = None
    wali_phone: Optional[str] = None
    valid: bool
    error: Optional[str] = None

class StudentsPreviewOut(BaseModel):
    delimiter: str
    total: int
    valid: int
    invalid: int
    rows: List[PreviewRow] = []

class ImportSummary(BaseModel):
    success: int
    failed: int
    duplicates: int
    invalid: int

class StudentsImportOut(BaseModel):
    dry_run: bool = False
    summary: ImportSummary
    created_halaqah: List[str] = []
    message: str
    errors: List[RowError] = []
