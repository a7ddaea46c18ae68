# api/app/schemas/scores.py
from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class ErrorTallyIn(BaseModel):
    diberitahu: int = Field(0, ge=0, description="Di beritahu")
    salah_harokat: int = Field(0, ge=0)
    salah_lupa: int = Field(0, ge=0, description="Salah / lupa")
    berhenti: int = Field(0, ge=0)


class ScoreIn(BaseModel):
    student_id: UUID
    curriculum_id: Optional[UUID] = None
    hafalan_type: Literal["baru", "murojaah"]
    errors: ErrorTallyIn = Field(default_factory=ErrorTallyIn)
    progress: Optional[int] = Field(None, ge=0, description="Ayat / halaman / bait terakhir")
    note: Optional[str] = None


class ScoreOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    student_id: UUID
    curriculum_id: Optional[UUID] = None
    setoran: int
    err_diberitahu: int
    err_harokat: int
    err_lupa: int
    err_berhenti: int
    progress: Optional[int] = None
    progress_unit: Optional[str] = None
    completed: bool
    hafalan_type: Optional[str] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None


class CurriculumIn(BaseModel):
    category: Literal["Surah", "Juz", "Kitab", "Mandzumah"]
    name: str
    surah_number: Optional[int] = Field(None, ge=1)
    ayat_start: Optional[int] = Field(None, ge=1)
    ayat_end: Optional[int] = Field(None, ge=1)
    page_start: Optional[int] = Field(None, ge=1)
    page_end: Optional[int] = Field(None, ge=1)
    total_pages: Optional[int] = Field(None, ge=0, description="Kitab: jumlah halaman")
    total_bait: Optional[int] = Field(None, ge=0, description="Mandzumah: akhir bait")


class CurriculumOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category: str
    name: str
    surah_number: Optional[int] = None
    ayat_start: Optional[int] = None
    ayat_end: Optional[int] = None
    page_start: Optional[int] = None
    page_end: Optional[int] = None
    target_ayat: Optional[int] = None
    total_pages: Optional[int] = None


class CurriculumImportOut(BaseModel):
    category: str
    imported: int
    message: str
