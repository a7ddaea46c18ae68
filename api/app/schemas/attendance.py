# api/app/schemas/attendance.py
from __future__ import annotations
import datetime as dt
from typing import List, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, Field


class AttendanceEntryIn(BaseModel):
    student_id: UUID
    is_compliant: bool = True
    absence_reason: Optional[Literal["sakit", "izin", "alpha", "tanpa_keterangan"]] = None
    notes: Optional[str] = None


class AssessmentBatchIn(BaseModel):
    date: dt.date
    session_id: int
    criteria_id: int
    entries: List[AttendanceEntryIn] = Field(default_factory=list)


class AssessmentBatchOut(BaseModel):
    saved: int


class AttendanceSummaryOut(BaseModel):
    present: int
    sick: int
    permission: int
    alpha: int
    total: int


class StudentAttendanceOut(BaseModel):
    present: int
    sick: int
    permit: int
    alpha: int
    total: int
    rate: float


class StudentAssessmentRow(BaseModel):
    student_id: UUID
    name: str
    halaqah: str
    total_inputs: int
    compliance_adab: int
    compliance_discipline: int
    compliance_total: int


class AssessmentSummaryOut(BaseModel):
    total_santri: int
    total_inputs: int
    avg_compliance: int


class AssessmentReportOut(BaseModel):
    summary: AssessmentSummaryOut
    rows: List[StudentAssessmentRow] = []


class ReminderIn(BaseModel):
    teacher_name: str
    phone: str
    session_id: int
    date: Optional[dt.date] = None


class ReminderOut(BaseModel):
    url: Optional[str] = None


class AbsenceRecapRow(BaseModel):
    student_id: UUID
    name: str
    halaqah: str
    total_absences: int
    sakit: int
    izin: int
    alpha: int = Field(..., description="Tanpa keterangan")
