# api/app/api/v1/endpoints/attendance.py
from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps.errors import to_http
from app.api.deps.repos import get_attendance_service, get_reference_service
from app.core.exceptions import DomainError
from app.core.security import CurrentUser, get_admin_user, get_current_user, get_staff_user
from app.schemas.attendance import (
    AssessmentBatchIn, AssessmentBatchOut, AttendanceSummaryOut, ReminderIn, ReminderOut,
    StudentAttendanceOut,
)
from app.schemas.references import CriteriaOut, SessionOut
from app.services.attendance import AttendanceEntry, AttendanceService
from app.services.references import ReferenceService

router = APIRouter(tags=["attendance"])


@router.get("/assessments/criteria", response_model=List[CriteriaOut])
def active_criteria(
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_staff_user),
):
    return service.list_criteria(active_only=True)


@router.get("/assessments/sessions", response_model=List[SessionOut])
def active_sessions(
    service: ReferenceService = Depends(get_reference_service),
    current: CurrentUser = Depends(get_staff_user),
):
    return service.list_sessions(active_only=True)


@router.post("/assessments", response_model=AssessmentBatchOut)
def record_assessments(
    payload: AssessmentBatchIn,
    service: AttendanceService = Depends(get_attendance_service),
    current: CurrentUser = Depends(get_staff_user),
):
    entries = [AttendanceEntry(**e.model_dump()) for e in payload.entries]
    try:
        saved = service.record(
            current,
            day=payload.date,
            session_id=payload.session_id,
            criteria_id=payload.criteria_id,
            entries=entries,
        )
    except DomainError as e:
        raise to_http(e)
    return AssessmentBatchOut(saved=saved)


@router.get("/attendance/summary", response_model=AttendanceSummaryOut)
def attendance_summary(
    day: Optional[date] = Query(None, description="Default: hari ini"),
    service: AttendanceService = Depends(get_attendance_service),
    current: CurrentUser = Depends(get_staff_user),
):
    return AttendanceSummaryOut(**asdict(service.summary_for_day(current, day or date.today())))


@router.get("/students/{student_id}/attendance", response_model=StudentAttendanceOut)
def student_attendance(
    student_id: UUID,
    service: AttendanceService = Depends(get_attendance_service),
    current: CurrentUser = Depends(get_current_user),
):
    try:
        return StudentAttendanceOut(**asdict(service.for_student(current, student_id)))
    except DomainError as e:
        raise to_http(e)


@router.post("/admin/reminders/whatsapp", response_model=ReminderOut)
def reminder_whatsapp(
    payload: ReminderIn,
    service: AttendanceService = Depends(get_attendance_service),
    current: CurrentUser = Depends(get_admin_user),
):
    try:
        url = service.reminder_link(
            teacher_name=payload.teacher_name,
            phone=payload.phone,
            session_id=payload.session_id,
            day=payload.date or date.today(),
        )
    except DomainError as e:
        raise to_http(e)
    return ReminderOut(url=url)
