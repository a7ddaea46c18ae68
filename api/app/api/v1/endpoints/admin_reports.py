# api/app/api/v1/endpoints/admin_reports.py
from __future__ import annotations

from dataclasses import asdict
from datetime import date
from io import BytesIO
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from app.api.deps.repos import get_attendance_service, get_dashboard_service, get_student_service
from app.core.security import CurrentUser, get_admin_user
from app.schemas.attendance import (
    AbsenceRecapRow, AssessmentReportOut, AssessmentSummaryOut, StudentAssessmentRow,
)
from app.schemas.stats import DashboardStatsOut
from app.services.attendance import AttendanceService
from app.services.dashboard import DashboardService
from app.services.report_export import absences_csv, assessment_report_xlsx, students_csv
from app.services.students import StudentService

router = APIRouter(tags=["admin/reports"])

XLSX_MEDIA = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/stats", response_model=DashboardStatsOut)
def dashboard_stats(
    day: Optional[date] = Query(None, description="Tanggal rekap kehadiran (default hari ini)"),
    service: DashboardService = Depends(get_dashboard_service),
    current: CurrentUser = Depends(get_admin_user),
):
    return DashboardStatsOut(**asdict(service.stats(current, day or date.today())))


@router.get("/reports/assessments", response_model=AssessmentReportOut)
def assessment_report(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    service: AttendanceService = Depends(get_attendance_service),
    current: CurrentUser = Depends(get_admin_user),
):
    rows, summary = service.report(current, date_from=date_from, date_to=date_to)
    return AssessmentReportOut(
        summary=AssessmentSummaryOut(**asdict(summary)),
        rows=[StudentAssessmentRow(**asdict(r)) for r in rows],
    )


@router.get("/reports/assessments.xlsx")
def assessment_report_excel(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    service: AttendanceService = Depends(get_attendance_service),
    current: CurrentUser = Depends(get_admin_user),
):
    rows, summary = service.report(current, date_from=date_from, date_to=date_to)
    return StreamingResponse(
        BytesIO(assessment_report_xlsx(rows, summary)),
        media_type=XLSX_MEDIA,
        headers={"Content-Disposition": 'attachment; filename="laporan_penilaian.xlsx"'},
    )


@router.get("/reports/students.csv")
def students_export(
    service: StudentService = Depends(get_student_service),
    current: CurrentUser = Depends(get_admin_user),
):
    content = students_csv(service.list_for(current))
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="data_santri.csv"'},
    )


@router.get("/reports/absences", response_model=List[AbsenceRecapRow])
def absence_report(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    q: Optional[str] = Query(None, description="Cari nama santri atau halaqah"),
    service: AttendanceService = Depends(get_attendance_service),
    current: CurrentUser = Depends(get_admin_user),
):
    rows = service.absence_recap(current, date_from=date_from, date_to=date_to, q=q)
    return [AbsenceRecapRow(**asdict(r)) for r in rows]


@router.get("/reports/absences.csv")
def absence_report_csv(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    q: Optional[str] = Query(None),
    service: AttendanceService = Depends(get_attendance_service),
    current: CurrentUser = Depends(get_admin_user),
):
    rows = service.absence_recap(current, date_from=date_from, date_to=date_to, q=q)
    return StreamingResponse(
        iter([absences_csv(rows)]),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="laporan_kehadiran.csv"'},
    )
