# api/app/services/attendance.py
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence
from uuid import UUID

from app.core.enums import AttendanceStatus, CriteriaAspect
from app.core.exceptions import NotFoundError, PermissionDenied, ValidationError
from app.core.security import STAFF_ROLES, CurrentUser
from app.models.assessment import CriteriaRef, DailyAssessment, SessionRef
from app.models.student import Student
from app.repositories.base import AssessmentRepository, StudentRepository
from app.services.phone import reminder_message, whatsapp_link
from app.services.scoring import round_half_up
from app.services.students import StudentService, can_see_student

logger = logging.getLogger(__name__)

ATTENDANCE_KEYWORD = "kehadiran"

# urutan keparahan: status harian santri = yang paling parah di semua sesi
_SEVERITY = {
    AttendanceStatus.HADIR: 0,
    AttendanceStatus.IZIN: 1,
    AttendanceStatus.SAKIT: 2,
    AttendanceStatus.ALPHA: 3,
}


@dataclass(frozen=True)
class AttendanceSummary:
    present: int = 0
    sick: int = 0
    permission: int = 0
    alpha: int = 0
    total: int = 0


@dataclass(frozen=True)
class StudentAttendance:
    present: int = 0
    sick: int = 0
    permit: int = 0
    alpha: int = 0
    total: int = 0
    rate: float = 0.0


@dataclass(frozen=True)
class StudentAssessmentReport:
    student_id: UUID
    name: str
    halaqah: str
    total_inputs: int
    compliance_adab: int
    compliance_discipline: int
    compliance_total: int


@dataclass(frozen=True)
class AssessmentSummary:
    total_santri: int
    total_inputs: int
    avg_compliance: int


@dataclass(frozen=True)
class AbsenceRecap:
    student_id: UUID
    name: str
    halaqah: str
    total_absences: int = 0
    sakit: int = 0
    izin: int = 0
    alpha: int = 0


@dataclass(frozen=True)
class AttendanceEntry:
    student_id: UUID
    is_compliant: bool
    absence_reason: Optional[str] = None
    notes: Optional[str] = None


def record_status(a: DailyAssessment) -> AttendanceStatus:
    if a.is_compliant:
        return AttendanceStatus.HADIR
    reason = (a.absence_reason or "").strip().lower()
    if reason == AttendanceStatus.SAKIT.value:
        return AttendanceStatus.SAKIT
    if reason == AttendanceStatus.IZIN.value:
        return AttendanceStatus.IZIN
    return AttendanceStatus.ALPHA  # alpha, tanpa_keterangan, atau kosong


def daily_status(records: Iterable[DailyAssessment]) -> dict[UUID, AttendanceStatus]:
    status: dict[UUID, AttendanceStatus] = {}
    for rec in records:
        new = record_status(rec)
        cur = status.get(rec.student_id)
        if cur is None or _SEVERITY[new] > _SEVERITY[cur]:
            status[rec.student_id] = new
    return status


def summarize_day(records: Iterable[DailyAssessment]) -> AttendanceSummary:
    counts = defaultdict(int)
    per_student = daily_status(records)
    for st in per_student.values():
        counts[st] += 1
    return AttendanceSummary(
        present=counts[AttendanceStatus.HADIR],
        sick=counts[AttendanceStatus.SAKIT],
        permission=counts[AttendanceStatus.IZIN],
        alpha=counts[AttendanceStatus.ALPHA],
        total=len(per_student),
    )


def student_attendance(records: Iterable[DailyAssessment]) -> StudentAttendance:
    counts = defaultdict(int)
    for rec in records:
        counts[record_status(rec)] += 1
    total = sum(counts.values())
    present = counts[AttendanceStatus.HADIR]
    return StudentAttendance(
        present=present,
        sick=counts[AttendanceStatus.SAKIT],
        permit=counts[AttendanceStatus.IZIN],
        alpha=counts[AttendanceStatus.ALPHA],
        total=total,
        rate=(present / total) * 100 if total else 0.0,
    )


def absence_recap(students: Sequence[Student], records: Iterable[DailyAssessment]) -> list[AbsenceRecap]:
    """
    Rekap ketidakhadiran per santri: hanya catatan tidak hadir yang punya alasan.
    Urut total absen terbanyak; urutan masukan dipertahankan bila seri.
    """
    counts: dict[UUID, dict[AttendanceStatus, int]] = {s.id: defaultdict(int) for s in students}
    for rec in records:
        if rec.is_compliant or not rec.absence_reason or rec.student_id not in counts:
            continue
        counts[rec.student_id][record_status(rec)] += 1

    rows = [
        AbsenceRecap(
            student_id=s.id,
            name=s.name,
            halaqah=s.halaqah,
            total_absences=sum(counts[s.id].values()),
            sakit=counts[s.id][AttendanceStatus.SAKIT],
            izin=counts[s.id][AttendanceStatus.IZIN],
            alpha=counts[s.id][AttendanceStatus.ALPHA],
        )
        for s in students
    ]
    return sorted(rows, key=lambda r: r.total_absences, reverse=True)


def compliance_pct(records: Sequence[DailyAssessment]) -> float:
    if not records:
        return 0.0
    return sum(1 for r in records if r.is_compliant) / len(records) * 100


def find_attendance_criteria(criteria: Iterable[CriteriaRef]) -> Optional[CriteriaRef]:
    for c in criteria:
        if ATTENDANCE_KEYWORD in (c.title or "").lower():
            return c
    return None


def build_assessment_report(
    students: Sequence[Student],
    assessments: Sequence[DailyAssessment],
    criteria: Sequence[CriteriaRef],
) -> tuple[list[StudentAssessmentReport], AssessmentSummary]:
    aspect_of = {c.id: c.aspect for c in criteria}
    by_student: dict[UUID, list[DailyAssessment]] = defaultdict(list)
    for a in assessments:
        by_student[a.student_id].append(a)

    rows: list[StudentAssessmentReport] = []
    for s in students:
        mine = by_student.get(s.id, [])
        adab = [a for a in mine if aspect_of.get(a.criteria_id) == CriteriaAspect.ADAB.value]
        discipline = [a for a in mine if aspect_of.get(a.criteria_id) == CriteriaAspect.DISCIPLINE.value]
        rows.append(StudentAssessmentReport(
            student_id=s.id,
            name=s.name,
            halaqah=s.halaqah,
            total_inputs=len({(a.date, a.session_id) for a in mine}),
            compliance_adab=round_half_up(compliance_pct(adab)),
            compliance_discipline=round_half_up(compliance_pct(discipline)),
            compliance_total=round_half_up(compliance_pct(mine)),
        ))

    with_inputs = [r for r in rows if r.total_inputs > 0]
    avg = sum(r.compliance_total for r in with_inputs) / len(with_inputs) if with_inputs else 0
    summary = AssessmentSummary(
        total_santri=len(students),
        total_inputs=sum(r.total_inputs for r in rows),
        avg_compliance=round_half_up(avg),
    )
    return rows, summary


class AttendanceService:
    """Use case: penilaian harian (kehadiran, adab, disiplin) dan rekapnya."""

    def __init__(self, assessments: AssessmentRepository, students: StudentRepository):
        self._assessments = assessments
        self._students = students
        self._student_service = StudentService(students)

    def attendance_criteria(self) -> Optional[CriteriaRef]:
        return find_attendance_criteria(self._assessments.list_criteria(active_only=False))

    def summary_for_day(self, user: CurrentUser, day: date) -> AttendanceSummary:
        criteria = self.attendance_criteria()
        students = self._student_service.list_for(user)
        if not criteria or not students:
            return AttendanceSummary()
        records = self._assessments.list(
            date_from=day, date_to=day,
            student_ids=[s.id for s in students],
            criteria_id=criteria.id,
        )
        return summarize_day(records)

    def for_student(self, user: CurrentUser, student_id: UUID) -> StudentAttendance:
        student = self._student_service.get_for(user, student_id)
        criteria = self.attendance_criteria()
        if not criteria:
            return StudentAttendance()
        return student_attendance(
            self._assessments.list(student_ids=[student.id], criteria_id=criteria.id)
        )

    def record(
        self,
        user: CurrentUser,
        *,
        day: date,
        session_id: int,
        criteria_id: int,
        entries: Sequence[AttendanceEntry],
    ) -> int:
        if user.role not in STAFF_ROLES:
            raise PermissionDenied("Hanya ustadz atau admin")
        if not any(c.id == criteria_id for c in self._assessments.list_criteria(active_only=False)):
            raise ValidationError("Kriteria tidak ditemukan")
        if not any(s.id == session_id for s in self._assessments.list_sessions(active_only=False)):
            raise ValidationError("Sesi tidak ditemukan")

        saved = 0
        for e in entries:
            student = self._students.get(e.student_id)
            if not student or not can_see_student(user, student):
                raise NotFoundError(f"Santri tidak ditemukan: {e.student_id}")
            self._assessments.upsert(
                date=day,
                student_id=student.id,
                session_id=session_id,
                criteria_id=criteria_id,
                is_compliant=e.is_compliant,
                absence_reason=e.absence_reason,
                notes=(e.notes or "").strip() or None,
                created_by=user.user_id,
            )
            saved += 1
        logger.info("Penilaian harian %s sesi %s: %d santri", day, session_id, saved)
        return saved

    def report(
        self,
        user: CurrentUser,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> tuple[list[StudentAssessmentReport], AssessmentSummary]:
        students = list(self._student_service.list_for(user))
        assessments = self._assessments.list(
            date_from=date_from, date_to=date_to,
            student_ids=[s.id for s in students],
        )
        criteria = self._assessments.list_criteria(active_only=False)
        return build_assessment_report(students, assessments, criteria)

    def absence_recap(
        self,
        user: CurrentUser,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        q: Optional[str] = None,
    ) -> list[AbsenceRecap]:
        criteria = self.attendance_criteria()
        students = list(self._student_service.list_for(user, q=q))
        if not criteria or not students:
            return []
        records = self._assessments.list(
            date_from=date_from, date_to=date_to,
            student_ids=[s.id for s in students],
            criteria_id=criteria.id,
        )
        return absence_recap(students, records)

    def session(self, session_id: int) -> SessionRef:
        for s in self._assessments.list_sessions(active_only=False):
            if s.id == session_id:
                return s
        raise NotFoundError("Sesi tidak ditemukan")

    def reminder_link(self, *, teacher_name: str, phone: str, session_id: int, day: date) -> Optional[str]:
        s = self.session(session_id)
        start = s.time_start.strftime("%H:%M") if s.time_start else "-"
        end = s.time_end.strftime("%H:%M") if s.time_end else "-"
        text = reminder_message(teacher_name, s.name, f"{start} - {end}", day)
        return whatsapp_link(phone, text)
