# api/app/services/dashboard.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from app.core.enums import StudentStatus
from app.core.security import CurrentUser
from app.models.student import Student
from app.services.attendance import AttendanceService, AttendanceSummary
from app.services.scoring import average
from app.services.students import StudentService


@dataclass(frozen=True)
class TierCount:
    count: int
    percentage: float


@dataclass(frozen=True)
class DashboardStats:
    total_santri: int
    total_halaqah: int
    avg_score: float
    mutqin: TierCount
    mutawassith: TierCount
    dhaif: TierCount
    attendance: AttendanceSummary


def percentage(part: int, total: int) -> float:
    return round(part / total * 100, 1) if total else 0.0


def tier_counts(students: Sequence[Student]) -> dict[StudentStatus, TierCount]:
    total = len(students)
    out = {}
    for tier in StudentStatus:
        n = sum(1 for s in students if s.status == tier.value)
        out[tier] = TierCount(count=n, percentage=percentage(n, total))
    return out


class DashboardService:
    def __init__(self, students: StudentService, attendance: AttendanceService):
        self._students = students
        self._attendance = attendance

    def stats(self, user: CurrentUser, day: date) -> DashboardStats:
        students = list(self._students.list_for(user))
        tiers = tier_counts(students)
        return DashboardStats(
            total_santri=len(students),
            total_halaqah=len({s.halaqah for s in students}),
            avg_score=round(average([s.average_score or 0 for s in students]), 1),
            mutqin=tiers[StudentStatus.MUTQIN],
            mutawassith=tiers[StudentStatus.MUTAWASSITH],
            dhaif=tiers[StudentStatus.DHAIF],
            attendance=self._attendance.summary_for_day(user, day),
        )
