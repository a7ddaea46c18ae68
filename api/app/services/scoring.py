# api/app/services/scoring.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence
from uuid import UUID

from app.core.enums import CurriculumCategory, HafalanType, StudentStatus
from app.core.exceptions import NotFoundError, PermissionDenied, ValidationError
from app.core.security import STAFF_ROLES, CurrentUser
from app.models.scoring import CurriculumItem, DailyScore
from app.repositories.base import CurriculumRepository, ScoreRepository, StudentRepository
from app.services.students import can_see_student

logger = logging.getLogger(__name__)

MAX_ERRORS = 20
MUTQIN_MIN = 90
MUTAWASSITH_MIN = 76


@dataclass(frozen=True)
class ErrorTally:
    """Rincian kesalahan satu setoran."""

    diberitahu: int = 0
    salah_harokat: int = 0
    salah_lupa: int = 0
    berhenti: int = 0

    def __post_init__(self):
        for name in ("diberitahu", "salah_harokat", "salah_lupa", "berhenti"):
            if getattr(self, name) < 0:
                raise ValidationError(f"Jumlah kesalahan '{name}' tidak boleh negatif")

    @property
    def total(self) -> int:
        return self.diberitahu + self.salah_harokat + self.salah_lupa + self.berhenti


@dataclass(frozen=True)
class Progress:
    value: int
    unit: str  # Ayat | Halaman | Bait
    completed: bool


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def setoran_score(errors: ErrorTally, max_errors: int = MAX_ERRORS) -> int:
    score = round_half_up((1 - errors.total / max_errors) * 100)
    return max(0, min(100, score))


def grade(score: float) -> StudentStatus:
    if score >= MUTQIN_MIN:
        return StudentStatus.MUTQIN
    if score >= MUTAWASSITH_MIN:
        return StudentStatus.MUTAWASSITH
    return StudentStatus.DHAIF


def progress_unit_and_target(item: CurriculumItem) -> tuple[str, Optional[int]]:
    if item.category == CurriculumCategory.KITAB.value:
        return "Halaman", item.total_pages or item.target_ayat
    if item.category == CurriculumCategory.MANDZUMAH.value:
        return "Bait", item.target_ayat
    return "Ayat", item.ayat_end


def evaluate_progress(item: CurriculumItem, value: Optional[int]) -> Optional[Progress]:
    if value is None:
        return None
    unit, target = progress_unit_and_target(item)
    return Progress(value=value, unit=unit, completed=bool(target) and value >= target)


def average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class ScoreService:
    """Use case: ustadz mencatat nilai setoran; rata-rata & status santri ikut diperbarui."""

    def __init__(self, scores: ScoreRepository, students: StudentRepository, curriculum: CurriculumRepository):
        self._scores = scores
        self._students = students
        self._curriculum = curriculum

    def record(
        self,
        user: CurrentUser,
        *,
        student_id: UUID,
        curriculum_id: Optional[UUID],
        errors: ErrorTally,
        hafalan_type: HafalanType,
        progress: Optional[int] = None,
        note: Optional[str] = None,
    ) -> DailyScore:
        if user.role not in STAFF_ROLES:
            raise PermissionDenied("Hanya ustadz atau admin")
        student = self._students.get(student_id)
        if not student:
            raise NotFoundError("Santri tidak ditemukan")
        if not can_see_student(user, student):
            raise PermissionDenied("Santri di luar halaqah Anda")
        if not curriculum_id:
            raise ValidationError("Mohon pilih materi hafalan!")
        item = self._curriculum.get(curriculum_id)
        if not item:
            raise NotFoundError("Materi hafalan tidak ditemukan")

        score = setoran_score(errors)
        prog = evaluate_progress(item, progress)
        saved = self._scores.add(
            student_id=student.id,
            ustadz_id=user.user_id,
            curriculum_id=item.id,
            setoran=score,
            err_diberitahu=errors.diberitahu,
            err_harokat=errors.salah_harokat,
            err_lupa=errors.salah_lupa,
            err_berhenti=errors.berhenti,
            progress=prog.value if prog else None,
            progress_unit=prog.unit if prog else None,
            completed=prog.completed if prog else False,
            hafalan_type=hafalan_type.value,
            note=(note or "").strip() or None,
        )
        self.refresh_student_summary(student.id)
        return saved

    def refresh_student_summary(self, student_id: UUID) -> None:
        avg = round(average(self._scores.setoran_for_student(student_id)), 2)
        status = grade(avg)
        self._students.update(student_id, average_score=avg, status=status.value)
        logger.info("Santri %s: rata-rata %.2f (%s)", student_id, avg, status.value)

    def history(self, user: CurrentUser, student_id: UUID, limit: int = 20) -> Sequence[DailyScore]:
        student = self._students.get(student_id)
        if not student or not can_see_student(user, student):
            raise NotFoundError("Santri tidak ditemukan")
        return self._scores.list_for_student(student_id, limit=limit)
