# api/app/repositories/base.py
"""
Antarmuka repository per entitas.

Service hanya bergantung pada protokol ini, bukan pada DB konkret; test memakai
implementasi in-memory, produksi memakai app.repositories.sql.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Collection, Optional, Protocol, Sequence
from uuid import UUID

from app.models.announcement import Announcement
from app.models.assessment import CriteriaRef, DailyAssessment, SessionRef
from app.models.halaqah import Halaqah
from app.models.scoring import CurriculumItem, DailyScore
from app.models.student import Student


class HalaqahRepository(Protocol):
    def list_all(self) -> Sequence[Halaqah]:
        raise NotImplementedError

    def list_names(self) -> set[str]:
        raise NotImplementedError

    def get(self, halaqah_id: UUID) -> Optional[Halaqah]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Halaqah]:
        raise NotImplementedError

    def create(self, *, name: str, teacher_id: Optional[UUID] = None, description: Optional[str] = None) -> Halaqah:
        raise NotImplementedError

    def create_many(self, names: Sequence[str]) -> None:
        """Satu batch insert; gagal seluruhnya atau berhasil seluruhnya."""
        raise NotImplementedError

    def delete(self, halaqah_id: UUID) -> bool:
        raise NotImplementedError


class StudentRepository(Protocol):
    def list(self, *, halaqah: Optional[Collection[str]] = None, q: Optional[str] = None) -> Sequence[Student]:
        """halaqah=None berarti tanpa filter halaqah."""
        raise NotImplementedError

    def list_wali_phones(self) -> list[str]:
        raise NotImplementedError

    def get(self, student_id: UUID) -> Optional[Student]:
        raise NotImplementedError

    def create(self, **fields: Any) -> Student:
        raise NotImplementedError

    def insert_many(self, rows: Sequence[dict[str, Any]]) -> int:
        """Satu batch insert; RepositoryError bila ditolak."""
        raise NotImplementedError

    def update(self, student_id: UUID, **fields: Any) -> Optional[Student]:
        raise NotImplementedError

    def delete(self, student_id: UUID) -> bool:
        raise NotImplementedError


class CurriculumRepository(Protocol):
    def get(self, item_id: UUID) -> Optional[CurriculumItem]:
        raise NotImplementedError

    def list_all(self) -> Sequence[CurriculumItem]:
        raise NotImplementedError

    def create(self, **fields: Any) -> CurriculumItem:
        raise NotImplementedError

    def create_many(self, rows: Sequence[dict[str, Any]]) -> int:
        """Satu batch insert; RepositoryError bila ditolak."""
        raise NotImplementedError

    def update(self, item_id: UUID, **fields: Any) -> Optional[CurriculumItem]:
        raise NotImplementedError

    def delete(self, item_id: UUID) -> bool:
        raise NotImplementedError


class ScoreRepository(Protocol):
    def add(self, **fields: Any) -> DailyScore:
        raise NotImplementedError

    def setoran_for_student(self, student_id: UUID) -> list[int]:
        raise NotImplementedError

    def list_for_student(self, student_id: UUID, limit: int = 20) -> Sequence[DailyScore]:
        raise NotImplementedError


class AssessmentRepository(Protocol):
    def list_criteria(self, *, active_only: bool = True) -> Sequence[CriteriaRef]:
        raise NotImplementedError

    def list_sessions(self, *, active_only: bool = True) -> Sequence[SessionRef]:
        raise NotImplementedError

    def list(
        self,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        student_ids: Optional[Collection[UUID]] = None,
        criteria_id: Optional[int] = None,
    ) -> Sequence[DailyAssessment]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        date: date,
        student_id: UUID,
        session_id: int,
        criteria_id: int,
        is_compliant: bool,
        absence_reason: Optional[str] = None,
        notes: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> DailyAssessment:
        raise NotImplementedError


class ReferenceRepository(Protocol):
    """Data acuan penilaian harian: kriteria dan sesi."""

    def list_criteria(self, *, active_only: bool = False) -> Sequence[CriteriaRef]:
        raise NotImplementedError

    def get_criteria(self, criteria_id: int) -> Optional[CriteriaRef]:
        raise NotImplementedError

    def create_criteria(self, **fields: Any) -> CriteriaRef:
        raise NotImplementedError

    def update_criteria(self, criteria_id: int, **fields: Any) -> Optional[CriteriaRef]:
        raise NotImplementedError

    def list_sessions(self, *, active_only: bool = False) -> Sequence[SessionRef]:
        raise NotImplementedError

    def get_session(self, session_id: int) -> Optional[SessionRef]:
        raise NotImplementedError

    def create_session(self, **fields: Any) -> SessionRef:
        raise NotImplementedError

    def update_session(self, session_id: int, **fields: Any) -> Optional[SessionRef]:
        raise NotImplementedError

    def delete_session(self, session_id: int) -> bool:
        """RepositoryError bila sesi masih dipakai penilaian."""
        raise NotImplementedError


class AnnouncementRepository(Protocol):
    def list(self, *, active_only: bool = False) -> Sequence[Announcement]:
        raise NotImplementedError

    def get(self, announcement_id: UUID) -> Optional[Announcement]:
        raise NotImplementedError

    def create(self, *, title: str, content: str, created_by: Optional[str]) -> Announcement:
        raise NotImplementedError

    def update(self, announcement_id: UUID, **fields: Any) -> Optional[Announcement]:
        raise NotImplementedError

    def delete(self, announcement_id: UUID) -> bool:
        raise NotImplementedError
