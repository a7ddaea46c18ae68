from __future__ import annotations

import uuid
from typing import Any

import pytest

from app.core.enums import CurriculumCategory, HafalanType, StudentStatus
from app.core.exceptions import NotFoundError, PermissionDenied, ValidationError
from app.models.scoring import CurriculumItem, DailyScore
from app.services.scoring import (
    ErrorTally, ScoreService, evaluate_progress, grade, round_half_up, setoran_score,
)


class InMemoryScores:
    def __init__(self):
        self.items: list[DailyScore] = []

    def add(self, **fields: Any) -> DailyScore:
        s = DailyScore(id=uuid.uuid4(), **fields)
        self.items.append(s)
        return s

    def setoran_for_student(self, student_id):
        return [s.setoran for s in self.items if s.student_id == student_id]

    def list_for_student(self, student_id, limit=20):
        return [s for s in reversed(self.items) if s.student_id == student_id][:limit]


class InMemoryCurriculum:
    def __init__(self, items=()):
        self.items = {i.id: i for i in items}

    def get(self, item_id):
        return self.items.get(item_id)

    def list_all(self):
        return list(self.items.values())


SURAH = CurriculumItem(id=uuid.uuid4(), category=CurriculumCategory.SURAH.value, name="An-Naba", ayat_end=40)
KITAB = CurriculumItem(id=uuid.uuid4(), category=CurriculumCategory.KITAB.value, name="Safinah", total_pages=30)
NADHOM = CurriculumItem(id=uuid.uuid4(), category=CurriculumCategory.MANDZUMAH.value, name="Jurumiyah", target_ayat=100)


@pytest.mark.parametrize("errors,expected", [
    (ErrorTally(), 100),
    (ErrorTally(diberitahu=1), 95),
    (ErrorTally(diberitahu=1, salah_harokat=1, salah_lupa=1), 85),
    (ErrorTally(berhenti=20), 0),
    (ErrorTally(berhenti=25), 0),
])
def test_setoran_score(errors, expected):
    assert setoran_score(errors) == expected


def test_negative_error_count_rejected():
    with pytest.raises(ValidationError):
        ErrorTally(salah_lupa=-1)


def test_round_half_up():
    assert round_half_up(92.5) == 93
    assert round_half_up(87.5) == 88
    assert round_half_up(66.4) == 66


@pytest.mark.parametrize("score,tier", [
    (100, StudentStatus.MUTQIN), (90, StudentStatus.MUTQIN),
    (89.99, StudentStatus.MUTAWASSITH), (76, StudentStatus.MUTAWASSITH),
    (75.5, StudentStatus.DHAIF), (0, StudentStatus.DHAIF),
])
def test_grade(score, tier):
    assert grade(score) is tier


def test_progress_units_follow_category():
    assert evaluate_progress(SURAH, 40).unit == "Ayat"
    assert evaluate_progress(SURAH, 40).completed
    assert not evaluate_progress(SURAH, 39).completed
    assert evaluate_progress(KITAB, 30).unit == "Halaman"
    assert evaluate_progress(NADHOM, 50).unit == "Bait"
    assert evaluate_progress(SURAH, None) is None


@pytest.fixture
def service(student_repo):
    return ScoreService(InMemoryScores(), student_repo, InMemoryCurriculum([SURAH, KITAB]))


def test_record_updates_average_and_status(service, student_repo, ustadz):
    s = student_repo.add("Ahmad", "Halaqah Al-Fatihah", wali_phone="0812")
    service.record(ustadz, student_id=s.id, curriculum_id=SURAH.id,
                   errors=ErrorTally(), hafalan_type=HafalanType.BARU)
    saved = service.record(ustadz, student_id=s.id, curriculum_id=SURAH.id,
                           errors=ErrorTally(diberitahu=3, berhenti=2),
                           hafalan_type=HafalanType.MUROJAAH, progress=12, note="  lancar ")

    assert saved.setoran == 75
    assert (saved.err_diberitahu, saved.err_berhenti) == (3, 2)
    assert (saved.progress, saved.progress_unit, saved.completed) == (12, "Ayat", False)
    assert saved.hafalan_type == "murojaah"
    assert saved.note == "lancar"
    assert s.average_score == 87.5
    assert s.status == StudentStatus.MUTAWASSITH.value


def test_record_requires_curriculum(service, student_repo, ustadz):
    s = student_repo.add("Ahmad", "Halaqah Al-Fatihah")
    with pytest.raises(ValidationError, match="Mohon pilih materi hafalan"):
        service.record(ustadz, student_id=s.id, curriculum_id=None,
                       errors=ErrorTally(), hafalan_type=HafalanType.BARU)


def test_ustadz_cannot_score_other_halaqah(service, student_repo, ustadz):
    s = student_repo.add("Rizki", "Halaqah Al-Ikhlas")
    with pytest.raises(PermissionDenied):
        service.record(ustadz, student_id=s.id, curriculum_id=SURAH.id,
                       errors=ErrorTally(), hafalan_type=HafalanType.BARU)


def test_wali_cannot_score(service, student_repo, wali):
    s = student_repo.add("Ahmad", "Halaqah Al-Fatihah", wali_phone="081234567890")
    with pytest.raises(PermissionDenied):
        service.record(wali, student_id=s.id, curriculum_id=SURAH.id,
                       errors=ErrorTally(), hafalan_type=HafalanType.BARU)


def test_unknown_student_or_curriculum(service, student_repo, super_admin):
    with pytest.raises(NotFoundError):
        service.record(super_admin, student_id=uuid.uuid4(), curriculum_id=SURAH.id,
                       errors=ErrorTally(), hafalan_type=HafalanType.BARU)
    s = student_repo.add("Ahmad", "Halaqah Al-Fatihah")
    with pytest.raises(NotFoundError):
        service.record(super_admin, student_id=s.id, curriculum_id=uuid.uuid4(),
                       errors=ErrorTally(), hafalan_type=HafalanType.BARU)


def test_history_hidden_from_other_wali(service, student_repo, wali):
    s = student_repo.add("Rizki", "Halaqah Al-Ikhlas", wali_phone="0899")
    with pytest.raises(NotFoundError):
        service.history(wali, s.id)
