# api/app/api/deps/repos.py
"""Penyedia repository & service untuk endpoint (di-override di test)."""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.repositories.base import (
    AnnouncementRepository, AssessmentRepository, CurriculumRepository,
    HalaqahRepository, ReferenceRepository, ScoreRepository, StudentRepository,
)
from app.repositories.sql import (
    SqlAnnouncementRepository, SqlAssessmentRepository, SqlCurriculumRepository,
    SqlHalaqahRepository, SqlReferenceRepository, SqlScoreRepository, SqlStudentRepository,
)
from app.services.announcements import AnnouncementService
from app.services.attendance import AttendanceService
from app.services.curriculum import CurriculumService
from app.services.dashboard import DashboardService
from app.services.halaqah import HalaqahService
from app.services.references import ReferenceService
from app.services.scoring import ScoreService
from app.services.student_import import StudentImporter
from app.services.students import StudentService


# ----------------------- repositories -----------------------

def get_student_repo(db: Session = Depends(get_db)) -> StudentRepository:
    return SqlStudentRepository(db)


def get_halaqah_repo(db: Session = Depends(get_db)) -> HalaqahRepository:
    return SqlHalaqahRepository(db)


def get_curriculum_repo(db: Session = Depends(get_db)) -> CurriculumRepository:
    return SqlCurriculumRepository(db)


def get_score_repo(db: Session = Depends(get_db)) -> ScoreRepository:
    return SqlScoreRepository(db)


def get_assessment_repo(db: Session = Depends(get_db)) -> AssessmentRepository:
    return SqlAssessmentRepository(db)


def get_reference_repo(db: Session = Depends(get_db)) -> ReferenceRepository:
    return SqlReferenceRepository(db)


def get_announcement_repo(db: Session = Depends(get_db)) -> AnnouncementRepository:
    return SqlAnnouncementRepository(db)


# ----------------------- services -----------------------

def get_student_importer(
    students: StudentRepository = Depends(get_student_repo),
    halaqah: HalaqahRepository = Depends(get_halaqah_repo),
) -> StudentImporter:
    return StudentImporter(students, halaqah, batch_size=settings.IMPORT_BATCH_SIZE)


def get_student_service(students: StudentRepository = Depends(get_student_repo)) -> StudentService:
    return StudentService(students)


def get_halaqah_service(halaqah: HalaqahRepository = Depends(get_halaqah_repo)) -> HalaqahService:
    return HalaqahService(halaqah)


def get_score_service(
    scores: ScoreRepository = Depends(get_score_repo),
    students: StudentRepository = Depends(get_student_repo),
    curriculum: CurriculumRepository = Depends(get_curriculum_repo),
) -> ScoreService:
    return ScoreService(scores, students, curriculum)


def get_attendance_service(
    assessments: AssessmentRepository = Depends(get_assessment_repo),
    students: StudentRepository = Depends(get_student_repo),
) -> AttendanceService:
    return AttendanceService(assessments, students)


def get_dashboard_service(
    students: StudentService = Depends(get_student_service),
    attendance: AttendanceService = Depends(get_attendance_service),
) -> DashboardService:
    return DashboardService(students, attendance)


def get_announcement_service(
    announcements: AnnouncementRepository = Depends(get_announcement_repo),
) -> AnnouncementService:
    return AnnouncementService(announcements)


def get_curriculum_service(curriculum: CurriculumRepository = Depends(get_curriculum_repo)) -> CurriculumService:
    return CurriculumService(curriculum)


def get_reference_service(refs: ReferenceRepository = Depends(get_reference_repo)) -> ReferenceService:
    return ReferenceService(refs)
