# api/app/repositories/sql.py
from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Any, Collection, Iterator, Optional, Sequence
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import RepositoryError
from app.models.announcement import Announcement
from app.models.assessment import CriteriaRef, DailyAssessment, SessionRef
from app.models.halaqah import Halaqah
from app.models.scoring import CurriculumItem, DailyScore
from app.models.student import Student


@contextmanager
def _writing(db: Session) -> Iterator[None]:
    """Commit di akhir blok; rollback dan bungkus error DB sebagai RepositoryError."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise RepositoryError(str(getattr(e, "orig", None) or e)) from e


class SqlHalaqahRepository:
    def __init__(self, db: Session):
        self._db = db

    def list_all(self) -> Sequence[Halaqah]:
        return self._db.query(Halaqah).order_by(Halaqah.name.asc()).all()

    def list_names(self) -> set[str]:
        return {name for (name,) in self._db.query(Halaqah.name).all()}

    def get(self, halaqah_id: UUID) -> Optional[Halaqah]:
        return self._db.get(Halaqah, halaqah_id)

    def get_by_name(self, name: str) -> Optional[Halaqah]:
        return (
            self._db.query(Halaqah)
            .filter(func.lower(Halaqah.name) == func.lower(name))
            .first()
        )

    def create(self, *, name: str, teacher_id: Optional[UUID] = None, description: Optional[str] = None) -> Halaqah:
        h = Halaqah(name=name, teacher_id=teacher_id, description=description)
        with _writing(self._db):
            self._db.add(h)
        return h

    def create_many(self, names: Sequence[str]) -> None:
        with _writing(self._db):
            self._db.add_all([Halaqah(name=n) for n in names])

    def delete(self, halaqah_id: UUID) -> bool:
        h = self.get(halaqah_id)
        if not h:
            return False
        with _writing(self._db):
            self._db.delete(h)
        return True


class SqlStudentRepository:
    def __init__(self, db: Session):
        self._db = db

    def list(self, *, halaqah: Optional[Collection[str]] = None, q: Optional[str] = None) -> Sequence[Student]:
        query = self._db.query(Student)
        if halaqah is not None:
            if not halaqah:
                return []
            query = query.filter(Student.halaqah.in_(list(halaqah)))
        if q:
            like = f"%{q.strip()}%"
            query = query.filter(or_(Student.name.ilike(like), Student.halaqah.ilike(like)))
        return query.order_by(Student.name.asc()).all()

    def list_wali_phones(self) -> list[str]:
        rows = self._db.query(Student.wali_phone).filter(Student.wali_phone.isnot(None)).all()
        return [p for (p,) in rows if p]

    def get(self, student_id: UUID) -> Optional[Student]:
        return self._db.get(Student, student_id)

    def create(self, **fields: Any) -> Student:
        s = Student(**fields)
        with _writing(self._db):
            self._db.add(s)
        return s

    def insert_many(self, rows: Sequence[dict[str, Any]]) -> int:
        with _writing(self._db):
            self._db.add_all([Student(**r) for r in rows])
        return len(rows)

    def update(self, student_id: UUID, **fields: Any) -> Optional[Student]:
        s = self.get(student_id)
        if not s:
            return None
        with _writing(self._db):
            for k, v in fields.items():
                setattr(s, k, v)
        return s

    def delete(self, student_id: UUID) -> bool:
        s = self.get(student_id)
        if not s:
            return False
        with _writing(self._db):
            self._db.delete(s)
        return True


class SqlCurriculumRepository:
    def __init__(self, db: Session):
        self._db = db

    def get(self, item_id: UUID) -> Optional[CurriculumItem]:
        return self._db.get(CurriculumItem, item_id)

    def list_all(self) -> Sequence[CurriculumItem]:
        return (
            self._db.query(CurriculumItem)
            .order_by(CurriculumItem.category.asc(), CurriculumItem.surah_number.asc(), CurriculumItem.name.asc())
            .all()
        )

    def create(self, **fields: Any) -> CurriculumItem:
        item = CurriculumItem(**fields)
        with _writing(self._db):
            self._db.add(item)
        return item

    def create_many(self, rows: Sequence[dict[str, Any]]) -> int:
        with _writing(self._db):
            self._db.add_all([CurriculumItem(**r) for r in rows])
        return len(rows)

    def update(self, item_id: UUID, **fields: Any) -> Optional[CurriculumItem]:
        item = self.get(item_id)
        if not item:
            return None
        with _writing(self._db):
            for k, v in fields.items():
                setattr(item, k, v)
        return item

    def delete(self, item_id: UUID) -> bool:
        item = self.get(item_id)
        if not item:
            return False
        with _writing(self._db):
            self._db.delete(item)
        return True


class SqlScoreRepository:
    def __init__(self, db: Session):
        self._db = db

    def add(self, **fields: Any) -> DailyScore:
        score = DailyScore(**fields)
        with _writing(self._db):
            self._db.add(score)
        return score

    def setoran_for_student(self, student_id: UUID) -> list[int]:
        rows = self._db.query(DailyScore.setoran).filter(DailyScore.student_id == student_id).all()
        return [int(v) for (v,) in rows]

    def list_for_student(self, student_id: UUID, limit: int = 20) -> Sequence[DailyScore]:
        return (
            self._db.query(DailyScore)
            .filter(DailyScore.student_id == student_id)
            .order_by(DailyScore.created_at.desc())
            .limit(limit)
            .all()
        )


def _criteria(db: Session, active_only: bool) -> list[CriteriaRef]:
    query = db.query(CriteriaRef)
    if active_only:
        query = query.filter(CriteriaRef.is_active.is_(True))
    return query.order_by(CriteriaRef.sort_order.asc(), CriteriaRef.id.asc()).all()


def _sessions(db: Session, active_only: bool) -> list[SessionRef]:
    query = db.query(SessionRef)
    if active_only:
        query = query.filter(SessionRef.is_active.is_(True))
    return query.order_by(SessionRef.sort_order.asc(), SessionRef.id.asc()).all()


class SqlReferenceRepository:
    def __init__(self, db: Session):
        self._db = db

    def list_criteria(self, *, active_only: bool = False) -> Sequence[CriteriaRef]:
        return _criteria(self._db, active_only)

    def get_criteria(self, criteria_id: int) -> Optional[CriteriaRef]:
        return self._db.get(CriteriaRef, criteria_id)

    def create_criteria(self, **fields: Any) -> CriteriaRef:
        c = CriteriaRef(**fields)
        with _writing(self._db):
            self._db.add(c)
        return c

    def update_criteria(self, criteria_id: int, **fields: Any) -> Optional[CriteriaRef]:
        c = self.get_criteria(criteria_id)
        if not c:
            return None
        with _writing(self._db):
            for k, v in fields.items():
                setattr(c, k, v)
        return c

    def list_sessions(self, *, active_only: bool = False) -> Sequence[SessionRef]:
        return _sessions(self._db, active_only)

    def get_session(self, session_id: int) -> Optional[SessionRef]:
        return self._db.get(SessionRef, session_id)

    def create_session(self, **fields: Any) -> SessionRef:
        s = SessionRef(**fields)
        with _writing(self._db):
            self._db.add(s)
        return s

    def update_session(self, session_id: int, **fields: Any) -> Optional[SessionRef]:
        s = self.get_session(session_id)
        if not s:
            return None
        with _writing(self._db):
            for k, v in fields.items():
                setattr(s, k, v)
        return s

    def delete_session(self, session_id: int) -> bool:
        s = self.get_session(session_id)
        if not s:
            return False
        with _writing(self._db):
            self._db.delete(s)
        return True


class SqlAssessmentRepository:
    def __init__(self, db: Session):
        self._db = db

    def list_criteria(self, *, active_only: bool = True) -> Sequence[CriteriaRef]:
        return _criteria(self._db, active_only)

    def list_sessions(self, *, active_only: bool = True) -> Sequence[SessionRef]:
        return _sessions(self._db, active_only)

    def list(
        self,
        *,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        student_ids: Optional[Collection[UUID]] = None,
        criteria_id: Optional[int] = None,
    ) -> Sequence[DailyAssessment]:
        query = self._db.query(DailyAssessment)
        if date_from is not None:
            query = query.filter(DailyAssessment.date >= date_from)
        if date_to is not None:
            query = query.filter(DailyAssessment.date <= date_to)
        if student_ids is not None:
            if not student_ids:
                return []
            query = query.filter(DailyAssessment.student_id.in_(list(student_ids)))
        if criteria_id is not None:
            query = query.filter(DailyAssessment.criteria_id == criteria_id)
        return query.order_by(DailyAssessment.date.desc(), DailyAssessment.session_id.asc()).all()

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
        row = (
            self._db.query(DailyAssessment)
            .filter(
                DailyAssessment.date == date,
                DailyAssessment.student_id == student_id,
                DailyAssessment.session_id == session_id,
                DailyAssessment.criteria_id == criteria_id,
            )
            .first()
        )
        with _writing(self._db):
            if row is None:
                row = DailyAssessment(
                    date=date,
                    student_id=student_id,
                    session_id=session_id,
                    criteria_id=criteria_id,
                    created_by=created_by,
                )
                self._db.add(row)
            row.is_compliant = is_compliant
            row.absence_reason = None if is_compliant else absence_reason
            row.notes = notes
        return row


class SqlAnnouncementRepository:
    def __init__(self, db: Session):
        self._db = db

    def list(self, *, active_only: bool = False) -> Sequence[Announcement]:
        query = self._db.query(Announcement)
        if active_only:
            query = query.filter(Announcement.is_active.is_(True))
        return query.order_by(Announcement.created_at.desc()).all()

    def get(self, announcement_id: UUID) -> Optional[Announcement]:
        return self._db.get(Announcement, announcement_id)

    def create(self, *, title: str, content: str, created_by: Optional[str]) -> Announcement:
        a = Announcement(title=title, content=content, created_by=created_by, is_active=True)
        with _writing(self._db):
            self._db.add(a)
        return a

    def update(self, announcement_id: UUID, **fields: Any) -> Optional[Announcement]:
        a = self.get(announcement_id)
        if not a:
            return None
        with _writing(self._db):
            for k, v in fields.items():
                setattr(a, k, v)
        return a

    def delete(self, announcement_id: UUID) -> bool:
        a = self.get(announcement_id)
        if not a:
            return False
        with _writing(self._db):
            self._db.delete(a)
        return True
