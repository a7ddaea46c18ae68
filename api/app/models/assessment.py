# api/app/models/assessment.py
import uuid

from sqlalchemy import (
    Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, Time,
    UniqueConstraint, Uuid, func,
)

from app.db.base_class import Base


class CriteriaRef(Base):
    __tablename__ = "criteria_ref"

    id = Column(Integer, primary_key=True)
    aspect = Column(String, nullable=False)  # adab | discipline
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)


class SessionRef(Base):
    __tablename__ = "sessions_ref"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    time_start = Column(Time, nullable=True)
    time_end = Column(Time, nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class DailyAssessment(Base):
    __tablename__ = "daily_assessments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), index=True, nullable=False)
    session_id = Column(Integer, ForeignKey("sessions_ref.id"), nullable=False)
    criteria_id = Column(Integer, ForeignKey("criteria_ref.id"), nullable=False)
    is_compliant = Column(Boolean, nullable=False, default=True)
    absence_reason = Column(String, nullable=True)  # sakit | izin | alpha | tanpa_keterangan
    notes = Column(Text, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("date", "student_id", "session_id", "criteria_id", name="uq_daily_assessment"),
    )
