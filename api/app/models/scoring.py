# api/app/models/scoring.py
import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Uuid, func

from app.db.base_class import Base


class CurriculumItem(Base):
    __tablename__ = "curriculum_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    category = Column(String, nullable=False)  # Surah | Juz | Kitab | Mandzumah
    name = Column(String, nullable=False)
    target_ayat = Column(Integer, nullable=True)
    surah_number = Column(Integer, nullable=True)
    ayat_start = Column(Integer, nullable=True)
    ayat_end = Column(Integer, nullable=True)
    page_start = Column(Integer, nullable=True)
    page_end = Column(Integer, nullable=True)
    total_pages = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class DailyScore(Base):
    """Satu setoran hafalan yang dinilai ustadz."""

    __tablename__ = "daily_scores"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), index=True, nullable=False)
    ustadz_id = Column(String, nullable=False)
    curriculum_id = Column(Uuid, ForeignKey("curriculum_items.id"), nullable=True)

    adab = Column(Integer, nullable=False, default=0)
    disiplin = Column(Integer, nullable=False, default=0)
    setoran = Column(Integer, nullable=False)

    # rincian kesalahan
    err_diberitahu = Column(Integer, nullable=False, default=0)
    err_harokat = Column(Integer, nullable=False, default=0)
    err_lupa = Column(Integer, nullable=False, default=0)
    err_berhenti = Column(Integer, nullable=False, default=0)

    # progres: ayat / halaman / bait terakhir
    progress = Column(Integer, nullable=True)
    progress_unit = Column(String, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)

    hafalan_type = Column(String, nullable=True)  # baru | murojaah
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
