# api/app/models/student.py
import uuid

from sqlalchemy import Column, DateTime, Float, String, Uuid, func

from app.core.enums import StudentStatus
from app.db.base_class import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    # relasi ke halaqah lewat nama (bukan FK), sama seperti data lama
    halaqah = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default=StudentStatus.MUTAWASSITH.value)
    average_score = Column(Float, nullable=False, default=0.0)
    avatar_url = Column(String, nullable=True)
    wali_name = Column(String, nullable=True)
    wali_phone = Column(String, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
