# api/app/models/halaqah.py
import uuid

from sqlalchemy import Column, DateTime, String, Uuid, func

from app.db.base_class import Base


class Halaqah(Base):
    __tablename__ = "halaqah"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, unique=True, index=True, nullable=False)
    teacher_id = Column(Uuid, nullable=True, index=True)  # ustadz pengampu
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
