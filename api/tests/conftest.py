from __future__ import annotations

import os

# sebelum app diimpor: engine modul dibuat dari settings saat import
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "kunci-rahasia-test-pesantren-admin-api")

import uuid
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.enums import Role, StudentStatus
from app.core.exceptions import RepositoryError
from app.core.security import CurrentUser, get_current_user
from app.db.base import Base
from app.db.session import get_db
from app.models.halaqah import Halaqah
from app.models.student import Student


# ----------------------- fakes -----------------------

class InMemoryHalaqah:
    def __init__(self, names=(), fail_create=False):
        self.items: dict[uuid.UUID, Halaqah] = {}
        self.fail_create = fail_create
        self.create_many_calls: list[list[str]] = []
        for n in names:
            self.create(name=n)

    def list_all(self):
        return sorted(self.items.values(), key=lambda h: h.name)

    def list_names(self) -> set[str]:
        return {h.name for h in self.items.values()}

    def get(self, halaqah_id):
        return self.items.get(halaqah_id)

    def get_by_name(self, name: str):
        for h in self.items.values():
            if h.name.lower() == name.lower():
                return h
        return None

    def create(self, *, name, teacher_id=None, description=None):
        h = Halaqah(id=uuid.uuid4(), name=name, teacher_id=teacher_id, description=description)
        self.items[h.id] = h
        return h

    def create_many(self, names):
        self.create_many_calls.append(list(names))
        if self.fail_create:
            raise RepositoryError("duplicate key value violates unique constraint")
        for n in names:
            self.create(name=n)

    def delete(self, halaqah_id) -> bool:
        return self.items.pop(halaqah_id, None) is not None


class InMemoryStudents:
    def __init__(self, fail_batches=()):
        self.items: dict[uuid.UUID, Student] = {}
        self.fail_batches = set(fail_batches)  # nomor panggilan insert_many (1-based) yang ditolak
        self.batch_sizes: list[int] = []

    def add(self, name, halaqah, wali_phone=None, wali_name=None, status=StudentStatus.MUTAWASSITH.value):
        return self.create(name=name, halaqah=halaqah, wali_phone=wali_phone, wali_name=wali_name, status=status)

    def list(self, *, halaqah=None, q=None):
        out = list(self.items.values())
        if halaqah is not None:
            out = [s for s in out if s.halaqah in halaqah]
        if q:
            needle = q.strip().lower()
            out = [s for s in out if needle in s.name.lower() or needle in s.halaqah.lower()]
        return sorted(out, key=lambda s: s.name)

    def list_wali_phones(self):
        return [s.wali_phone for s in self.items.values() if s.wali_phone]

    def get(self, student_id):
        return self.items.get(student_id)

    def create(self, **fields: Any) -> Student:
        fields.setdefault("status", StudentStatus.MUTAWASSITH.value)
        fields.setdefault("average_score", 0.0)
        s = Student(id=uuid.uuid4(), **fields)
        self.items[s.id] = s
        return s

    def insert_many(self, rows):
        self.batch_sizes.append(len(rows))
        if len(self.batch_sizes) in self.fail_batches:
            raise RepositoryError("batch ditolak")
        for r in rows:
            self.create(**r)
        return len(rows)

    def update(self, student_id, **fields: Any) -> Optional[Student]:
        s = self.items.get(student_id)
        if not s:
            return None
        for k, v in fields.items():
            setattr(s, k, v)
        return s

    def delete(self, student_id) -> bool:
        return self.items.pop(student_id, None) is not None


@pytest.fixture
def halaqah_repo():
    return InMemoryHalaqah()


@pytest.fixture
def student_repo():
    return InMemoryStudents()


@pytest.fixture
def fake_factory():
    """Akses ke kelas fake untuk skenario khusus (batch gagal, dsb.)."""
    return {"students": InMemoryStudents, "halaqah": InMemoryHalaqah}


# ----------------------- users -----------------------

@pytest.fixture
def super_admin():
    return CurrentUser(user_id="u-super", role=Role.SUPER_ADMIN)


@pytest.fixture
def admin():
    return CurrentUser(user_id="u-admin", role=Role.ADMIN, halaqah=frozenset({"Halaqah Al-Fatihah"}))


@pytest.fixture
def ustadz():
    return CurrentUser(user_id="u-ustadz", role=Role.USTADZ, halaqah=frozenset({"Halaqah Al-Fatihah"}))


@pytest.fixture
def wali():
    return CurrentUser(user_id="u-wali", role=Role.WALI, phone="0812-3456-7890")


# ----------------------- database -----------------------

@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def as_user(super_admin):
    """Pengguna yang dipakai TestClient; ganti dengan as_user['user'] = ..."""
    return {"user": super_admin}


@pytest.fixture
def client(db, as_user):
    from app.main import app

    def _db():
        yield db

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_current_user] = lambda: as_user["user"]
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
