# api/app/services/students.py
from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from app.core.enums import Role
from app.core.exceptions import NotFoundError, PermissionDenied, ValidationError
from app.core.security import CurrentUser
from app.models.student import Student
from app.repositories.base import StudentRepository
from app.services.phone import normalize_phone, sanitize_phone, whatsapp_link

DEFAULT_HALAQAH = "Belum ditentukan"


def visible_halaqah(user: CurrentUser) -> Optional[frozenset[str]]:
    """None = semua halaqah; set kosong = tidak ada."""
    if user.role == Role.SUPER_ADMIN:
        return None
    if user.role == Role.WALI:
        return frozenset()
    return user.halaqah


def can_see_student(user: CurrentUser, student: Student) -> bool:
    if user.role == Role.WALI:
        mine = normalize_phone(user.phone)
        return bool(mine) and normalize_phone(student.wali_phone) == mine
    allowed = visible_halaqah(user)
    return allowed is None or student.halaqah in allowed


class StudentService:
    """Use case: kelola data santri sesuai hak akses pengguna."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def list_for(self, user: CurrentUser, q: Optional[str] = None) -> Sequence[Student]:
        if user.role == Role.WALI:
            mine = normalize_phone(user.phone)
            if not mine:
                return []
            return [s for s in self._students.list(q=q) if normalize_phone(s.wali_phone) == mine]
        return self._students.list(halaqah=visible_halaqah(user), q=q)

    def get_for(self, user: CurrentUser, student_id: UUID) -> Student:
        student = self._students.get(student_id)
        if not student or not can_see_student(user, student):
            raise NotFoundError("Santri tidak ditemukan")
        return student

    def _require_writer(self, user: CurrentUser) -> None:
        if not user.is_admin:
            raise PermissionDenied("Hanya admin yang dapat mengubah data santri")

    def _fields(self, name: str, halaqah: Optional[str], wali_name: Optional[str], wali_phone: Optional[str]) -> dict:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Nama santri harus diisi")
        return {
            "name": name,
            "halaqah": (halaqah or "").strip() or DEFAULT_HALAQAH,
            "wali_name": (wali_name or "").strip() or None,
            "wali_phone": sanitize_phone(wali_phone) or None,
        }

    def create(self, user: CurrentUser, *, name: str, halaqah: Optional[str] = None,
               wali_name: Optional[str] = None, wali_phone: Optional[str] = None) -> Student:
        self._require_writer(user)
        return self._students.create(**self._fields(name, halaqah, wali_name, wali_phone))

    def update(self, user: CurrentUser, student_id: UUID, *, name: str, halaqah: Optional[str] = None,
               wali_name: Optional[str] = None, wali_phone: Optional[str] = None) -> Student:
        self._require_writer(user)
        fields = self._fields(name, halaqah, wali_name, wali_phone)
        self.get_for(user, student_id)
        student = self._students.update(student_id, **fields)
        if not student:
            raise NotFoundError("Santri tidak ditemukan")
        return student

    def delete(self, user: CurrentUser, student_id: UUID) -> None:
        self._require_writer(user)
        self.get_for(user, student_id)
        if not self._students.delete(student_id):
            raise NotFoundError("Santri tidak ditemukan")

    def whatsapp(self, user: CurrentUser, student_id: UUID) -> Optional[str]:
        student = self.get_for(user, student_id)
        return whatsapp_link(student.wali_phone)
