# api/app/services/halaqah.py
from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from app.core.exceptions import NotFoundError, PermissionDenied, ValidationError
from app.core.security import CurrentUser
from app.models.halaqah import Halaqah
from app.repositories.base import HalaqahRepository


class HalaqahService:
    def __init__(self, halaqah: HalaqahRepository):
        self._halaqah = halaqah

    def list_all(self) -> Sequence[Halaqah]:
        return self._halaqah.list_all()

    def create(self, user: CurrentUser, *, name: str, teacher_id: Optional[UUID] = None,
               description: Optional[str] = None) -> Halaqah:
        if not user.is_admin:
            raise PermissionDenied("Hanya admin")
        name = (name or "").strip()
        if not name:
            raise ValidationError("Nama halaqah harus diisi")
        if self._halaqah.get_by_name(name):
            raise ValidationError(f"Halaqah '{name}' sudah ada")
        return self._halaqah.create(name=name, teacher_id=teacher_id, description=(description or "").strip() or None)

    def delete(self, user: CurrentUser, halaqah_id: UUID) -> None:
        if not user.is_admin:
            raise PermissionDenied("Hanya admin")
        if not self._halaqah.delete(halaqah_id):
            raise NotFoundError("Halaqah tidak ditemukan")
