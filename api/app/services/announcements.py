# api/app/services/announcements.py
from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from app.core.enums import Role
from app.core.exceptions import NotFoundError, PermissionDenied, ValidationError
from app.core.security import CurrentUser
from app.models.announcement import Announcement
from app.repositories.base import AnnouncementRepository


class AnnouncementService:
    def __init__(self, announcements: AnnouncementRepository):
        self._announcements = announcements

    def list_for(self, user: CurrentUser) -> Sequence[Announcement]:
        # wali hanya melihat pengumuman aktif
        return self._announcements.list(active_only=user.role == Role.WALI)

    @staticmethod
    def _require_admin(user: CurrentUser) -> None:
        if not user.is_admin:
            raise PermissionDenied("Hanya admin")

    @staticmethod
    def _clean(title: Optional[str], content: Optional[str]) -> tuple[str, str]:
        title, content = (title or "").strip(), (content or "").strip()
        if not title or not content:
            raise ValidationError("Judul dan isi pengumuman harus diisi")
        return title, content

    def create(self, user: CurrentUser, *, title: str, content: str) -> Announcement:
        self._require_admin(user)
        title, content = self._clean(title, content)
        return self._announcements.create(title=title, content=content, created_by=user.user_id)

    def update(self, user: CurrentUser, announcement_id: UUID, *, title: str, content: str) -> Announcement:
        self._require_admin(user)
        title, content = self._clean(title, content)
        a = self._announcements.update(announcement_id, title=title, content=content)
        if not a:
            raise NotFoundError("Pengumuman tidak ditemukan")
        return a

    def toggle(self, user: CurrentUser, announcement_id: UUID) -> Announcement:
        self._require_admin(user)
        current = self._announcements.get(announcement_id)
        if not current:
            raise NotFoundError("Pengumuman tidak ditemukan")
        return self._announcements.update(announcement_id, is_active=not current.is_active)

    def delete(self, user: CurrentUser, announcement_id: UUID) -> None:
        self._require_admin(user)
        if not self._announcements.delete(announcement_id):
            raise NotFoundError("Pengumuman tidak ditemukan")
