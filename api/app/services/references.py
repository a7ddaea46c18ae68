# api/app/services/references.py
from __future__ import annotations

import logging
from datetime import time
from typing import Optional, Sequence

from app.core.enums import CriteriaAspect
from app.core.exceptions import ConflictError, NotFoundError, PermissionDenied, RepositoryError, ValidationError
from app.core.security import CurrentUser
from app.models.assessment import CriteriaRef, SessionRef
from app.repositories.base import ReferenceRepository

logger = logging.getLogger(__name__)

ERR_SESSION_IN_USE = "Gagal menghapus sesi. Mungkin sudah ada data penilaian yang terkait."


def _aspect(value: str) -> str:
    try:
        return CriteriaAspect(value).value
    except ValueError:
        raise ValidationError(f"Aspek tidak dikenal: {value}") from None


def _required(value: Optional[str], message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(message)
    return value


class ReferenceService:
    """Use case: admin mengelola kriteria dan sesi penilaian harian."""

    def __init__(self, refs: ReferenceRepository):
        self._refs = refs

    @staticmethod
    def _require_admin(user: CurrentUser) -> None:
        if not user.is_admin:
            raise PermissionDenied("Hanya admin")

    # ----------------------- kriteria -----------------------

    def list_criteria(self, active_only: bool = False) -> Sequence[CriteriaRef]:
        return self._refs.list_criteria(active_only=active_only)

    def create_criteria(
        self, user: CurrentUser, *, aspect: str, title: str, description: Optional[str] = None
    ) -> CriteriaRef:
        self._require_admin(user)
        aspect = _aspect(aspect)
        title = _required(title, "Judul kriteria harus diisi")
        # urutan baru = jumlah kriteria seaspek + 1
        sort_order = sum(1 for c in self._refs.list_criteria() if c.aspect == aspect) + 1
        return self._refs.create_criteria(
            aspect=aspect,
            title=title,
            description=(description or "").strip() or None,
            sort_order=sort_order,
            is_active=True,
        )

    def update_criteria(
        self, user: CurrentUser, criteria_id: int, *, aspect: str, title: str, description: Optional[str] = None
    ) -> CriteriaRef:
        self._require_admin(user)
        c = self._refs.update_criteria(
            criteria_id,
            aspect=_aspect(aspect),
            title=_required(title, "Judul kriteria harus diisi"),
            description=(description or "").strip() or None,
        )
        if not c:
            raise NotFoundError("Kriteria tidak ditemukan")
        return c

    def toggle_criteria(self, user: CurrentUser, criteria_id: int) -> CriteriaRef:
        self._require_admin(user)
        current = self._refs.get_criteria(criteria_id)
        if not current:
            raise NotFoundError("Kriteria tidak ditemukan")
        c = self._refs.update_criteria(criteria_id, is_active=not current.is_active)
        logger.info("Kriteria %s %s", criteria_id, "diaktifkan" if c.is_active else "dinonaktifkan")
        return c

    # ----------------------- sesi -----------------------

    def list_sessions(self, active_only: bool = False) -> Sequence[SessionRef]:
        return self._refs.list_sessions(active_only=active_only)

    def create_session(
        self, user: CurrentUser, *, name: str, time_start: Optional[time] = None, time_end: Optional[time] = None
    ) -> SessionRef:
        self._require_admin(user)
        name = _required(name, "Nama sesi harus diisi")
        return self._refs.create_session(
            name=name,
            time_start=time_start,
            time_end=time_end,
            sort_order=len(self._refs.list_sessions()) + 1,
            is_active=True,
        )

    def update_session(
        self,
        user: CurrentUser,
        session_id: int,
        *,
        name: str,
        time_start: Optional[time] = None,
        time_end: Optional[time] = None,
    ) -> SessionRef:
        self._require_admin(user)
        s = self._refs.update_session(
            session_id,
            name=_required(name, "Nama sesi harus diisi"),
            time_start=time_start,
            time_end=time_end,
        )
        if not s:
            raise NotFoundError("Sesi tidak ditemukan")
        return s

    def toggle_session(self, user: CurrentUser, session_id: int) -> SessionRef:
        self._require_admin(user)
        current = self._refs.get_session(session_id)
        if not current:
            raise NotFoundError("Sesi tidak ditemukan")
        s = self._refs.update_session(session_id, is_active=not current.is_active)
        logger.info("Sesi %s %s", session_id, "diaktifkan" if s.is_active else "dinonaktifkan")
        return s

    def delete_session(self, user: CurrentUser, session_id: int) -> None:
        self._require_admin(user)
        try:
            deleted = self._refs.delete_session(session_id)
        except RepositoryError as e:
            logger.warning("Sesi %s tidak bisa dihapus: %s", session_id, e)
            raise ConflictError(ERR_SESSION_IN_USE) from e
        if not deleted:
            raise NotFoundError("Sesi tidak ditemukan")
