# api/app/services/curriculum.py
"""
Materi hafalan (kurikulum): Surah, Juz, Kitab, Mandzumah.

Kolom yang diisi bergantung kategori; kolom milik kategori lain selalu dikosongkan
supaya target progres (ayat / halaman / bait) tidak tertukar.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Optional, Sequence
from uuid import UUID

from app.core.enums import CurriculumCategory
from app.core.exceptions import ConflictError, NotFoundError, PermissionDenied, RepositoryError, ValidationError
from app.core.security import CurrentUser
from app.models.scoring import CurriculumItem
from app.repositories.base import CurriculumRepository
from app.services.student_import import split_lines

logger = logging.getLogger(__name__)

IMPORT_TEMPLATES = {
    CurriculumCategory.SURAH: (
        "name,surah_number,ayat_start,ayat_end,page_start,page_end\n"
        "Al-Mulk,67,1,30,562,564\n"
    ),
    CurriculumCategory.KITAB: (
        "name,total_pages\n"
        "Kitab Tauhid,150\n"
    ),
}

ERR_NO_ITEMS = "Tidak ada data valid yang ditemukan."

_NUMERIC = ("surah_number", "ayat_start", "ayat_end", "page_start", "page_end", "target_ayat", "total_pages")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Optional[str]) -> Optional[int]:
    """Bilangan bulat di awal teks ("12 ayat" -> 12); kosong atau nol -> None."""
    m = _LEADING_INT.match(value or "")
    if not m:
        return None
    return int(m.group(1)) or None


def _category(value: str) -> CurriculumCategory:
    try:
        return CurriculumCategory(value)
    except ValueError:
        raise ValidationError(f"Kategori tidak dikenal: {value}") from None


def curriculum_fields(
    category: str,
    name: str,
    *,
    surah_number: Optional[int] = None,
    ayat_start: Optional[int] = None,
    ayat_end: Optional[int] = None,
    page_start: Optional[int] = None,
    page_end: Optional[int] = None,
    total_pages: Optional[int] = None,
    total_bait: Optional[int] = None,
) -> dict[str, Any]:
    cat = _category(category)
    name = (name or "").strip()
    if not name:
        raise ValidationError("Nama materi harus diisi")

    fields: dict[str, Any] = {"category": cat.value, "name": name}
    fields.update(dict.fromkeys(_NUMERIC))
    if cat == CurriculumCategory.SURAH:
        fields.update(
            surah_number=surah_number,
            ayat_start=ayat_start,
            ayat_end=ayat_end,
            page_start=page_start,
            page_end=page_end,
        )
    elif cat == CurriculumCategory.KITAB:
        fields.update(total_pages=total_pages, target_ayat=total_pages)
    elif cat == CurriculumCategory.MANDZUMAH:
        # akhir bait disimpan di target_ayat
        fields.update(target_ayat=total_bait)
    return fields


def parse_curriculum_csv(text: str, category: CurriculumCategory) -> list[dict[str, Any]]:
    """
    Surah: name,surah_number,ayat_start,ayat_end,page_start,page_end
    Kitab: name,total_pages

    Header opsional (baris pertama yang memuat "name"/"nama"). Baris dengan
    kolom kurang atau nama kosong dilewati.
    """
    if category not in IMPORT_TEMPLATES:
        raise ValidationError(f"Import CSV tidak tersedia untuk kategori {category.value}")
    table, _ = split_lines(text)
    if table and any("name" in c.lower() or "nama" in c.lower() for c in table[0]):
        table = table[1:]

    items: list[dict[str, Any]] = []
    for cols in table:
        if category == CurriculumCategory.SURAH:
            if len(cols) < 6 or not cols[0]:
                continue
            items.append(curriculum_fields(
                category.value, cols[0],
                surah_number=parse_int(cols[1]),
                ayat_start=parse_int(cols[2]),
                ayat_end=parse_int(cols[3]),
                page_start=parse_int(cols[4]),
                page_end=parse_int(cols[5]),
            ))
        else:
            if len(cols) < 2 or not cols[0]:
                continue
            items.append(curriculum_fields(category.value, cols[0], total_pages=parse_int(cols[1]) or 0))
    return items


class CurriculumService:
    """Use case: admin mengelola materi hafalan."""

    def __init__(self, curriculum: CurriculumRepository):
        self._curriculum = curriculum

    def list_all(self) -> Sequence[CurriculumItem]:
        return self._curriculum.list_all()

    @staticmethod
    def _require_admin(user: CurrentUser) -> None:
        if not user.is_admin:
            raise PermissionDenied("Hanya admin yang dapat mengubah kurikulum")

    def create(self, user: CurrentUser, category: str, name: str, **numbers: Optional[int]) -> CurriculumItem:
        self._require_admin(user)
        return self._curriculum.create(**curriculum_fields(category, name, **numbers))

    def update(
        self, user: CurrentUser, item_id: UUID, category: str, name: str, **numbers: Optional[int]
    ) -> CurriculumItem:
        self._require_admin(user)
        item = self._curriculum.update(item_id, **curriculum_fields(category, name, **numbers))
        if not item:
            raise NotFoundError("Materi hafalan tidak ditemukan")
        return item

    def delete(self, user: CurrentUser, item_id: UUID) -> None:
        self._require_admin(user)
        try:
            deleted = self._curriculum.delete(item_id)
        except RepositoryError as e:
            raise ConflictError("Gagal menghapus materi. Mungkin sudah dipakai pada data nilai.") from e
        if not deleted:
            raise NotFoundError("Materi hafalan tidak ditemukan")

    def import_csv(self, user: CurrentUser, text: str, category: str) -> int:
        self._require_admin(user)
        items = parse_curriculum_csv(text, _category(category))
        if not items:
            raise ValidationError(ERR_NO_ITEMS)
        count = self._curriculum.create_many(items)
        logger.info("Import kurikulum %s: %d item", category, count)
        return count

    @staticmethod
    def template(category: str) -> tuple[str, str]:
        """(nama file, isi CSV) untuk kategori yang bisa diimpor."""
        cat = _category(category)
        if cat not in IMPORT_TEMPLATES:
            raise ValidationError(f"Import CSV tidak tersedia untuk kategori {cat.value}")
        return f"template_import_{cat.value.lower()}.csv", IMPORT_TEMPLATES[cat]
