from __future__ import annotations

import uuid
from typing import Any

import pytest

from app.core.enums import CurriculumCategory
from app.core.exceptions import ConflictError, NotFoundError, PermissionDenied, RepositoryError, ValidationError
from app.models.scoring import CurriculumItem
from app.services.curriculum import (
    ERR_NO_ITEMS, CurriculumService, curriculum_fields, parse_curriculum_csv, parse_int,
)

SURAH_CSV = (
    "name,surah_number,ayat_start,ayat_end,page_start,page_end\n"
    "Al-Mulk,67,1,30,562,564\n"
    "An-Naba,78,1,40\n"
    '"Al-Qalam",68,1,52,564,566\n'
)


class InMemoryCurriculum:
    def __init__(self, fail_delete=False):
        self.items: dict[uuid.UUID, CurriculumItem] = {}
        self.fail_delete = fail_delete
        self.batch_sizes: list[int] = []

    def get(self, item_id):
        return self.items.get(item_id)

    def list_all(self):
        return sorted(self.items.values(), key=lambda i: (i.category, i.name))

    def create(self, **fields: Any) -> CurriculumItem:
        item = CurriculumItem(id=uuid.uuid4(), **fields)
        self.items[item.id] = item
        return item

    def create_many(self, rows):
        self.batch_sizes.append(len(rows))
        for r in rows:
            self.create(**r)
        return len(rows)

    def update(self, item_id, **fields: Any):
        item = self.items.get(item_id)
        if not item:
            return None
        for k, v in fields.items():
            setattr(item, k, v)
        return item

    def delete(self, item_id) -> bool:
        if self.fail_delete:
            raise RepositoryError("violates foreign key constraint")
        return self.items.pop(item_id, None) is not None


@pytest.mark.parametrize("raw,expected", [
    ("12", 12), ("12 ayat", 12), (" 7", 7), ("-3", -3), ("0", None), ("", None), ("abc", None), (None, None),
])
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


def test_fields_are_cleared_per_category():
    surah = curriculum_fields("Surah", " Al-Mulk ", surah_number=67, ayat_end=30, total_pages=9)
    assert (surah["name"], surah["surah_number"], surah["ayat_end"]) == ("Al-Mulk", 67, 30)
    assert surah["total_pages"] is None and surah["target_ayat"] is None

    kitab = curriculum_fields("Kitab", "Safinah", total_pages=30, ayat_end=5)
    assert (kitab["total_pages"], kitab["target_ayat"], kitab["ayat_end"]) == (30, 30, None)

    nadhom = curriculum_fields("Mandzumah", "Jurumiyah", total_bait=100, ayat_end=5)
    assert (nadhom["target_ayat"], nadhom["ayat_end"], nadhom["total_pages"]) == (100, None, None)

    juz = curriculum_fields("Juz", "Juz 30", surah_number=78)
    assert juz["surah_number"] is None


def test_fields_validation():
    with pytest.raises(ValidationError, match="Nama materi harus diisi"):
        curriculum_fields("Surah", "   ")
    with pytest.raises(ValidationError, match="Kategori tidak dikenal"):
        curriculum_fields("Hadits", "Arbain")


def test_parse_surah_csv_skips_header_and_short_rows():
    items = parse_curriculum_csv(SURAH_CSV, CurriculumCategory.SURAH)
    assert [i["name"] for i in items] == ["Al-Mulk", "Al-Qalam"]
    mulk = items[0]
    assert (mulk["surah_number"], mulk["ayat_start"], mulk["ayat_end"]) == (67, 1, 30)
    assert (mulk["page_start"], mulk["page_end"]) == (562, 564)
    assert mulk["category"] == "Surah"


def test_parse_kitab_csv_without_header():
    items = parse_curriculum_csv("Kitab Tauhid,150\nSafinah,abc\n,20\n", CurriculumCategory.KITAB)
    assert [(i["name"], i["total_pages"], i["target_ayat"]) for i in items] == [
        ("Kitab Tauhid", 150, 150),
        ("Safinah", 0, 0),
    ]


def test_parse_csv_only_for_surah_and_kitab():
    with pytest.raises(ValidationError):
        parse_curriculum_csv("Alfiyah,1000\n", CurriculumCategory.MANDZUMAH)


@pytest.fixture
def repo():
    return InMemoryCurriculum()


@pytest.fixture
def service(repo):
    return CurriculumService(repo)


def test_create_and_update_item(service, admin):
    item = service.create(admin, "Surah", "An-Naba", surah_number=78, ayat_start=1, ayat_end=40)
    assert item.ayat_end == 40

    updated = service.update(admin, item.id, "Kitab", "Safinah", total_pages=30)
    assert (updated.category, updated.total_pages, updated.target_ayat) == ("Kitab", 30, 30)
    assert updated.surah_number is None and updated.ayat_end is None


def test_only_admin_changes_curriculum(service, ustadz):
    with pytest.raises(PermissionDenied):
        service.create(ustadz, "Surah", "An-Naba")
    with pytest.raises(PermissionDenied):
        service.import_csv(ustadz, SURAH_CSV, "Surah")


def test_update_and_delete_unknown_item(service, admin):
    with pytest.raises(NotFoundError):
        service.update(admin, uuid.uuid4(), "Surah", "An-Naba")
    with pytest.raises(NotFoundError):
        service.delete(admin, uuid.uuid4())


def test_delete_item_in_use_is_conflict(super_admin):
    repo = InMemoryCurriculum(fail_delete=True)
    item = repo.create(**curriculum_fields("Surah", "An-Naba"))
    with pytest.raises(ConflictError):
        CurriculumService(repo).delete(super_admin, item.id)


def test_import_csv_is_one_batch(service, repo, admin):
    assert service.import_csv(admin, SURAH_CSV, "Surah") == 2
    assert repo.batch_sizes == [2]
    assert [i.name for i in service.list_all()] == ["Al-Mulk", "Al-Qalam"]


def test_import_csv_without_valid_rows(service, repo, admin):
    with pytest.raises(ValidationError, match=ERR_NO_ITEMS):
        service.import_csv(admin, "name,surah_number\nAl-Mulk,67\n", "Surah")
    assert repo.batch_sizes == []


def test_templates():
    filename, content = CurriculumService.template("Surah")
    assert filename == "template_import_surah.csv"
    assert content.splitlines() == [
        "name,surah_number,ayat_start,ayat_end,page_start,page_end",
        "Al-Mulk,67,1,30,562,564",
    ]
    assert CurriculumService.template("Kitab")[1].startswith("name,total_pages\n")
    with pytest.raises(ValidationError):
        CurriculumService.template("Juz")
