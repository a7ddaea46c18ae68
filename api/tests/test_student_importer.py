from __future__ import annotations

import pytest

from app.core.exceptions import ImportAbortedError, ValidationError
from app.services.student_import import (
    ImportResult, ImportRow, StudentImporter, chunked, parse_student_csv,
)

E2E_CSV = (
    "Nama Lengkap,Halaqah,Nama Wali,No HP Wali\n"
    "Ahmad Fauzi,Halaqah Al-Fatihah,Budi Santoso,6281234567890\n"
    "Muhammad Rizki,Halaqah Al-Ikhlas,Siti Aminah,085712345678\n"
)


def _row(line, name, halaqah, phone, wali="Wali"):
    return ImportRow(line=line, name=name, halaqah=halaqah, wali_name=wali, wali_phone=phone)


def _rows(n, halaqah="Halaqah A"):
    return [_row(i + 2, f"Santri {i}", halaqah, f"0812{i:08d}") for i in range(n)]


@pytest.fixture
def importer(student_repo, halaqah_repo):
    return StudentImporter(student_repo, halaqah_repo)


def test_end_to_end_into_empty_store(importer, student_repo, halaqah_repo):
    parsed = parse_student_csv(E2E_CSV)
    result = importer.run(parsed.rows)

    assert result.created_halaqah == ["Halaqah Al-Fatihah", "Halaqah Al-Ikhlas"]
    assert (result.success, result.duplicates, result.failed) == (2, 0, 0)
    assert halaqah_repo.list_names() == {"Halaqah Al-Fatihah", "Halaqah Al-Ikhlas"}
    names = sorted(s.name for s in student_repo.list())
    assert names == ["Ahmad Fauzi", "Muhammad Rizki"]


def test_rerun_same_file_only_counts_duplicates(importer, student_repo, halaqah_repo):
    importer.run(parse_student_csv(E2E_CSV).rows)
    second = importer.run(parse_student_csv(E2E_CSV).rows)

    assert second.success == 0
    assert second.duplicates == 2
    assert second.created_halaqah == []
    assert len(halaqah_repo.create_many_calls) == 1
    assert len(student_repo.list()) == 2
    assert second.message == "Semua data (2) terdeteksi duplikat (nomor HP sudah ada)."


def test_local_and_international_prefix_are_the_same_number(importer, student_repo):
    student_repo.add("Lama", "Halaqah A", wali_phone="081234567890")
    fresh, dup = importer.filter_duplicates([_row(2, "Baru", "Halaqah A", "6281234567890")])
    assert fresh == []
    assert dup == 1


def test_same_number_twice_in_one_file_keeps_first(importer):
    rows = [
        _row(2, "Kakak", "Halaqah A", "081234567890"),
        _row(3, "Adik", "Halaqah A", "+62 812-3456-7890"),
    ]
    fresh, dup = importer.filter_duplicates(rows)
    assert [r.name for r in fresh] == ["Kakak"]
    assert dup == 1


def test_row_without_phone_is_never_a_duplicate(importer, student_repo):
    student_repo.add("Lama", "Halaqah A", wali_phone="0812")
    rows = [_row(2, "A", "Halaqah A", None), _row(3, "B", "Halaqah A", "")]
    fresh, dup = importer.filter_duplicates(rows)
    assert len(fresh) == 2
    assert dup == 0


def test_halaqah_sync_inserts_exact_set_difference(importer, halaqah_repo):
    halaqah_repo.create(name="Halaqah A")
    rows = [
        _row(2, "a", "Halaqah A", "1"), _row(3, "b", "Halaqah B", "2"),
        _row(4, "c", "Halaqah B", "3"), _row(5, "d", "Halaqah A", "4"),
    ]
    assert importer.sync_halaqah(rows) == ["Halaqah B"]
    assert halaqah_repo.create_many_calls == [["Halaqah B"]]


def test_halaqah_sync_compares_names_exactly(importer, halaqah_repo):
    halaqah_repo.create(name="Halaqah Al-Fatihah")
    rows = [_row(2, "a", "halaqah al-fatihah", "1"), _row(3, "b", " Halaqah Al-Fatihah ", "2")]
    assert importer.sync_halaqah(rows) == ["halaqah al-fatihah"]
    assert halaqah_repo.list_names() == {"Halaqah Al-Fatihah", "halaqah al-fatihah"}


def test_halaqah_sync_noop_when_all_exist(importer, halaqah_repo):
    halaqah_repo.create(name="Halaqah A")
    assert importer.sync_halaqah(_rows(3)) == []
    assert halaqah_repo.create_many_calls == []


def test_halaqah_failure_aborts_before_any_student_insert(fake_factory):
    students = fake_factory["students"]()
    halaqah = fake_factory["halaqah"](fail_create=True)
    importer = StudentImporter(students, halaqah)

    with pytest.raises(ImportAbortedError) as exc:
        importer.run(_rows(3))
    assert "Gagal membuat halaqah baru otomatis" in str(exc.value)
    assert students.batch_sizes == []


def test_batches_of_fifty(fake_factory):
    students = fake_factory["students"]()
    importer = StudentImporter(students, fake_factory["halaqah"]())
    result = importer.run(_rows(120))
    assert students.batch_sizes == [50, 50, 20]
    assert result.success == 120


def test_failed_chunk_is_counted_and_next_chunks_continue(fake_factory):
    students = fake_factory["students"](fail_batches={2})
    importer = StudentImporter(students, fake_factory["halaqah"]())
    result = importer.run(_rows(120))

    assert students.batch_sizes == [50, 50, 20]
    assert (result.success, result.failed) == (70, 50)
    assert len(students.list()) == 70
    assert result.message == "70 data berhasil diimpor. 50 data gagal."


def test_custom_batch_size(fake_factory):
    students = fake_factory["students"]()
    StudentImporter(students, fake_factory["halaqah"](), batch_size=2).run(_rows(5))
    assert students.batch_sizes == [2, 2, 1]


def test_batch_size_must_be_positive(student_repo, halaqah_repo):
    with pytest.raises(ValueError):
        StudentImporter(student_repo, halaqah_repo, batch_size=0)


def test_invalid_rows_are_excluded_and_counted(importer, student_repo):
    rows = parse_student_csv(
        "Nama,Halaqah,No HP\nAhmad,Halaqah A,0812\nRizki,Halaqah A,\n"
    ).rows
    result = importer.run(rows)
    assert (result.success, result.invalid) == (1, 1)
    assert [s.name for s in student_repo.list()] == ["Ahmad"]


def test_nothing_valid_raises(importer):
    rows = parse_student_csv("Nama,Halaqah,No HP\nAhmad,Halaqah A,\n").rows
    with pytest.raises(ValidationError):
        importer.run(rows)


def test_dry_run_writes_nothing(importer, student_repo, halaqah_repo):
    student_repo.add("Lama", "Halaqah Al-Ikhlas", wali_phone="6285712345678")
    result = importer.run(parse_student_csv(E2E_CSV).rows, dry_run=True)

    assert result.dry_run
    assert result.created_halaqah == ["Halaqah Al-Fatihah", "Halaqah Al-Ikhlas"]
    assert (result.success, result.duplicates) == (1, 1)
    assert halaqah_repo.create_many_calls == []
    assert student_repo.batch_sizes == []
    assert result.message == "1 data siap diimpor (dry run). 1 data akan dilewati karena duplikat."


def test_inserted_payload_keeps_sanitized_fields(importer, student_repo):
    importer.run(parse_student_csv(
        'Nama Santri,Kelas,Nama Wali,WA\n"Rahman, Abdullah",Halaqah An-Nas,,0811-2233-4455\n'
    ).rows)
    (s,) = student_repo.list()
    assert s.name == "Rahman, Abdullah"
    assert s.halaqah == "Halaqah An-Nas"
    assert s.wali_name is None
    assert s.wali_phone == "081122334455"


def test_chunked():
    assert list(chunked([1, 2, 3, 4, 5], 2)) == [[1, 2], [3, 4], [5]]
    assert list(chunked([], 50)) == []


@pytest.mark.parametrize("result,expected", [
    (ImportResult(), "Tidak ada data baru untuk diimpor."),
    (ImportResult(success=3, duplicates=1), "3 data berhasil diimpor. 1 data dilewati karena duplikat."),
    (ImportResult(success=3, dry_run=True), "3 data siap diimpor (dry run)."),
    (ImportResult(duplicates=2, dry_run=True), "Semua data (2) terdeteksi duplikat (nomor HP sudah ada)."),
])
def test_result_message(result, expected):
    assert result.message == expected
