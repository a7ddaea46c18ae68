# api/app/services/student_import.py
"""
Import massal santri dari file CSV.

Alurnya linear:
  teks -> baris & kolom -> pemetaan header -> validasi per baris      (parse_student_csv)
  -> sinkron halaqah -> saring duplikat nomor HP -> insert per batch  (StudentImporter)
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from app.core.exceptions import ImportAbortedError, RepositoryError, ValidationError
from app.repositories.base import HalaqahRepository, StudentRepository
from app.services.phone import normalize_phone, sanitize_phone

logger = logging.getLogger(__name__)

BATCH_SIZE = 50

TEMPLATE_FILENAME = "template_data_santri_wali.csv"
TEMPLATE_CSV = (
    "Nama Lengkap,Halaqah,Nama Wali,No HP Wali\n"
    "Ahmad Fauzi,Halaqah Al-Fatihah,Budi Santoso,6281234567890\n"
    "Muhammad Rizki,Halaqah Al-Ikhlas,Siti Aminah,085712345678\n"
    "Abdullah Rahman,Halaqah An-Nas,Rahmat Hidayat,6281122334455\n"
)

ERR_TOO_FEW_LINES = "File CSV harus memiliki header dan minimal 1 baris data"
ERR_NO_NAME_COLUMN = "Kolom 'nama' atau 'name' tidak ditemukan di header CSV"
ERR_NO_HALAQAH_COLUMN = "Kolom 'halaqah' atau 'kelas' tidak ditemukan di header CSV"
ERR_NO_ROWS = "Tidak ada data valid ditemukan di file CSV"
ERR_NOTHING_TO_IMPORT = "Tidak ada data valid untuk diimpor"

ROW_ERR_NAME = "Nama kosong"
ROW_ERR_HALAQAH = "Halaqah kosong"
ROW_ERR_PHONE = "No HP Wali kosong"

_LINE_BREAK = re.compile(r"\r?\n")
_WA_TOKEN = re.compile(r"\bwa\b")
_GUARDIAN_TOKENS = ("wali", "orang tua", "parent", "guardian")


# ----------------------- tipe -----------------------

@dataclass
class ImportRow:
    line: int  # nomor baris di file (1 = header)
    name: str
    halaqah: str
    wali_name: Optional[str] = None
    wali_phone: Optional[str] = None
    valid: bool = True
    error: Optional[str] = None


@dataclass(frozen=True)
class HeaderMap:
    name: int = -1
    halaqah: int = -1
    wali_name: int = -1
    wali_phone: int = -1


@dataclass
class ParsedCSV:
    rows: list[ImportRow] = field(default_factory=list)
    error: Optional[str] = None
    delimiter: str = ","

    @property
    def valid_rows(self) -> list[ImportRow]:
        return [r for r in self.rows if r.valid]

    @property
    def invalid_rows(self) -> list[ImportRow]:
        return [r for r in self.rows if not r.valid]


@dataclass
class ImportResult:
    success: int = 0
    failed: int = 0
    duplicates: int = 0
    invalid: int = 0
    created_halaqah: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def message(self) -> str:
        if self.success == 0 and self.failed == 0:
            if self.duplicates > 0:
                return f"Semua data ({self.duplicates}) terdeteksi duplikat (nomor HP sudah ada)."
            return "Tidak ada data baru untuk diimpor."
        parts = []
        if self.success > 0:
            if self.dry_run:
                parts.append(f"{self.success} data siap diimpor (dry run).")
            else:
                parts.append(f"{self.success} data berhasil diimpor.")
        if self.failed > 0:
            parts.append(f"{self.failed} data gagal.")
        if self.duplicates > 0:
            verb = "akan dilewati" if self.dry_run else "dilewati"
            parts.append(f"{self.duplicates} data {verb} karena duplikat.")
        return " ".join(parts)


# ----------------------- parsing -----------------------

def decode_upload(raw: bytes) -> str:
    # UTF-8 dengan BOM (ekspor Excel), fallback latin-1
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def detect_delimiter(header_line: str) -> str:
    return ";" if ";" in header_line else ","


def _split_pattern(delimiter: str) -> re.Pattern[str]:
    # delimiter hanya dihitung bila sisa baris memuat jumlah tanda kutip genap
    return re.compile(rf'{re.escape(delimiter)}(?=(?:(?:[^"]*"){{2}})*[^"]*$)')


def _unquote(value: str) -> str:
    value = value.strip()
    value = re.sub(r'^"|"$', "", value)
    return value.replace('""', '"')


def split_line(line: str, delimiter: str) -> list[str]:
    return [_unquote(v) for v in _split_pattern(delimiter).split(line)]


def split_lines(text: str) -> tuple[list[list[str]], str]:
    """Semua baris non-kosong (header termasuk) sebagai list kolom, plus delimiter."""
    lines = [ln for ln in _LINE_BREAK.split(text) if ln.strip()]
    if not lines:
        return [], ","
    delimiter = detect_delimiter(lines[0])
    return [split_line(ln, delimiter) for ln in lines], delimiter


def _is_phone_header(h: str) -> bool:
    return (
        "hp" in h
        or bool(_WA_TOKEN.search(h))
        or "whatsapp" in h
        or "telp" in h
        or "phone" in h
    )


def _is_guardian_header(h: str) -> bool:
    return any(tok in h for tok in _GUARDIAN_TOKENS)


def _first(headers: Sequence[str], pred) -> int:
    for i, h in enumerate(headers):
        if pred(h):
            return i
    return -1


def map_headers(header: Sequence[str]) -> HeaderMap:
    headers = [_unquote(h).lower() for h in header]
    return HeaderMap(
        name=_first(headers, lambda h: ("nama" in h or "name" in h) and not _is_guardian_header(h)),
        halaqah=_first(headers, lambda h: "halaqah" in h or "kelas" in h or "group" in h or h == "class"),
        wali_name=_first(headers, lambda h: _is_guardian_header(h) and not _is_phone_header(h)),
        wali_phone=_first(headers, _is_phone_header),
    )


def _value(values: Sequence[str], idx: int) -> str:
    if idx < 0 or idx >= len(values):
        return ""
    return values[idx]


def validate_row(values: Sequence[str], header_map: HeaderMap, line: int) -> Optional[ImportRow]:
    """Klasifikasi satu baris data. None untuk baris kosong (nama & halaqah kosong)."""
    name = _value(values, header_map.name)
    halaqah = _value(values, header_map.halaqah)
    wali_name = _value(values, header_map.wali_name) or None
    wali_phone = sanitize_phone(_value(values, header_map.wali_phone)) or None

    if not name and not halaqah:
        return None

    row = ImportRow(line=line, name=name, halaqah=halaqah, wali_name=wali_name, wali_phone=wali_phone)
    if not name:
        row.valid, row.error = False, ROW_ERR_NAME
    elif not halaqah:
        row.valid, row.error = False, ROW_ERR_HALAQAH
    elif not wali_phone:
        row.valid, row.error = False, ROW_ERR_PHONE
    return row


def parse_student_csv(text: str) -> ParsedCSV:
    """
    Parse isi file CSV santri. Tidak melempar exception: kesalahan struktur
    dikembalikan di ParsedCSV.error dengan rows kosong.
    """
    table, delimiter = split_lines(text)
    if len(table) < 2:
        return ParsedCSV(error=ERR_TOO_FEW_LINES, delimiter=delimiter)

    header_map = map_headers(table[0])
    if header_map.name == -1:
        return ParsedCSV(error=ERR_NO_NAME_COLUMN, delimiter=delimiter)
    if header_map.halaqah == -1:
        return ParsedCSV(error=ERR_NO_HALAQAH_COLUMN, delimiter=delimiter)

    rows: list[ImportRow] = []
    for line_no, values in enumerate(table[1:], start=2):
        row = validate_row(values, header_map, line_no)
        if row is not None:
            rows.append(row)

    if not rows:
        return ParsedCSV(error=ERR_NO_ROWS, delimiter=delimiter)
    return ParsedCSV(rows=rows, delimiter=delimiter)


# ----------------------- import -----------------------

def chunked(items: Sequence, size: int):
    for i in range(0, len(items), size):
        yield items[i:i + size]


class StudentImporter:
    """Use case: simpan baris CSV yang valid ke tabel halaqah & students."""

    def __init__(self, students: StudentRepository, halaqah: HalaqahRepository, batch_size: int = BATCH_SIZE):
        if batch_size < 1:
            raise ValueError("batch_size harus >= 1")
        self._students = students
        self._halaqah = halaqah
        self._batch_size = batch_size

    def missing_halaqah(self, rows: Sequence[ImportRow]) -> list[str]:
        wanted: list[str] = []
        for r in rows:
            name = r.halaqah.strip()
            if name and name not in wanted:
                wanted.append(name)
        existing = self._halaqah.list_names()
        return [n for n in wanted if n not in existing]

    def sync_halaqah(self, rows: Sequence[ImportRow]) -> list[str]:
        """Buat halaqah yang belum ada dalam satu batch. Gagal = import dibatalkan."""
        missing = self.missing_halaqah(rows)
        if not missing:
            return []
        try:
            self._halaqah.create_many(missing)
        except RepositoryError as e:
            logger.exception("Gagal membuat halaqah dari CSV: %s", missing)
            raise ImportAbortedError(f"Gagal membuat halaqah baru otomatis: {e}") from e
        logger.info("Halaqah baru dari CSV: %s", missing)
        return missing

    def filter_duplicates(self, rows: Sequence[ImportRow]) -> tuple[list[ImportRow], int]:
        seen = {p for p in (normalize_phone(x) for x in self._students.list_wali_phones()) if p}
        fresh: list[ImportRow] = []
        duplicates = 0
        for r in rows:
            phone = normalize_phone(r.wali_phone)
            if phone and phone in seen:
                duplicates += 1
                continue
            if phone:
                seen.add(phone)
            fresh.append(r)
        return fresh, duplicates

    def insert_batches(self, rows: Sequence[ImportRow]) -> tuple[int, int]:
        success = failed = 0
        for batch in chunked(rows, self._batch_size):
            payload = [
                {
                    "name": r.name,
                    "halaqah": r.halaqah,
                    "wali_name": r.wali_name or None,
                    "wali_phone": r.wali_phone or None,
                }
                for r in batch
            ]
            try:
                self._students.insert_many(payload)
            except RepositoryError as e:
                logger.warning("Batch insert santri gagal (%d baris): %s", len(batch), e)
                failed += len(batch)
            else:
                success += len(batch)
        return success, failed

    def run(self, rows: Sequence[ImportRow], dry_run: bool = False) -> ImportResult:
        valid = [r for r in rows if r.valid]
        result = ImportResult(invalid=len(rows) - len(valid), dry_run=dry_run)
        if not valid:
            raise ValidationError(ERR_NOTHING_TO_IMPORT)

        if dry_run:
            result.created_halaqah = self.missing_halaqah(valid)
            fresh, result.duplicates = self.filter_duplicates(valid)
            result.success = len(fresh)
            return result

        result.created_halaqah = self.sync_halaqah(valid)
        fresh, result.duplicates = self.filter_duplicates(valid)
        if result.duplicates:
            logger.info("%d baris CSV dilewati karena nomor HP sudah terdaftar", result.duplicates)
        if fresh:
            result.success, result.failed = self.insert_batches(fresh)
        logger.info("Import santri selesai: %s", result.message)
        return result
