#!/usr/bin/env python3
"""
Import santri dari file CSV lewat baris perintah (tanpa HTTP).

    python scripts/import_csv.py data/santri.csv [--dry-run]

Memakai pipeline yang sama dengan endpoint POST /api/v1/admin/imports/students.
"""
import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.core.config import settings  # noqa: E402
from app.core.exceptions import DomainError  # noqa: E402
from app.db.session import SessionLocal  # noqa: E402
from app.repositories.sql import SqlHalaqahRepository, SqlStudentRepository  # noqa: E402
from app.services.student_import import StudentImporter, decode_upload, parse_student_csv  # noqa: E402

logger = logging.getLogger("import_csv")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Import data santri & wali dari CSV")
    ap.add_argument("path", help="File CSV (delimiter , atau ;)")
    ap.add_argument("--dry-run", action="store_true", help="Validasi & hitung tanpa menulis ke DB")
    args = ap.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="[%(levelname)s] %(message)s")

    if not os.path.exists(args.path):
        logger.error("File tidak ditemukan: %s", args.path)
        return 1
    with open(args.path, "rb") as f:
        parsed = parse_student_csv(decode_upload(f.read()))
    if parsed.error:
        logger.error(parsed.error)
        return 1
    for r in parsed.invalid_rows:
        logger.warning("Baris %d: %s", r.line, r.error)

    with SessionLocal() as db:
        importer = StudentImporter(
            SqlStudentRepository(db), SqlHalaqahRepository(db), batch_size=settings.IMPORT_BATCH_SIZE,
        )
        try:
            result = importer.run(parsed.rows, dry_run=args.dry_run)
        except DomainError as e:
            logger.error(str(e))
            return 1

    if result.created_halaqah:
        logger.info("Halaqah baru: %s", ", ".join(result.created_halaqah))
    logger.info("%s%s", "[DRY RUN] " if result.dry_run else "", result.message)
    return 0 if result.failed == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
