# api/app/core/enums.py
from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    USTADZ = "ustadz"
    WALI = "wali"


class StudentStatus(str, Enum):
    """Tingkat hafalan santri."""

    MUTQIN = "Mutqin"
    MUTAWASSITH = "Mutawassith"
    DHAIF = "Dhaif"


class HafalanType(str, Enum):
    BARU = "baru"
    MUROJAAH = "murojaah"


class CurriculumCategory(str, Enum):
    SURAH = "Surah"
    JUZ = "Juz"
    KITAB = "Kitab"
    MANDZUMAH = "Mandzumah"


class AbsenceReason(str, Enum):
    SAKIT = "sakit"
    IZIN = "izin"
    ALPHA = "alpha"
    TANPA_KETERANGAN = "tanpa_keterangan"


class AttendanceStatus(str, Enum):
    HADIR = "hadir"
    SAKIT = "sakit"
    IZIN = "izin"
    ALPHA = "alpha"


class CriteriaAspect(str, Enum):
    ADAB = "adab"
    DISCIPLINE = "discipline"
