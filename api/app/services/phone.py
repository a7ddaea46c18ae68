# api/app/services/phone.py
from __future__ import annotations

import re
from datetime import date
from typing import Optional
from urllib.parse import quote

_NON_DIGIT = re.compile(r"\D")
_NON_PHONE = re.compile(r"[^\d+]")

WA_BASE = "https://wa.me/"

_HARI = ["Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu"]
_BULAN = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]


def sanitize_phone(raw: Optional[str]) -> str:
    """Buang semua karakter selain digit dan '+' (format simpan)."""
    return _NON_PHONE.sub("", raw or "")


def normalize_phone(raw: Optional[str]) -> str:
    """
    Format pembanding: hanya digit, awalan lokal '0' menjadi '62'.
    '0812-3456-7890' dan '+62 812 3456 7890' -> '6281234567890'.
    """
    digits = _NON_DIGIT.sub("", raw or "")
    if digits.startswith("0"):
        digits = "62" + digits[1:]
    return digits


def whatsapp_link(phone: Optional[str], text: Optional[str] = None) -> Optional[str]:
    number = normalize_phone(phone)
    if not number:
        return None
    url = f"{WA_BASE}{number}"
    if text:
        url += f"?text={quote(text, safe='')}"
    return url


def format_tanggal(day: date) -> str:
    """'Senin, 19 Oktober 2026'"""
    return f"{_HARI[day.weekday()]}, {day.day} {_BULAN[day.month - 1]} {day.year}"


def reminder_message(teacher_name: str, session_name: str, session_time: str, day: date) -> str:
    """Pesan pengingat untuk ustadz yang belum menginput penilaian harian."""
    return (
        f"Assalamu'alaikum Ustadz/ah {teacher_name},\n\n"
        f"Mohon untuk segera menginput Penilaian Harian pada:\n"
        f"Tanggal: {format_tanggal(day)}\n"
        f"Sesi: {session_name} ({session_time})\n\n"
        f"Silakan akses dashboard guru untuk melakukan input.\n\n"
        f"Jazakumullahu khairan."
    )
