# api/app/services/report_export.py
from __future__ import annotations

import csv
import io
from io import BytesIO
from typing import Sequence

from openpyxl import Workbook

from app.models.student import Student
from app.services.attendance import AbsenceRecap, AssessmentSummary, StudentAssessmentReport

STUDENT_COLUMNS = ["nama", "halaqah", "status", "rata_rata", "nama_wali", "no_hp_wali"]


def students_csv(students: Sequence[Student]) -> str:
    out = io.StringIO()
    w = csv.writer(out)
    w.writerow(STUDENT_COLUMNS)
    for s in students:
        w.writerow([s.name, s.halaqah, s.status, s.average_score, s.wali_name or "", s.wali_phone or ""])
    return out.getvalue()


ABSENCE_COLUMNS = ["Nama Santri", "Halaqah", "Total Absen", "Sakit", "Izin", "Tanpa Keterangan"]


def absences_csv(rows: Sequence[AbsenceRecap]) -> str:
    out = io.StringIO()
    w = csv.writer(out)
    w.writerow(ABSENCE_COLUMNS)
    for r in rows:
        w.writerow([r.name, r.halaqah, r.total_absences, r.sakit, r.izin, r.alpha])
    return out.getvalue()


def assessment_report_xlsx(rows: Sequence[StudentAssessmentReport], summary: AssessmentSummary) -> bytes:
    wb = Workbook()
    ws_res = wb.active
    ws_res.title = "Ringkasan"
    ws_res.append(["total_santri", "total_input", "rata_rata_kepatuhan"])
    ws_res.append([summary.total_santri, summary.total_inputs, summary.avg_compliance])

    ws = wb.create_sheet("Per Santri")
    ws.append(["nama", "halaqah", "total_input", "adab_%", "disiplin_%", "total_%"])
    for r in rows:
        ws.append([
            r.name, r.halaqah, r.total_inputs,
            r.compliance_adab, r.compliance_discipline, r.compliance_total,
        ])

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()
