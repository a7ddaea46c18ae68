from __future__ import annotations

import pytest

from app.api.deps.repos import get_halaqah_repo
from app.core.exceptions import RepositoryError
from app.main import app
from app.repositories.sql import SqlStudentRepository

CSV = (
    "Nama Lengkap,Halaqah,Nama Wali,No HP Wali\n"
    "Ahmad Fauzi,Halaqah Al-Fatihah,Budi Santoso,6281234567890\n"
    "Muhammad Rizki,Halaqah Al-Ikhlas,Siti Aminah,085712345678\n"
    "Tanpa Nomor,Halaqah Al-Ikhlas,Rahmat,\n"
)


def _upload(content: str, name="santri.csv"):
    return {"file": (name, content.encode("utf-8"), "text/csv")}


def test_template_download(client):
    r = client.get("/api/v1/admin/imports/students/template")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert 'filename="template_data_santri_wali.csv"' in r.headers["content-disposition"]
    lines = r.text.strip().splitlines()
    assert lines[0] == "Nama Lengkap,Halaqah,Nama Wali,No HP Wali"
    assert len(lines) == 4


def test_preview_lists_every_row(client):
    r = client.post("/api/v1/admin/imports/students/preview", files=_upload(CSV))
    assert r.status_code == 200
    body = r.json()
    assert (body["delimiter"], body["total"], body["valid"], body["invalid"]) == (",", 3, 2, 1)
    assert body["rows"][2] == {
        "row": 4, "name": "Tanpa Nomor", "halaqah": "Halaqah Al-Ikhlas", "wali_name": "Rahmat",
        "wali_phone": None, "valid": False, "error": "No HP Wali kosong",
    }


def test_structural_error_is_400(client):
    r = client.post("/api/v1/admin/imports/students", files=_upload("Nama Lengkap,Halaqah\n"))
    assert r.status_code == 400
    assert r.json()["detail"] == "File CSV harus memiliki header dan minimal 1 baris data"


def test_import_then_reimport(client, db):
    r = client.post("/api/v1/admin/imports/students", files=_upload(CSV))
    assert r.status_code == 200
    body = r.json()
    assert body["dry_run"] is False
    assert body["summary"] == {"success": 2, "failed": 0, "duplicates": 0, "invalid": 1}
    assert body["created_halaqah"] == ["Halaqah Al-Fatihah", "Halaqah Al-Ikhlas"]
    assert body["errors"] == [{"row": 4, "message": "No HP Wali kosong"}]
    assert body["message"] == "2 data berhasil diimpor."

    again = client.post("/api/v1/admin/imports/students", files=_upload(CSV)).json()
    assert again["summary"]["duplicates"] == 2
    assert again["summary"]["success"] == 0
    assert again["created_halaqah"] == []
    assert len(SqlStudentRepository(db).list()) == 2


def test_dry_run_does_not_write(client, db):
    r = client.post("/api/v1/admin/imports/students?dry_run=true", files=_upload(CSV))
    assert r.status_code == 200
    assert r.json()["summary"]["success"] == 2
    assert r.json()["message"] == "2 data siap diimpor (dry run)."
    assert SqlStudentRepository(db).list() == []


def test_semicolon_file_with_bom(client):
    text = "\ufeffNama;Kelas;WhatsApp\n\"Zaid, bin Tsabit\";Halaqah An-Nas;0811\n"
    r = client.post("/api/v1/admin/imports/students", files=_upload(text))
    assert r.status_code == 200
    assert r.json()["summary"]["success"] == 1


def test_nothing_valid_is_400(client):
    r = client.post("/api/v1/admin/imports/students", files=_upload("Nama,Halaqah,HP\nAhmad,A,\n"))
    assert r.status_code == 400
    assert r.json()["detail"] == "Tidak ada data valid untuk diimpor"


class BrokenHalaqah:
    def list_names(self):
        return set()

    def create_many(self, names):
        raise RepositoryError("permission denied for table halaqah")


def test_halaqah_failure_aborts_with_409(client, db):
    app.dependency_overrides[get_halaqah_repo] = lambda: BrokenHalaqah()
    r = client.post("/api/v1/admin/imports/students", files=_upload(CSV))
    assert r.status_code == 409
    assert r.json()["detail"].startswith("Gagal membuat halaqah baru otomatis")
    assert SqlStudentRepository(db).list() == []


@pytest.mark.parametrize("role_fixture", ["ustadz", "wali"])
def test_import_is_admin_only(client, as_user, request, role_fixture):
    as_user["user"] = request.getfixturevalue(role_fixture)
    assert client.get("/api/v1/admin/imports/students/template").status_code == 403
    assert client.post("/api/v1/admin/imports/students", files=_upload(CSV)).status_code == 403
