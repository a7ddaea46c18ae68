# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.v1.endpoints import (
    health, students, halaqah, curriculum, scores, attendance, announcements,
    admin_imports, admin_references, admin_reports,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

API_V1_PREFIX = "/api/v1"

app = FastAPI(
    title=settings.APP_NAME,
    description="API administrasi pesantren: santri, halaqah, hafalan, penilaian harian",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Router berversi
app.include_router(health.router,        prefix=API_V1_PREFIX)
app.include_router(students.router,      prefix=API_V1_PREFIX)
app.include_router(halaqah.router,       prefix=API_V1_PREFIX)
app.include_router(curriculum.router,    prefix=API_V1_PREFIX)
app.include_router(scores.router,        prefix=API_V1_PREFIX)
app.include_router(attendance.router,    prefix=API_V1_PREFIX)
app.include_router(announcements.router, prefix=API_V1_PREFIX)

# Admin: prefix /api/v1/admin
app.include_router(admin_imports.router, prefix=f"{API_V1_PREFIX}/admin")
app.include_router(admin_references.router, prefix=f"{API_V1_PREFIX}/admin")
app.include_router(admin_reports.router, prefix=f"{API_V1_PREFIX}/admin")


@app.get("/health")
def health_root():
    return {"status": "ok", "message": "API berjalan normal"}



@app.get("/")
def root():
    return {
        "message": f"Selamat datang di {settings.APP_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "api_v1": API_V1_PREFIX,
    }
