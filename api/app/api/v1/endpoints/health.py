# api/app/api/v1/endpoints/health.py
from fastapi import APIRouter, HTTPException

from app.core.config import settings
from app.db.session import check_db_connection

router = APIRouter(tags=["health"])

@router.get("/healthz")
def healthz():
    return {"status": "ok", "env": settings.ENV}

@router.get("/health/db")
def health_db():
    if not check_db_connection():
        raise HTTPException(status_code=503, detail="Database tidak dapat dihubungi")
    return {"db": "ok"}
