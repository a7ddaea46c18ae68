# api/app/core/config.py
from __future__ import annotations

import re
from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


API_DIR = Path(__file__).resolve().parents[2]  # .../api
ENV_FILE = API_DIR / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # App
    APP_NAME: str = "Pesantren Admin API"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # JWT (token diterbitkan oleh auth provider eksternal, di sini hanya diverifikasi)
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str | None = None

    # CORS: CORS_ORIGINS=https://admin.pesantren.id,https://wali.pesantren.id
    CORS_ORIGINS: str = ""

    # Import CSV santri
    IMPORT_BATCH_SIZE: int = 50

    # DB URLs (terima salah satu)
    DATABASE_URL: str | None = None
    SQLALCHEMY_DATABASE_URI: str | None = None

    @property
    def cors_list(self) -> list[str]:
        if not self.CORS_ORIGINS:
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def db_url(self) -> str:
        """
        URL gabungan untuk SQLAlchemy. Menerima DATABASE_URL atau SQLALCHEMY_DATABASE_URI.
        Memaksa sslmode=require untuk host Supabase bila belum ada.
        """
        url = (self.DATABASE_URL or self.SQLALCHEMY_DATABASE_URI or "").strip()
        if not url:
            raise ValueError("Definisikan DATABASE_URL atau SQLALCHEMY_DATABASE_URI di api/.env")
        if ("supabase.co" in url or "supabase.com" in url) and "sslmode=" not in url:
            sep = "&" if "?" in url else "?"
            url = f"{url}{sep}sslmode=require"
        return url


def mask_url(url: str) -> str:
    """Samarkan password di URL agar aman untuk log"""
    return re.sub(r"://([^:/@]+):([^@]+)@", r"://\1:***@", url)


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
