# api/alembic/env.py
from __future__ import annotations

import logging
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

# libpq membaca variabel PG* ini diam-diam; buang agar hanya URL yang berlaku
for var in ("PGSERVICE", "PGSERVICEFILE", "PGSYSCONFDIR", "PGAPPNAME", "PGOPTIONS", "PGPASSFILE"):
    os.environ.pop(var, None)
os.environ.setdefault("PGCLIENTENCODING", "UTF8")

config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

from app.core.config import mask_url, settings  # noqa: E402
from app.db.base import Base  # noqa: E402

target_metadata = Base.metadata


def _url() -> str:
    """URL dari api/.env (lewat Settings); fallback sqlalchemy.url di alembic.ini."""
    try:
        return settings.db_url
    except ValueError:
        url = config.get_main_option("sqlalchemy.url")
        if not url:
            raise RuntimeError(
                "URL database tidak ditemukan. Definisikan DATABASE_URL di api/.env "
                "atau sqlalchemy.url di api/alembic.ini"
            )
        return url


db_url = _url()
logger.info("Migrasi ke %s", mask_url(db_url))


def run_migrations_offline() -> None:
    """Tulis SQL migrasi tanpa koneksi DB."""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(db_url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
