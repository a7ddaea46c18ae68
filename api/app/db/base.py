# api/app/db/base.py
from app.db.base_class import Base  # noqa: F401

# Impor semua model agar tabelnya terdaftar di Base.metadata (alembic autogenerate)
from app.models import halaqah  # noqa: F401
from app.models import student  # noqa: F401
from app.models import scoring  # noqa: F401
from app.models import assessment  # noqa: F401
from app.models import announcement  # noqa: F401
