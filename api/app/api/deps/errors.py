# api/app/api/deps/errors.py
from fastapi import HTTPException, status

from app.core.exceptions import (
    ConflictError, DomainError, ImportAbortedError, NotFoundError, PermissionDenied, RepositoryError,
    ValidationError,
)

_STATUS = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ImportAbortedError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (RepositoryError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def to_http(e: DomainError) -> HTTPException:
    """Terjemahkan error domain ke HTTPException."""
    for cls, code in _STATUS:
        if isinstance(e, cls):
            detail = str(e)
            if cls is RepositoryError:
                detail = f"Gagal menulis ke database: {e}"
            return HTTPException(status_code=code, detail=detail)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
