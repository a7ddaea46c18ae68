# api/app/core/exceptions.py
class DomainError(Exception):
    """Base untuk pelanggaran aturan bisnis."""


class ValidationError(DomainError):
    """Input tidak valid."""


class NotFoundError(DomainError):
    pass


class PermissionDenied(DomainError):
    pass


class RepositoryError(DomainError):
    """Penyimpanan menolak operasi (insert/update/delete gagal)."""


class ImportAbortedError(DomainError):
    """Import dihentikan total, tidak ada santri yang disisipkan."""


class ConflictError(DomainError):
    """Operasi bentrok dengan data yang masih dipakai."""
