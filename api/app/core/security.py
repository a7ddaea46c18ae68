# api/app/core/security.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.core.config import settings
from app.core.enums import Role

# Hanya untuk docs/Swagger; login ditangani auth provider eksternal
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/v1/token")

ADMIN_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN})
STAFF_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN, Role.USTADZ})


@dataclass(frozen=True)
class CurrentUser:
    """Konteks otorisasi per-request, dioper eksplisit ke service."""

    user_id: str
    role: Role
    halaqah: frozenset[str] = field(default_factory=frozenset)
    phone: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN


def decode_token(token: str) -> dict[str, Any]:
    """
    Decodifikasi JWT yang diterbitkan auth provider; wajib 'exp'.
    """
    options: dict[str, Any] = {"require": ["exp"], "verify_exp": True}
    kwargs: dict[str, Any] = {}
    if settings.JWT_AUDIENCE:
        kwargs["audience"] = settings.JWT_AUDIENCE
    else:
        options["verify_aud"] = False
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options=options,
            leeway=5,  # toleransi selisih jam
            **kwargs,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token kedaluwarsa")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token tidak valid")


def _claim(claims: dict[str, Any], key: str) -> Any:
    meta = claims.get("app_metadata") or {}
    if isinstance(meta, dict) and meta.get(key) is not None:
        return meta[key]
    return claims.get(key)


def _names(raw: Any) -> frozenset[str]:
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        raw = [raw]
    if isinstance(raw, Iterable):
        return frozenset(str(x).strip() for x in raw if str(x).strip())
    return frozenset()


def user_from_claims(claims: dict[str, Any]) -> CurrentUser:
    sub = claims.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Token tanpa subjek")

    raw_role = str(_claim(claims, "role") or "").strip().lower()
    try:
        role = Role(raw_role)
    except ValueError:
        raise HTTPException(status_code=403, detail=f"Role tidak dikenal: {raw_role or '-'}")

    return CurrentUser(
        user_id=str(sub),
        role=role,
        halaqah=_names(_claim(claims, "halaqah")),
        phone=_claim(claims, "phone") or None,
    )


def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    return user_from_claims(decode_token(token))


def get_staff_user(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if user.role not in STAFF_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Hanya ustadz atau admin")
    return user


def get_admin_user(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Hanya admin")
    return user
