from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from zingmedia.auth.rbac import Identity, Role, permissions_for, sorted_permission_values
from zingmedia.config import settings
from zingmedia.db.models import User
from zingmedia.errors import InvalidToken

logger = logging.getLogger("auth.tokens")

REQUIRED_CLAIMS = ("sub", "email", "role", "tenant_id", "exp")


def issue_token(user: User, *, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(hours=settings.TOKEN_TTL_HOURS)
    claims: dict[str, Any] = {
        "sub": user.id,
        "email": user.email,
        "role": user.role.value,
        "tenant_id": user.tenant_id,
        "permissions": sorted_permission_values(permissions_for(user.role)),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Identity:
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError as exc:
        logger.info("Expired token presented")
        raise InvalidToken() from exc
    except JWTError as exc:
        logger.warning("Token verification failed", exc_info=exc)
        raise InvalidToken() from exc

    missing = [claim for claim in REQUIRED_CLAIMS if not claims.get(claim)]
    if missing:
        logger.warning("Token missing claims", extra={"missing_claims": missing})
        raise InvalidToken()
    try:
        role = Role(claims["role"])
    except ValueError as exc:
        logger.warning("Token carries unknown role", extra={"role": claims.get("role")})
        raise InvalidToken() from exc

    # Permissions come from the role, never from the token's own list.
    return Identity(
        user_id=str(claims["sub"]),
        email=str(claims["email"]),
        role=role,
        tenant_id=str(claims["tenant_id"]),
        permissions=permissions_for(role),
    )
