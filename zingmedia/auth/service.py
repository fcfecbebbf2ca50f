from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from zingmedia.auth.passwords import verify_password
from zingmedia.auth.tokens import issue_token
from zingmedia.db.models import User
from zingmedia.db.repositories.identity import UsersRepository
from zingmedia.errors import InvalidCredentials

logger = logging.getLogger("auth.service")


@dataclass
class LoginResult:
    token: str
    user: User


def login(session: Session, email: str, password: str) -> LoginResult:
    user = UsersRepository(session).get_by_email(email)
    password_ok = verify_password(password, user.password_hash if user else None)
    if not user or not password_ok:
        # Unknown email and wrong password are reported identically.
        logger.info("Login rejected", extra={"email_domain": email.rpartition("@")[2]})
        raise InvalidCredentials()

    token = issue_token(user)
    logger.info(
        "Login succeeded",
        extra={"user_id": user.id, "tenant_id": user.tenant_id, "role": user.role.value},
    )
    return LoginResult(token=token, user=user)
