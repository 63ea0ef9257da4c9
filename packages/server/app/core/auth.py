"""
Identity for Org Todo.

The identity provider is external: it authenticates people and issues signed
bearer JWTs carrying the stable subject id (``sub``) and the verified login
email (``email``). This module only verifies those tokens and exposes the
resulting principal to routes. ``create_jwt`` mints tokens for local tooling
and tests.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import get_settings
from app.core.errors import AuthenticationRequiredError

log = structlog.get_logger()
settings = get_settings()

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """An authenticated subject as reported by the identity provider."""
    subject_id: str
    login_id: Optional[str] = None  # verified email


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(
    subject_id: str,
    login_id: Optional[str],
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed identity token."""
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": subject_id,
        "iat": now,
        "exp": exp,
        "jti": str(uuid.uuid4()),
    }
    if login_id:
        payload["email"] = login_id
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


def principal_from_token(token: str) -> Optional[Principal]:
    """Resolve a bearer token into a principal, or None if it does not verify."""
    try:
        payload = decode_jwt(token)
    except jwt.PyJWTError as exc:
        log.info("auth.token_rejected", reason=str(exc))
        return None

    subject = payload.get("sub")
    if not subject:
        log.info("auth.token_rejected", reason="missing subject")
        return None
    return Principal(subject_id=str(subject), login_id=payload.get("email"))


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Principal]:
    """The caller's principal, or None when unauthenticated.

    Never raises: actions decide what an anonymous caller means for them.
    """
    if credentials is None:
        return None
    return principal_from_token(credentials.credentials)


def require_principal(principal: Optional[Principal], *, need_login_id: bool = False) -> Principal:
    """Return the principal or raise ``AuthenticationRequiredError``."""
    if principal is None or not principal.subject_id:
        raise AuthenticationRequiredError()
    if need_login_id and not principal.login_id:
        raise AuthenticationRequiredError()
    return principal
