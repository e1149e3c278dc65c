"""Bearer Token Verification - authenticates callers before any allocation operation runs.

Invariants:
    - Every protected request carries `Authorization: Bearer <jwt>`
    - Tokens are HS256 (configurable) signed with settings.jwt_secret and must carry `exp`
    - Failures raise AuthenticationError (401); the core never sees unauthenticated calls

Design Decisions:
    - Verification only: user storage and login live outside this service,
      issue_token() exists for operators and test fixtures
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from seat_allocator.config import Settings, get_settings
from seat_allocator.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Caller:
    """Authenticated identity supplied to route handlers."""
    subject: str
    username: str | None = None


def issue_token(
    subject: str, username: str | None = None, settings: Settings | None = None,
) -> str:
    """Mint a signed token with an expiry."""
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expiry_minutes),
    }
    if username:
        payload["username"] = username
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> Caller:
    """Verify signature and expiry, returning the caller identity."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise AuthenticationError("Invalid token")
    return Caller(subject=str(payload["sub"]), username=payload.get("username"))


async def require_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings),
) -> Caller:
    """FastAPI dependency guarding every /api/v1 resource router."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access denied. No token provided.")
    return decode_token(credentials.credentials, settings)
