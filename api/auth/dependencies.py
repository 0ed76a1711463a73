"""
Auth dependencies for FastAPI routes.

The session table and admin policy live on `app.state` (set in the lifespan).
"""

from __future__ import annotations

from fastapi import Depends, Header, Request

from core.errors import AuthError

from . import guard
from .sessions import Principal, SessionTable


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise AuthError("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise AuthError("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise AuthError("Authorization must be: Bearer <token>.")
    return token


def get_session_table(request: Request) -> SessionTable:
    return request.app.state.sessions


def get_admin_policy(request: Request) -> guard.AdminPolicy:
    return request.app.state.admin_policy


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_optional_token(authorization: str | None = Header(default=None)) -> str | None:
    if not (authorization or "").strip():
        return None
    return _extract_bearer_token(authorization)


async def get_token_if_wellformed(authorization: str | None = Header(default=None)) -> str | None:
    """
    Like `get_optional_token`, but a malformed header also counts as no token.
    """
    try:
        return await get_optional_token(authorization)
    except AuthError:
        return None


async def get_principal(
    token: str = Depends(get_bearer_token),
    sessions: SessionTable = Depends(get_session_table),
) -> Principal:
    session = sessions.validate(token)
    if session is None:
        raise AuthError("Session is invalid or expired.")
    return Principal.from_session(session)


async def get_optional_principal(
    token: str | None = Depends(get_optional_token),
    sessions: SessionTable = Depends(get_session_table),
) -> Principal | None:
    """
    Resolve the caller if a valid token was sent; anonymous otherwise.
    """
    session = sessions.validate(token)
    if session is None:
        return None
    return Principal.from_session(session)


async def require_admin(
    token: str = Depends(get_bearer_token),
    sessions: SessionTable = Depends(get_session_table),
    policy: guard.AdminPolicy = Depends(get_admin_policy),
) -> int:
    return await guard.ensure_admin(token, sessions=sessions, policy=policy)
