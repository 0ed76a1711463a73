"""
Auth business logic.

Every flow takes the process-wide `SessionTable` explicitly; user rows always
come fresh from the store so profile edits are visible immediately.
"""

from __future__ import annotations

import logging

from core.errors import AuthError, ConflictError, InvalidRequestError, NotFoundError

from . import passwords, repository, schemas
from .sessions import SessionTable

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        username=str(user_row["username"]),
        email=str(user_row["email"]),
        created_at=user_row["created_at"],
    )


def _issue_session(sessions: SessionTable, user_row: dict) -> str:
    token = sessions.create(user_id=int(user_row["id"]), username=str(user_row["username"]))
    sessions.sweep()
    return token


async def login(payload: schemas.LoginRequest, *, sessions: SessionTable) -> schemas.AuthResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        logger.info("login_failed reason=unknown_email")
        raise AuthError(INVALID_CREDENTIALS)

    if not passwords.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        logger.info("login_failed reason=wrong_password user_id=%s", user_row["id"])
        raise AuthError(INVALID_CREDENTIALS)

    token = _issue_session(sessions, user_row)
    logger.info("login_ok user_id=%s", user_row["id"])
    return schemas.AuthResponse(user=_to_user_response(user_row), token=token)


async def register(payload: schemas.RegisterRequest, *, sessions: SessionTable) -> schemas.AuthResponse:
    username = repository.normalize_username(payload.username)
    email = repository.normalize_email(payload.email)
    if not username:
        raise InvalidRequestError("Username must not be blank.")
    if not email:
        raise InvalidRequestError("Email must not be blank.")

    existing = await repository.find_user_by_username_or_email(username=username, email=email)
    if existing is not None:
        raise ConflictError("Username or email is already registered.")

    passwords.validate_password_strength(payload.password)
    password_hash = passwords.hash_password(payload.password)

    # A concurrent registration can pass the pre-check too; the unique
    # constraints decide, and the db layer reports that as ConflictError.
    try:
        user_row = await repository.create_user(
            username=username,
            email=email,
            password_hash=password_hash,
        )
    except ConflictError as exc:
        raise ConflictError("Username or email is already registered.") from exc

    token = _issue_session(sessions, user_row)
    logger.info("register_ok user_id=%s", user_row["id"])
    return schemas.AuthResponse(user=_to_user_response(user_row), token=token)


async def logout(token: str | None, *, sessions: SessionTable) -> dict[str, bool]:
    sessions.remove(token)
    return {"ok": True}


async def get_current_user(token: str | None, *, sessions: SessionTable) -> schemas.UserResponse | None:
    session = sessions.validate(token)
    if session is None:
        return None

    user_row = await repository.get_user_by_id(session.user_id)
    if user_row is None:
        return None
    return _to_user_response(user_row)


async def update_profile(
    token: str | None,
    payload: schemas.UpdateProfileRequest,
    *,
    sessions: SessionTable,
) -> schemas.UserResponse:
    session = sessions.validate(token)
    if session is None:
        raise AuthError("Session is invalid or expired.")

    if payload.username is None and payload.email is None:
        raise InvalidRequestError("No profile fields provided.")

    username = repository.normalize_username(payload.username) if payload.username is not None else None
    email = repository.normalize_email(payload.email) if payload.email is not None else None
    if username == "":
        raise InvalidRequestError("Username must not be blank.")
    if email == "":
        raise InvalidRequestError("Email must not be blank.")

    # All checks run before the single UPDATE, so a conflict never leaves a partial write.
    if username is not None:
        if await repository.username_taken_by_other(username, user_id=session.user_id):
            raise ConflictError("Username is already taken.")

    if email is not None:
        if await repository.email_taken_by_other(email, user_id=session.user_id):
            raise ConflictError("Email is already taken.")

    try:
        user_row = await repository.update_user(
            session.user_id,
            username=username,
            email=email,
        )
    except ConflictError as exc:
        raise ConflictError("Username or email is already taken.") from exc

    if user_row is None:
        raise NotFoundError("User not found.")
    return _to_user_response(user_row)


def validate_password_strength(password: str) -> dict[str, bool]:
    passwords.validate_password_strength(password)
    return {"ok": True}
