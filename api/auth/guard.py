"""
Authorization guard for privileged operations.

Two stages that must stay separate:
1) authenticate: the token must resolve to a live session and existing user
   (`AuthError` otherwise)
2) authorize: the user must match the privileged-identity predicate
   (`ForbiddenError` otherwise)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.config import env_list
from core.errors import AuthError, ForbiddenError

from . import repository
from .sessions import SessionTable

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAILS = ["admin@example.com"]


@dataclass(frozen=True)
class AdminPolicy:
    emails: frozenset[str]

    @classmethod
    def from_env(cls) -> "AdminPolicy":
        return cls(emails=frozenset(repository.normalize_email(e) for e in env_list("ADMIN_EMAILS", DEFAULT_ADMIN_EMAILS)))

    def is_admin(self, user_row: dict) -> bool:
        return repository.normalize_email(str(user_row.get("email") or "")) in self.emails


async def ensure_admin(token: str | None, *, sessions: SessionTable, policy: AdminPolicy) -> int:
    """
    Return the caller's user id if the token belongs to a privileged user.
    """
    session = sessions.validate(token)
    if session is None:
        raise AuthError("Session is invalid or expired.")

    user_row = await repository.get_user_by_id(session.user_id)
    if user_row is None:
        raise AuthError("Session user no longer exists.")

    if not policy.is_admin(user_row):
        logger.info("admin_denied user_id=%s", session.user_id)
        raise ForbiddenError("Administrator account required.")
    return session.user_id
