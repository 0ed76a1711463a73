from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from auth import repository as auth_repository
from auth.sessions import SessionTable
from core.errors import ConflictError


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeUserStore:
    """
    In-memory stand-in for `auth.repository`, including its unique constraints.
    """

    def __init__(self) -> None:
        self.users: dict[int, dict] = {}
        self._next_id = 1
        self.update_calls = 0

    def _clash(self, *, username: str | None, email: str | None, exclude_id: int | None = None) -> bool:
        for user in self.users.values():
            if user["id"] == exclude_id:
                continue
            if username is not None and user["username"] == username:
                return True
            if email is not None and user["email"] == email:
                return True
        return False

    async def create_user(self, *, username: str, email: str, password_hash: str) -> dict:
        username = auth_repository.normalize_username(username)
        email = auth_repository.normalize_email(email)
        if self._clash(username=username, email=email):
            raise ConflictError("Duplicate value violates a uniqueness constraint.")
        row = {
            "id": self._next_id,
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        self.users[row["id"]] = row
        self._next_id += 1
        return dict(row)

    async def get_user_by_email(self, email: str) -> dict | None:
        email = auth_repository.normalize_email(email)
        for user in self.users.values():
            if user["email"] == email:
                return dict(user)
        return None

    async def get_user_by_id(self, user_id: int) -> dict | None:
        user = self.users.get(user_id)
        return dict(user) if user else None

    async def find_user_by_username_or_email(self, *, username: str, email: str) -> dict | None:
        username = auth_repository.normalize_username(username)
        email = auth_repository.normalize_email(email)
        for user in self.users.values():
            if user["username"] == username or user["email"] == email:
                return {"id": user["id"]}
        return None

    async def username_taken_by_other(self, username: str, *, user_id: int) -> bool:
        return self._clash(username=auth_repository.normalize_username(username), email=None, exclude_id=user_id)

    async def email_taken_by_other(self, email: str, *, user_id: int) -> bool:
        return self._clash(username=None, email=auth_repository.normalize_email(email), exclude_id=user_id)

    async def update_user(self, user_id: int, *, username: str | None = None, email: str | None = None) -> dict | None:
        self.update_calls += 1
        user = self.users.get(user_id)
        if user is None:
            return None
        if username is not None:
            user["username"] = auth_repository.normalize_username(username)
        if email is not None:
            user["email"] = auth_repository.normalize_email(email)
        return dict(user)


_PATCHED_REPOSITORY_FUNCTIONS = (
    "create_user",
    "get_user_by_email",
    "get_user_by_id",
    "find_user_by_username_or_email",
    "username_taken_by_other",
    "email_taken_by_other",
    "update_user",
)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def sessions(clock: FakeClock) -> SessionTable:
    return SessionTable(ttl=timedelta(days=7), clock=clock)


@pytest.fixture()
def user_store(monkeypatch: pytest.MonkeyPatch) -> FakeUserStore:
    store = FakeUserStore()
    for name in _PATCHED_REPOSITORY_FUNCTIONS:
        monkeypatch.setattr(auth_repository, name, getattr(store, name))
    return store
