from datetime import timedelta

import pytest

from auth.sessions import Principal, SessionTable
from core.errors import InternalError


def test_create_then_validate(sessions):
    token = sessions.create(user_id=7, username="alice")

    session = sessions.validate(token)
    assert session is not None
    assert session.user_id == 7
    assert session.username == "alice"
    assert Principal.from_session(session) == Principal(user_id=7, username="alice")


def test_unknown_and_empty_tokens_are_invalid(sessions):
    assert sessions.validate("no-such-token") is None
    assert sessions.validate("") is None
    assert sessions.validate(None) is None


def test_tokens_are_unique(sessions):
    tokens = {sessions.create(user_id=1, username="alice") for _ in range(100)}
    assert len(tokens) == 100
    assert len(sessions) == 100


def test_expired_session_is_invalid_before_sweep(sessions, clock):
    token = sessions.create(user_id=1, username="alice")
    clock.advance(days=7)

    assert sessions.validate(token) is None
    # Still physically present until swept.
    assert len(sessions) == 1


def test_session_valid_just_before_expiry(sessions, clock):
    token = sessions.create(user_id=1, username="alice")
    clock.advance(days=7, seconds=-1)
    assert sessions.validate(token) is not None


def test_remove_is_idempotent(sessions):
    token = sessions.create(user_id=1, username="alice")
    sessions.remove(token)
    sessions.remove(token)
    sessions.remove(None)
    assert sessions.validate(token) is None


def test_sweep_removes_only_expired(sessions, clock):
    old = sessions.create(user_id=1, username="alice")
    clock.advance(days=3)
    fresh = sessions.create(user_id=2, username="bob")
    clock.advance(days=4)

    assert sessions.sweep() == 1
    assert sessions.validate(old) is None
    assert sessions.validate(fresh) is not None
    assert len(sessions) == 1


def test_sweep_with_explicit_cutoff(sessions, clock):
    sessions.create(user_id=1, username="alice")
    assert sessions.sweep(clock() + timedelta(days=7)) == 1


def test_token_collision_regenerates(clock):
    issued = iter(["dup", "dup", "other"])
    table = SessionTable(ttl=timedelta(days=7), clock=clock, token_factory=lambda: next(issued))

    assert table.create(user_id=1, username="alice") == "dup"
    assert table.create(user_id=2, username="bob") == "other"
    assert table.validate("dup").user_id == 1


def test_lock_failure_is_internal_error(sessions, monkeypatch):
    monkeypatch.setattr("auth.sessions.LOCK_TIMEOUT_S", 0.01)
    sessions._lock.acquire()
    try:
        with pytest.raises(InternalError):
            sessions.validate("anything")
    finally:
        sessions._lock.release()
