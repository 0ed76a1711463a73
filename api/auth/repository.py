"""
Auth persistence helpers (users table).
"""

from __future__ import annotations

from core import db

_USER_COLUMNS = "id, username, email, password_hash, created_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def normalize_username(username: str) -> str:
    return (username or "").strip()


async def create_user(*, username: str, email: str, password_hash: str) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (username, email, password_hash)
        VALUES ($1, $2, $3)
        RETURNING {_USER_COLUMNS}
        """,
        normalize_username(username),
        normalize_email(email),
        password_hash,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE email = $1
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def find_user_by_username_or_email(*, username: str, email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id
        FROM users
        WHERE username = $1
           OR email = $2
        LIMIT 1
        """,
        normalize_username(username),
        normalize_email(email),
    )


async def username_taken_by_other(username: str, *, user_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT id
        FROM users
        WHERE username = $1
          AND id <> $2
        LIMIT 1
        """,
        normalize_username(username),
        user_id,
    )
    return row is not None


async def email_taken_by_other(email: str, *, user_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT id
        FROM users
        WHERE email = $1
          AND id <> $2
        LIMIT 1
        """,
        normalize_email(email),
        user_id,
    )
    return row is not None


async def update_user(user_id: int, *, username: str | None = None, email: str | None = None) -> dict | None:
    """
    Update the provided fields in one statement. Returns the refreshed row,
    or None when the user no longer exists.
    """
    assignments: list[str] = []
    args: list[object] = []
    if username is not None:
        args.append(normalize_username(username))
        assignments.append(f"username = ${len(args)}")
    if email is not None:
        args.append(normalize_email(email))
        assignments.append(f"email = ${len(args)}")
    if not assignments:
        raise ValueError("update_user requires at least one field.")

    args.append(user_id)
    return await db.fetch_one(
        f"""
        UPDATE users
        SET {", ".join(assignments)}
        WHERE id = ${len(args)}
        RETURNING {_USER_COLUMNS}
        """,
        *args,
    )
