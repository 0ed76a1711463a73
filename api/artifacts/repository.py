"""
Artifact persistence (raw SQL).

Search and lookup SQL is composed in `filters`; this module only runs it.
"""

from __future__ import annotations

from typing import Any

from core import db

from .filters import ComposedQuery

EDITABLE_FIELDS = (
    "title",
    "image_path",
    "period",
    "dynasty",
    "location",
    "description",
    "detailed_description",
    "material",
    "dimensions",
    "discovery_location",
    "collection",
    "category",
)

_RETURNING = "id, " + ", ".join(EDITABLE_FIELDS) + ", created_at, updated_at, false AS is_favorite"


async def search(query: ComposedQuery) -> list[dict[str, Any]]:
    return await db.fetch_all(query.sql, *query.args)


async def fetch(query: ComposedQuery) -> dict[str, Any] | None:
    return await db.fetch_one(query.sql, *query.args)


async def artifact_exists(artifact_id: int) -> bool:
    row = await db.fetch_one("SELECT 1 AS ok FROM artifacts WHERE id = $1", artifact_id)
    return row is not None


async def create_artifact(fields: dict[str, Any]) -> dict[str, Any]:
    columns = ", ".join(EDITABLE_FIELDS)
    placeholders = ", ".join(f"${i}" for i in range(1, len(EDITABLE_FIELDS) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO artifacts ({columns})
        VALUES ({placeholders})
        RETURNING {_RETURNING}
        """,
        *(fields[name] for name in EDITABLE_FIELDS),
    )
    if row is None:
        raise RuntimeError("Failed to create artifact.")
    return row


async def update_artifact(artifact_id: int, fields: dict[str, Any]) -> dict[str, Any] | None:
    assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(EDITABLE_FIELDS, start=1))
    id_param = len(EDITABLE_FIELDS) + 1
    return await db.fetch_one(
        f"""
        UPDATE artifacts
        SET {assignments},
            updated_at = now()
        WHERE id = ${id_param}
        RETURNING {_RETURNING}
        """,
        *(fields[name] for name in EDITABLE_FIELDS),
        artifact_id,
    )


async def delete_artifact(artifact_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM artifacts
        WHERE id = $1
        RETURNING id
        """,
        artifact_id,
    )
    return row is not None


async def toggle_favorite(*, user_id: int, artifact_id: int) -> bool:
    """
    Flip favorite membership. Returns True when the artifact is now a favorite.
    """
    removed = await db.fetch_one(
        """
        DELETE FROM user_favorites
        WHERE user_id = $1
          AND artifact_id = $2
        RETURNING id
        """,
        user_id,
        artifact_id,
    )
    if removed is not None:
        return False

    await db.execute(
        """
        INSERT INTO user_favorites (user_id, artifact_id)
        VALUES ($1, $2)
        ON CONFLICT (user_id, artifact_id) DO NOTHING
        """,
        user_id,
        artifact_id,
    )
    return True
