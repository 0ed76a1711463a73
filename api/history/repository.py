"""
Browsing history persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db


async def record_view(*, user_id: int, artifact_id: int) -> None:
    """
    Insert a history entry, or refresh `viewed_at` if the pair already exists.
    """
    await db.execute(
        """
        INSERT INTO browsing_history (user_id, artifact_id, viewed_at)
        VALUES ($1, $2, now())
        ON CONFLICT (user_id, artifact_id)
        DO UPDATE SET viewed_at = now()
        """,
        user_id,
        artifact_id,
    )


async def list_history(*, user_id: int, limit: int = 100, offset: int = 0) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT
          bh.id,
          bh.viewed_at,
          a.id AS artifact_id,
          a.title,
          a.image_path,
          a.period,
          a.dynasty,
          a.location,
          a.description,
          a.detailed_description,
          a.material,
          a.dimensions,
          a.discovery_location,
          a.collection,
          a.category,
          a.created_at,
          a.updated_at,
          (uf.id IS NOT NULL) AS is_favorite
        FROM browsing_history bh
        JOIN artifacts a ON a.id = bh.artifact_id
        LEFT JOIN user_favorites uf ON uf.artifact_id = a.id AND uf.user_id = $1
        WHERE bh.user_id = $1
        ORDER BY bh.viewed_at DESC, bh.id DESC
        LIMIT $2
        OFFSET $3
        """,
        user_id,
        limit,
        offset,
    )


async def clear_history(*, user_id: int) -> None:
    await db.execute(
        """
        DELETE FROM browsing_history
        WHERE user_id = $1
        """,
        user_id,
    )
