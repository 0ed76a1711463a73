"""
Browsing history business logic.
"""

from __future__ import annotations

from artifacts import repository as artifact_repository
from artifacts import service as artifact_service
from auth.sessions import Principal
from core.errors import NotFoundError

from . import repository


async def record_view(artifact_id: int, *, principal: Principal) -> dict[str, bool]:
    if not await artifact_repository.artifact_exists(artifact_id):
        raise NotFoundError("Artifact not found.")
    await repository.record_view(user_id=principal.user_id, artifact_id=artifact_id)
    return {"ok": True}


async def list_history(*, principal: Principal, limit: int = 100, offset: int = 0) -> list[dict]:
    rows = await repository.list_history(user_id=principal.user_id, limit=limit, offset=offset)
    items: list[dict] = []
    for row in rows:
        artifact_row = dict(row)
        history_id = artifact_row.pop("id")
        viewed_at = artifact_row.pop("viewed_at")
        artifact_row["id"] = artifact_row.pop("artifact_id")
        items.append(
            {
                "id": int(history_id),
                "viewed_at": viewed_at,
                "artifact": artifact_service.to_artifact_response(artifact_row),
            }
        )
    return items


async def clear_history(*, principal: Principal) -> dict[str, bool]:
    await repository.clear_history(user_id=principal.user_id)
    return {"ok": True}
