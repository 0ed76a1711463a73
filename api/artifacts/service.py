"""
Artifact business logic.

Ownership-scoped reads (favorite flags, favorites-only search) use the
resolved principal; anonymous callers get unscoped results and never borrow
another account's favorites.
"""

from __future__ import annotations

import logging
from pathlib import Path

from auth.sessions import Principal
from core.config import env_str
from core.errors import NotFoundError

from . import filters, repository, schemas

logger = logging.getLogger(__name__)


def images_dir() -> Path:
    return Path(env_str("IMAGES_DIR", "public/images"))


def default_image() -> str:
    return env_str("DEFAULT_IMAGE", "bronze_ding.jpg")


def resolve_image_path(image_path: str) -> str:
    """
    Keep `image_path` if the file exists under the images dir, else fall back
    to the default image.
    """
    name = (image_path or "").strip()
    if not name:
        return default_image()
    if (images_dir() / name).is_file():
        return name
    logger.debug("image_missing image_path=%s fallback=%s", name, default_image())
    return default_image()


def to_artifact_response(row: dict) -> schemas.ArtifactResponse:
    data = dict(row)
    data["image_path"] = resolve_image_path(str(data.get("image_path") or ""))
    data["is_favorite"] = bool(data.get("is_favorite", False))
    return schemas.ArtifactResponse(**data)


async def search_artifacts(
    search_filters: filters.SearchFilters,
    *,
    principal: Principal | None,
) -> list[schemas.ArtifactResponse]:
    query = filters.compose_search(search_filters, principal)
    rows = await repository.search(query)
    logger.debug(
        "artifact_search user_id=%s favorites_only=%s results=%s",
        principal.user_id if principal else None,
        search_filters.favorites_only,
        len(rows),
    )
    return [to_artifact_response(row) for row in rows]


async def get_artifact(artifact_id: int, *, principal: Principal | None) -> schemas.ArtifactResponse | None:
    row = await repository.fetch(filters.compose_lookup(artifact_id, principal))
    if row is None:
        return None
    return to_artifact_response(row)


async def toggle_favorite(artifact_id: int, *, principal: Principal) -> schemas.FavoriteResponse:
    if not await repository.artifact_exists(artifact_id):
        raise NotFoundError("Artifact not found.")
    is_favorite = await repository.toggle_favorite(user_id=principal.user_id, artifact_id=artifact_id)
    return schemas.FavoriteResponse(artifact_id=artifact_id, is_favorite=is_favorite)


async def create_artifact(payload: schemas.ArtifactInput, *, admin_id: int) -> schemas.ArtifactResponse:
    row = await repository.create_artifact(payload.model_dump())
    logger.info("artifact_created artifact_id=%s admin_id=%s", row["id"], admin_id)
    return to_artifact_response(row)


async def update_artifact(
    artifact_id: int,
    payload: schemas.ArtifactInput,
    *,
    admin_id: int,
) -> schemas.ArtifactResponse:
    row = await repository.update_artifact(artifact_id, payload.model_dump())
    if row is None:
        raise NotFoundError("Artifact not found.")
    logger.info("artifact_updated artifact_id=%s admin_id=%s", artifact_id, admin_id)
    return to_artifact_response(row)


async def delete_artifact(artifact_id: int, *, admin_id: int) -> dict[str, bool]:
    if not await repository.delete_artifact(artifact_id):
        raise NotFoundError("Artifact not found.")
    logger.info("artifact_deleted artifact_id=%s admin_id=%s", artifact_id, admin_id)
    return {"ok": True}
