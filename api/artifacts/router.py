"""
Artifact API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies
from auth.sessions import Principal
from core.errors import NotFoundError

from . import filters, schemas, service

router = APIRouter()


@router.get("/artifacts")
async def list_artifacts(
    query: str | None = Query(default=None, max_length=200),
    category: str | None = Query(default=None, max_length=100),
    dynasty: str | None = Query(default=None, max_length=100),
    favorites_only: bool = False,
    principal: Principal | None = Depends(auth_dependencies.get_optional_principal),
) -> dict:
    search_filters = filters.SearchFilters(
        query=query,
        category=category,
        dynasty=dynasty,
        favorites_only=favorites_only,
    )
    artifacts = await service.search_artifacts(search_filters, principal=principal)
    return {"artifacts": artifacts, "count": len(artifacts)}


@router.get("/artifacts/{artifact_id}", response_model=schemas.ArtifactResponse)
async def get_artifact(
    artifact_id: int,
    principal: Principal | None = Depends(auth_dependencies.get_optional_principal),
) -> schemas.ArtifactResponse:
    artifact = await service.get_artifact(artifact_id, principal=principal)
    if artifact is None:
        raise NotFoundError("Artifact not found.")
    return artifact


@router.post("/artifacts/{artifact_id}/favorite", response_model=schemas.FavoriteResponse)
async def toggle_favorite(
    artifact_id: int,
    principal: Principal = Depends(auth_dependencies.get_principal),
) -> schemas.FavoriteResponse:
    return await service.toggle_favorite(artifact_id, principal=principal)


@router.post("/artifacts", response_model=schemas.ArtifactResponse)
async def create_artifact(
    payload: schemas.ArtifactInput,
    admin_id: int = Depends(auth_dependencies.require_admin),
) -> schemas.ArtifactResponse:
    return await service.create_artifact(payload, admin_id=admin_id)


@router.put("/artifacts/{artifact_id}", response_model=schemas.ArtifactResponse)
async def update_artifact(
    artifact_id: int,
    payload: schemas.ArtifactInput,
    admin_id: int = Depends(auth_dependencies.require_admin),
) -> schemas.ArtifactResponse:
    return await service.update_artifact(artifact_id, payload, admin_id=admin_id)


@router.delete("/artifacts/{artifact_id}")
async def delete_artifact(
    artifact_id: int,
    admin_id: int = Depends(auth_dependencies.require_admin),
) -> dict:
    return await service.delete_artifact(artifact_id, admin_id=admin_id)
