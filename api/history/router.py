"""
Browsing history API endpoints (authenticated callers only).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies
from auth.sessions import Principal

from . import service

router = APIRouter(prefix="/history")


@router.post("/{artifact_id}")
async def record_view(
    artifact_id: int,
    principal: Principal = Depends(auth_dependencies.get_principal),
) -> dict:
    return await service.record_view(artifact_id, principal=principal)


@router.get("")
async def list_history(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    principal: Principal = Depends(auth_dependencies.get_principal),
) -> dict:
    items = await service.list_history(principal=principal, limit=limit, offset=offset)
    return {"items": items, "limit": limit, "offset": offset, "count": len(items)}


@router.delete("")
async def clear_history(
    principal: Principal = Depends(auth_dependencies.get_principal),
) -> dict:
    return await service.clear_history(principal=principal)
