"""
Artifact API schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ArtifactInput(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    image_path: str = Field(default="", max_length=500)
    period: str = ""
    dynasty: str = ""
    location: str = ""
    description: str = ""
    detailed_description: str = ""
    material: str = ""
    dimensions: str = ""
    discovery_location: str = ""
    collection: str = ""
    category: str = ""


class ArtifactResponse(BaseModel):
    id: int
    title: str
    image_path: str
    period: str
    dynasty: str
    location: str
    description: str
    detailed_description: str
    material: str
    dimensions: str
    discovery_location: str
    collection: str
    category: str
    created_at: datetime
    updated_at: datetime
    is_favorite: bool = False


class FavoriteResponse(BaseModel):
    artifact_id: int
    is_favorite: bool
