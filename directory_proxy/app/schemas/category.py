"""
Pydantic models for the category group endpoints and health check.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class CategoryMember(BaseModel):
    name: str = Field(..., example="Bakery")
    handle: str = Field(..., example="bakery")


CategoryGroups = Dict[str, List[CategoryMember]]


class GroupRefreshResult(BaseModel):
    ok: bool = True
    groups: int


class HealthStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    groups: int
    media_cache_entries: int = Field(0, alias="mediaCacheEntries")
