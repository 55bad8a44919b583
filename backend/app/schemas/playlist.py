"""
Pydantic models for playlist requests and responses.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from app.schemas.base import CamelModel

PlaylistSort = Literal[
    "created_at.asc",
    "created_at.desc",
    "updated_at.asc",
    "updated_at.desc",
    "name.asc",
    "name.desc",
]


class PlaylistCreate(CamelModel):
    """Schema for creating a playlist."""

    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class PlaylistUpdate(CamelModel):
    """Schema for a partial playlist update; at least one field is required."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def require_a_field(self):
        if not self.model_fields_set & {"name", "description"}:
            raise ValueError("At least one field must be provided")
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null")
        return self


class PlaylistResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PlaylistDetail(PlaylistResponse):
    track_count: int


class PlaylistSummary(CamelModel):
    id: str
    name: str
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
    track_count: int


class PlaylistList(CamelModel):
    items: List[PlaylistSummary]
    page: int
    page_size: int
    total: int
