"""
Folder Schemas.

Pydantic schemas for folder API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

FOLDER_NAME_MAX_LENGTH = 100
FOLDER_EMOJI_MAX_LENGTH = 2


class FolderCreate(BaseModel):
    """Schema for creating a folder."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=FOLDER_NAME_MAX_LENGTH,
        description="Folder name",
        examples=["Work"],
    )
    emoji: str | None = Field(
        default=None,
        max_length=FOLDER_EMOJI_MAX_LENGTH,
        description="Decorative label",
        examples=["📁"],
    )
    parent_id: str | None = Field(
        default=None,
        description="Parent folder id",
    )


class FolderUpdate(BaseModel):
    """Schema for updating a folder. Only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=FOLDER_NAME_MAX_LENGTH)
    emoji: str | None = Field(default=None, max_length=FOLDER_EMOJI_MAX_LENGTH)
    parent_id: str | None = None


class FolderResponse(BaseModel):
    """Schema for folder in API responses."""

    id: str
    name: str
    emoji: str | None
    parent_id: str | None
    user_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
