"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 200_000


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Note title",
        examples=["Alpha Plan"],
    )
    content: str = Field(
        default="",
        max_length=CONTENT_MAX_LENGTH,
        description="Markdown source",
    )
    tags: list[str] = Field(default_factory=list, description="Ordered tags")
    is_pinned: bool = False
    folder_id: str | None = Field(
        default=None,
        description='Folder id, or "none" for no folder',
    )
    encrypted_content: str | None = Field(
        default=None,
        description="Client-encrypted content, stored opaquely",
    )


class NoteUpdate(BaseModel):
    """Schema for updating an existing note. Only provided fields change."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, max_length=CONTENT_MAX_LENGTH)
    tags: list[str] | None = None
    is_pinned: bool | None = None
    folder_id: str | None = None
    encrypted_content: str | None = None


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str
    content: str
    encrypted_content: str | None
    tags: list[str]
    is_pinned: bool
    folder_id: str | None
    user_id: str
    word_count: int
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)
