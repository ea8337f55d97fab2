"""
Folder Model.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Folder:
    """A named container for notes, optionally nested under a parent folder."""

    id: str
    user_id: str
    name: str
    created_at: datetime
    emoji: str | None = None
    parent_id: str | None = None

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name!r})>"
