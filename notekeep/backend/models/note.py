"""
Note Model.

Markdown note with tags, pin state and an optional folder.
"""

from dataclasses import dataclass
from datetime import datetime

# Folder selector value clients send for "not in any folder".
NO_FOLDER = "none"


def count_words(content: str) -> int:
    """Number of whitespace-delimited, non-empty tokens in content."""
    return len(content.split())


def normalize_folder_id(folder_id: str | None) -> str | None:
    """Map the "no folder" selector (and empty values) to None."""
    if folder_id is None or folder_id == "" or folder_id == NO_FOLDER:
        return None
    return folder_id


@dataclass(frozen=True)
class Note:
    """
    Stored note.

    Records are immutable; every update replaces the stored instance, so
    readers never observe a half-applied change. ``word_count`` is derived
    from ``content`` at write time.
    """

    id: str
    user_id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    tags: tuple[str, ...] = ()
    is_pinned: bool = False
    folder_id: str | None = None
    encrypted_content: str | None = None
    word_count: int = 0

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title, content or any tag."""
        needle = query.lower()
        return (
            needle in self.title.lower()
            or needle in self.content.lower()
            or any(needle in tag.lower() for tag in self.tags)
        )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
