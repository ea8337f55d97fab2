"""
Note Repository.

In-memory collection of notes plus the list and search queries.
Every query returns notes most recently modified first.
"""

from typing import Any

from notekeep.backend.core.utils import MonotonicClock
from notekeep.backend.models.note import Note, count_words
from notekeep.backend.repositories.base import InMemoryRepository


def _by_recency(notes: list[Note]) -> list[Note]:
    return sorted(notes, key=lambda note: (note.updated_at, note.created_at), reverse=True)


class NoteRepository(InMemoryRepository[Note]):
    """
    Repository for Note records.

    Inherits standard CRUD operations from InMemoryRepository. Updates
    recompute the word count when content is supplied and always stamp
    ``updated_at``.
    """

    model = Note

    def __init__(self, clock: MonotonicClock | None = None) -> None:
        super().__init__()
        self.clock = clock or MonotonicClock()

    def _prepare_changes(self, instance: Note, changes: dict[str, Any]) -> dict[str, Any]:
        prepared = dict(changes)
        if "content" in prepared:
            prepared["word_count"] = count_words(prepared["content"])
        if "tags" in prepared:
            prepared["tags"] = tuple(prepared["tags"])
        prepared["updated_at"] = max(self.clock.now(), instance.created_at)
        return prepared

    def list_by_user(self, user_id: str) -> list[Note]:
        return _by_recency(self.find(lambda note: note.user_id == user_id))

    def list_by_folder(self, folder_id: str, user_id: str | None = None) -> list[Note]:
        """Notes filed directly under folder_id, optionally limited to one owner."""
        return _by_recency(self.find(
            lambda note: note.folder_id == folder_id
            and (user_id is None or note.user_id == user_id)
        ))

    def list_pinned(self, user_id: str) -> list[Note]:
        return _by_recency(self.find(lambda note: note.user_id == user_id and note.is_pinned))

    def search(self, user_id: str, query: str) -> list[Note]:
        """
        Case-insensitive substring search over title, content and tags.

        Args:
            user_id: Owner whose notes are searched
            query: Substring to look for

        Returns:
            Matching notes, most recently modified first
        """
        return _by_recency(self.find(lambda note: note.user_id == user_id and note.matches(query)))

    def delete_by_folder(self, folder_id: str) -> int:
        """Remove every note filed directly under folder_id."""
        return self.delete_where(lambda note: note.folder_id == folder_id)
