"""
Note Service.

Business logic layer for notes. Orchestrates storage, handles validation,
and scopes every operation to the calling user.
"""

from notekeep.backend.core.exceptions import NotFoundError, ValidationError
from notekeep.backend.models.note import Note, normalize_folder_id
from notekeep.backend.schemas.note import NoteCreate, NoteUpdate
from notekeep.backend.services.base import BaseService

# Fields that may be cleared with an explicit null.
_NULLABLE_FIELDS = frozenset({"folder_id", "encrypted_content"})


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, updates, retrieval and search. All listings are
    ordered most recently modified first. Storage checks that a note's
    folder belongs to its owner.
    """

    def create_note(self, user_id: str, data: NoteCreate) -> Note:
        """
        Create a new note.

        Args:
            user_id: Owner
            data: Note creation data; folder_id "none" means no folder

        Returns:
            Created note

        Raises:
            ValidationError: If the title is blank or the folder is not the caller's
        """
        self._validate_required({"title": data.title}, ["title"])
        folder_id = normalize_folder_id(data.folder_id)

        self._log_operation("Creating note", user_id=user_id)
        note = self.storage.create_note(
            user_id,
            title=data.title,
            content=data.content,
            tags=data.tags,
            is_pinned=data.is_pinned,
            folder_id=folder_id,
            encrypted_content=data.encrypted_content,
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    def get_note(self, user_id: str, note_id: str) -> Note:
        """
        Get one of the caller's notes.

        Raises:
            NotFoundError: If the note does not exist or belongs to someone else
        """
        note = self.storage.get_note(note_id)
        if note is None or note.user_id != user_id:
            raise NotFoundError("Note not found")
        return note

    def list_notes(
        self,
        user_id: str,
        folder_id: str | None = None,
        pinned: bool = False,
        search: str | None = None,
    ) -> list[Note]:
        """
        List notes with one optional filter.

        A search query wins over the pinned flag, which wins over a folder.

        Args:
            user_id: Owner
            folder_id: Only notes filed directly in this folder
            pinned: Only pinned notes
            search: Case-insensitive substring of title, content or a tag

        Returns:
            Notes, most recently modified first
        """
        if search:
            return self.search_notes(user_id, search)
        if pinned:
            return self.list_pinned_notes(user_id)
        if folder_id:
            return self.list_notes_by_folder(user_id, folder_id)
        return self.storage.list_notes(user_id)

    def list_notes_by_folder(self, user_id: str, folder_id: str) -> list[Note]:
        return self.storage.list_notes_by_folder(folder_id, user_id)

    def list_pinned_notes(self, user_id: str) -> list[Note]:
        return self.storage.list_pinned_notes(user_id)

    def search_notes(self, user_id: str, query: str) -> list[Note]:
        self._log_debug("Searching notes", user_id=user_id)
        return self.storage.search_notes(user_id, query)

    def update_note(self, user_id: str, note_id: str, data: NoteUpdate) -> Note:
        """
        Update an existing note.

        Only fields present in data change. ``updated_at`` is refreshed even
        when nothing else changes. A folder_id of "none" or null takes the
        note out of its folder.

        Raises:
            NotFoundError: If the note is not one of the caller's
            ValidationError: If a required field is nulled or the folder is
                not the caller's
        """
        self.get_note(user_id, note_id)
        changes = data.model_dump(exclude_unset=True)

        cleared = [
            name for name, value in changes.items()
            if value is None and name not in _NULLABLE_FIELDS
        ]
        if cleared:
            raise ValidationError(
                "Fields cannot be null",
                details={"null_fields": cleared},
            )
        if "title" in changes:
            self._validate_required({"title": changes["title"]}, ["title"])
        if "folder_id" in changes:
            changes["folder_id"] = normalize_folder_id(changes["folder_id"])

        self._log_operation("Updating note", note_id=note_id, fields=list(changes))
        note = self.storage.update_note(note_id, **changes)
        if note is None:
            raise NotFoundError("Note not found")
        return note

    def delete_note(self, user_id: str, note_id: str) -> None:
        """Delete one of the caller's notes. Unknown or foreign ids are ignored."""
        note = self.storage.get_note(note_id)
        if note is None or note.user_id != user_id:
            return

        self._log_operation("Deleting note", note_id=note_id)
        self.storage.delete_note(note_id)
