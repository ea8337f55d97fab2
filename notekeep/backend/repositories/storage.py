"""
Storage.

The storage capability the services depend on, and its in-memory
implementation. Services receive a Storage instance; nothing reaches for
a module-level store.

Usage:
    from notekeep.backend.repositories.storage import MemoryStorage

    storage = MemoryStorage()
    folder = storage.create_folder(user_id, name="Work")
    note = storage.create_note(user_id, title="Plan", content="...", folder_id=folder.id)
    storage.delete_folder(folder.id)   # removes the note as well
"""

from collections.abc import Sequence
from typing import Any, Protocol

from notekeep.backend.core.exceptions import ValidationError
from notekeep.backend.core.utils import MonotonicClock, new_id
from notekeep.backend.models.folder import Folder
from notekeep.backend.models.note import Note, count_words, normalize_folder_id
from notekeep.backend.models.user import User
from notekeep.backend.repositories.folder import FolderRepository
from notekeep.backend.repositories.note import NoteRepository
from notekeep.backend.repositories.user import UserRepository


class Storage(Protocol):
    """
    Users, folders and notes. Lookups by id are not owner-scoped here.

    Writes that carry a folder reference (a folder's parent_id, a note's
    folder_id) raise ValidationError when the referenced folder is missing
    or belongs to another user, and re-parenting raises it when the move
    would put a folder inside itself.
    """

    # Users
    def get_user(self, user_id: str) -> User | None: ...
    def get_user_by_username(self, username: str) -> User | None: ...
    def create_user(
        self,
        username: str,
        password_hash: str,
        recovery_key_hash: str,
        encryption_key: str,
    ) -> User: ...
    def update_user_password(self, user_id: str, password_hash: str) -> None: ...

    # Folders
    def list_folders(self, user_id: str) -> list[Folder]: ...
    def get_folder(self, folder_id: str) -> Folder | None: ...
    def create_folder(
        self,
        user_id: str,
        name: str,
        emoji: str | None = None,
        parent_id: str | None = None,
    ) -> Folder: ...
    def update_folder(self, folder_id: str, **changes: Any) -> Folder | None: ...
    def delete_folder(self, folder_id: str) -> None: ...

    # Notes
    def list_notes(self, user_id: str) -> list[Note]: ...
    def list_notes_by_folder(self, folder_id: str, user_id: str | None = None) -> list[Note]: ...
    def list_pinned_notes(self, user_id: str) -> list[Note]: ...
    def search_notes(self, user_id: str, query: str) -> list[Note]: ...
    def get_note(self, note_id: str) -> Note | None: ...
    def create_note(
        self,
        user_id: str,
        title: str,
        content: str,
        tags: Sequence[str] = (),
        is_pinned: bool = False,
        folder_id: str | None = None,
        encrypted_content: str | None = None,
    ) -> Note: ...
    def update_note(self, note_id: str, **changes: Any) -> Note | None: ...
    def delete_note(self, note_id: str) -> None: ...


class MemoryStorage:
    """
    In-process Storage implementation.

    Users, folders and notes each live in their own repository with its
    own lock, so work on different collections never contends. Any write
    that touches both collections takes the folder lock, then the note
    lock. Folder references are checked inside the same locks as the
    write they guard.
    """

    def __init__(self, clock: MonotonicClock | None = None) -> None:
        self.clock = clock or MonotonicClock()
        self.users = UserRepository()
        self.folders = FolderRepository()
        self.notes = NoteRepository(self.clock)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User | None:
        return self.users.get_by_id_or_none(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self.users.get_by_username(username)

    def create_user(
        self,
        username: str,
        password_hash: str,
        recovery_key_hash: str,
        encryption_key: str,
    ) -> User:
        """
        Raises:
            DuplicateUsernameError: If the username is already taken
        """
        return self.users.add(User(
            id=new_id(),
            username=username,
            password_hash=password_hash,
            recovery_key_hash=recovery_key_hash,
            encryption_key=encryption_key,
            created_at=self.clock.now(),
        ))

    def update_user_password(self, user_id: str, password_hash: str) -> None:
        if self.users.exists(user_id):
            self.users.update_password(user_id, password_hash)

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def list_folders(self, user_id: str) -> list[Folder]:
        return self.folders.list_by_user(user_id)

    def get_folder(self, folder_id: str) -> Folder | None:
        return self.folders.get_by_id_or_none(folder_id)

    def _require_folder(self, owner_id: str, folder_id: str, field_name: str) -> None:
        # Caller holds the folder lock.
        folder = self.folders.get_by_id_or_none(folder_id)
        if folder is None or folder.user_id != owner_id:
            raise ValidationError(
                "Folder does not exist",
                details={field_name: folder_id},
            )

    def create_folder(
        self,
        user_id: str,
        name: str,
        emoji: str | None = None,
        parent_id: str | None = None,
    ) -> Folder:
        """
        Raises:
            ValidationError: If parent_id is not one of user_id's folders
        """
        parent_id = parent_id or None
        with self.folders.locked():
            if parent_id is not None:
                self._require_folder(user_id, parent_id, "parent_id")
            return self.folders.add(Folder(
                id=new_id(),
                user_id=user_id,
                name=name,
                emoji=emoji or None,
                parent_id=parent_id,
                created_at=self.clock.now(),
            ))

    def update_folder(self, folder_id: str, **changes: Any) -> Folder | None:
        """
        Apply changes to a folder. Returns None if it does not exist.

        A new parent_id is checked against the folder's owner and its
        descendants in the same critical section as the write.

        Raises:
            ValidationError: If the new parent is missing or foreign, or is
                the folder itself or one of its descendants
        """
        with self.folders.locked():
            folder = self.folders.get_by_id_or_none(folder_id)
            if folder is None:
                return None
            parent_id = changes.get("parent_id")
            if parent_id is not None:
                self._require_folder(folder.user_id, parent_id, "parent_id")
                if folder_id in self.folders.ancestors(parent_id):
                    raise ValidationError(
                        "Folder cannot be moved inside itself",
                        details={"parent_id": parent_id},
                    )
            return self.folders.update(folder_id, **changes)

    def delete_folder(self, folder_id: str) -> None:
        """
        Remove a folder and every note filed directly under it.

        Child folders and their notes are left in place. Deleting an
        unknown id is a no-op.
        """
        with self.folders.locked(), self.notes.locked():
            self.folders.delete(folder_id)
            self.notes.delete_by_folder(folder_id)

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def list_notes(self, user_id: str) -> list[Note]:
        return self.notes.list_by_user(user_id)

    def list_notes_by_folder(self, folder_id: str, user_id: str | None = None) -> list[Note]:
        return self.notes.list_by_folder(folder_id, user_id)

    def list_pinned_notes(self, user_id: str) -> list[Note]:
        return self.notes.list_pinned(user_id)

    def search_notes(self, user_id: str, query: str) -> list[Note]:
        return self.notes.search(user_id, query)

    def get_note(self, note_id: str) -> Note | None:
        return self.notes.get_by_id_or_none(note_id)

    def create_note(
        self,
        user_id: str,
        title: str,
        content: str,
        tags: Sequence[str] = (),
        is_pinned: bool = False,
        folder_id: str | None = None,
        encrypted_content: str | None = None,
    ) -> Note:
        """
        Raises:
            ValidationError: If folder_id is not one of user_id's folders
        """
        folder_id = normalize_folder_id(folder_id)
        with self.folders.locked(), self.notes.locked():
            if folder_id is not None:
                self._require_folder(user_id, folder_id, "folder_id")
            now = self.clock.now()
            return self.notes.add(Note(
                id=new_id(),
                user_id=user_id,
                title=title,
                content=content,
                encrypted_content=encrypted_content,
                tags=tuple(tags),
                is_pinned=is_pinned,
                folder_id=folder_id,
                word_count=count_words(content),
                created_at=now,
                updated_at=now,
            ))

    def update_note(self, note_id: str, **changes: Any) -> Note | None:
        """
        Apply changes to a note. Returns None if it does not exist.

        Raises:
            ValidationError: If a new folder_id is not one of the owner's folders
        """
        if "folder_id" not in changes:
            with self.notes.locked():
                if not self.notes.exists(note_id):
                    return None
                return self.notes.update(note_id, **changes)

        changes["folder_id"] = normalize_folder_id(changes["folder_id"])
        with self.folders.locked(), self.notes.locked():
            note = self.notes.get_by_id_or_none(note_id)
            if note is None:
                return None
            if changes["folder_id"] is not None:
                self._require_folder(note.user_id, changes["folder_id"], "folder_id")
            return self.notes.update(note_id, **changes)

    def delete_note(self, note_id: str) -> None:
        self.notes.delete(note_id)
