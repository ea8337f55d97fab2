"""
Folder Service.

Business logic layer for folders. Every call is scoped to the owning user;
another user's folder behaves exactly like a missing one.
"""

from notekeep.backend.core.exceptions import NotFoundError
from notekeep.backend.models.folder import Folder
from notekeep.backend.schemas.folder import (
    FOLDER_EMOJI_MAX_LENGTH,
    FOLDER_NAME_MAX_LENGTH,
    FolderCreate,
    FolderUpdate,
)
from notekeep.backend.services.base import BaseService


class FolderService(BaseService):
    """
    Service for folder business logic.

    Parent references must point at one of the caller's folders and may
    not form a cycle. Storage checks both under its folder lock, in the
    same step as the write. Deleting a folder removes the notes filed
    directly in it; child folders are left where they are.
    """

    def list_folders(self, user_id: str) -> list[Folder]:
        """Folders owned by user_id, oldest first."""
        return self.storage.list_folders(user_id)

    def get_folder(self, user_id: str, folder_id: str) -> Folder:
        """
        Get one of the caller's folders.

        Raises:
            NotFoundError: If the folder does not exist or belongs to someone else
        """
        folder = self.storage.get_folder(folder_id)
        if folder is None or folder.user_id != user_id:
            raise NotFoundError("Folder not found")
        return folder

    def _validate_name(self, name: str | None) -> None:
        self._validate_required({"name": name}, ["name"])
        self._validate_string_length(name, "name", max_length=FOLDER_NAME_MAX_LENGTH)

    def _validate_emoji(self, emoji: str | None) -> None:
        if emoji:
            self._validate_string_length(emoji, "emoji", max_length=FOLDER_EMOJI_MAX_LENGTH)

    def create_folder(self, user_id: str, data: FolderCreate) -> Folder:
        """
        Create a folder for user_id.

        Raises:
            ValidationError: If the name is blank or the parent is not the caller's
        """
        self._validate_name(data.name)
        self._validate_emoji(data.emoji)

        self._log_operation("Creating folder", user_id=user_id)
        return self.storage.create_folder(
            user_id,
            name=data.name,
            emoji=data.emoji or None,
            parent_id=data.parent_id or None,
        )

    def update_folder(self, user_id: str, folder_id: str, data: FolderUpdate) -> Folder:
        """
        Rename, re-label or re-parent a folder. Only provided fields change.

        Raises:
            NotFoundError: If the folder is not one of the caller's
            ValidationError: If the new values are invalid or re-parenting
                would create a cycle
        """
        self.get_folder(user_id, folder_id)
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes:
            self._validate_name(changes["name"])
        if "emoji" in changes:
            self._validate_emoji(changes["emoji"])
            changes["emoji"] = changes["emoji"] or None
        if "parent_id" in changes:
            changes["parent_id"] = changes["parent_id"] or None

        self._log_operation("Updating folder", folder_id=folder_id, fields=list(changes))
        folder = self.storage.update_folder(folder_id, **changes)
        if folder is None:
            raise NotFoundError("Folder not found")
        return folder

    def delete_folder(self, user_id: str, folder_id: str) -> None:
        """
        Delete a folder and the notes filed directly in it.

        Unknown or foreign ids are ignored.
        """
        folder = self.storage.get_folder(folder_id)
        if folder is None or folder.user_id != user_id:
            return

        self._log_operation("Deleting folder", folder_id=folder_id)
        self.storage.delete_folder(folder_id)
