"""
Folder Repository.
"""

from notekeep.backend.models.folder import Folder
from notekeep.backend.repositories.base import InMemoryRepository


class FolderRepository(InMemoryRepository[Folder]):
    """Repository for Folder records."""

    model = Folder

    def list_by_user(self, user_id: str) -> list[Folder]:
        """Folders owned by user_id, oldest first."""
        folders = self.find(lambda folder: folder.user_id == user_id)
        return sorted(folders, key=lambda folder: folder.created_at)

    def ancestors(self, folder_id: str | None) -> list[str]:
        """
        Ids on the parent chain starting at folder_id, inclusive.

        Stops at a missing parent or at the first repeated id.
        """
        chain: list[str] = []
        with self._lock:
            current = folder_id
            while current is not None and current not in chain:
                folder = self._records.get(current)
                if folder is None:
                    break
                chain.append(current)
                current = folder.parent_id
        return chain
