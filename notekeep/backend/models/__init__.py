# Domain records
from notekeep.backend.models.folder import Folder
from notekeep.backend.models.note import Note
from notekeep.backend.models.user import User

__all__ = [
    "Folder",
    "Note",
    "User",
]
