# In-memory repositories and the storage contract
from notekeep.backend.repositories.storage import MemoryStorage, Storage

__all__ = [
    "MemoryStorage",
    "Storage",
]
