"""
Base Repository.

Base class for the in-memory collections with common CRUD operations.
Each repository owns one keyed collection guarded by its own lock.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Generic, TypeVar

from notekeep.backend.core.exceptions import NotFoundError

ModelType = TypeVar("ModelType")


class InMemoryRepository(Generic[ModelType]):
    """
    Base repository over a dict of immutable records.

    Subclasses set the record class:

        class FolderRepository(InMemoryRepository[Folder]):
            model = Folder

    Every read-modify-write runs under the collection lock, so concurrent
    updates of the same id never lose each other's changes. Records are
    frozen dataclasses and are replaced, never mutated in place.
    """

    model: type[ModelType]

    def __init__(self) -> None:
        self._records: dict[str, ModelType] = {}
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the collection lock across several operations."""
        with self._lock:
            yield

    def get_by_id(self, id: str) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        with self._lock:
            return self._records.get(id)

    def get_all(self) -> list[ModelType]:
        """Snapshot of every record, in insertion order."""
        with self._lock:
            return list(self._records.values())

    def find(self, predicate: Callable[[ModelType], bool]) -> list[ModelType]:
        """Snapshot of the records matching predicate."""
        with self._lock:
            return [record for record in self._records.values() if predicate(record)]

    def add(self, instance: ModelType) -> ModelType:
        """Store a new record under its id."""
        with self._lock:
            self._records[instance.id] = instance
            return instance

    def update(self, id: str, **changes: Any) -> ModelType:
        """
        Replace a record with a copy carrying the given field values.

        Raises:
            NotFoundError: If record not found
        """
        with self._lock:
            instance = self.get_by_id(id)
            updated = replace(instance, **self._prepare_changes(instance, changes))
            self._records[id] = updated
            return updated

    def _prepare_changes(self, instance: ModelType, changes: dict[str, Any]) -> dict[str, Any]:
        """Hook for derived fields; called under the collection lock."""
        return changes

    def delete(self, id: str) -> bool:
        """Remove a record. Returns False when the id was not present."""
        with self._lock:
            return self._records.pop(id, None) is not None

    def delete_where(self, predicate: Callable[[ModelType], bool]) -> int:
        """Remove every record matching predicate. Returns the number removed."""
        with self._lock:
            doomed = [key for key, record in self._records.items() if predicate(record)]
            for key in doomed:
                del self._records[key]
            return len(doomed)

    def exists(self, id: str) -> bool:
        """Check if a record exists by ID."""
        with self._lock:
            return id in self._records

    def count(self) -> int:
        with self._lock:
            return len(self._records)
