"""Abstract entity store.

The capability interface the repositories are built on. Defined in the
domain layer so the domain never depends on infrastructure; concrete stores
(SQL, in-memory) live elsewhere.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Generic, TypeVar

T = TypeVar("T")


class EntityStore(ABC, Generic[T]):

    @abstractmethod
    def load(self, entity_id: int) -> T | None:
        """Return the entity with this primary key, or None."""

    @abstractmethod
    def persist_partial(self, entity: T, field_names: Iterable[str]) -> None:
        """Write only the named fields of an existing entity."""

    @abstractmethod
    def delete(self, entity: T) -> None:
        """Remove the entity and the rows that only exist for it."""

    @abstractmethod
    def exists(self, entity_id: int) -> bool:
        """Existence check that does not fetch the row."""
