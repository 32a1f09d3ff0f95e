"""In-memory fakes for testing.

These implement the same abstract interfaces as the SQL implementations
but keep everything in a dict. No database, no side effects.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from variants.domain.model.combination import Combination
from variants.domain.model.value_objects import ProductId
from variants.domain.repository.entity_store import EntityStore
from variants.domain.service.default_combination_resolver import (
    DefaultCombinationResolver,
)


class FakeCombinationStore(EntityStore[Combination]):

    def __init__(self, combinations: list[Combination] | None = None) -> None:
        self._store: dict[int, Combination] = {}
        self.persisted: list[tuple[int, list[str]]] = []
        self.exists_calls = 0
        self.fail_delete_ids: set[int] = set()
        for c in combinations or []:
            self._store[c.id.value] = c

    def load(self, entity_id: int) -> Combination | None:
        stored = self._store.get(entity_id)
        # hand out copies so unsaved edits never leak into the store
        return replace(stored) if stored is not None else None

    def persist_partial(self, entity: Combination, field_names: Iterable[str]) -> None:
        field_names = list(field_names)
        stored = self._store[entity.id.value]
        for name in field_names:
            setattr(stored, name, getattr(entity, name))
        self.persisted.append((entity.id.value, field_names))

    def delete(self, entity: Combination) -> None:
        if entity.id.value in self.fail_delete_ids:
            raise RuntimeError("foreign key constraint failed")
        del self._store[entity.id.value]

    def exists(self, entity_id: int) -> bool:
        self.exists_calls += 1
        return entity_id in self._store


class FakeDefaultResolver(DefaultCombinationResolver):

    def __init__(
        self, answer: int | None = None, error: Exception | None = None
    ) -> None:
        self._answer = answer
        self._error = error
        self.calls: list[ProductId] = []

    def find_default_combination_id(self, product_id: ProductId) -> int | None:
        self.calls.append(product_id)
        if self._error is not None:
            raise self._error
        return self._answer
