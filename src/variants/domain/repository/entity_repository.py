"""Generic repository on top of an EntityStore.

Subclasses bind one entity kind: the store they talk to and the error
classes raised for that kind. The load/update/delete/exists plumbing, and
the way store failures turn into domain errors, is shared.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import ClassVar, Generic, Protocol, TypeVar

from variants.domain.exceptions import (
    CoreError,
    EntityNotFoundError,
    EntityPersistenceError,
    ValidationError,
)
from variants.domain.repository.entity_store import EntityStore
from variants.domain.service.combination_validator import Validator

logger = logging.getLogger(__name__)


class Identifier(Protocol):
    value: int


T = TypeVar("T")
IdT = TypeVar("IdT", bound=Identifier)


class EntityRepository(Generic[T, IdT]):

    entity_name: ClassVar[str] = "Entity"
    updatable_fields: ClassVar[frozenset[str]] = frozenset()
    not_found_error: ClassVar[type[EntityNotFoundError]] = EntityNotFoundError
    update_error: ClassVar[type[EntityPersistenceError]] = EntityPersistenceError
    delete_error: ClassVar[type[EntityPersistenceError]] = EntityPersistenceError

    def __init__(self, store: EntityStore[T], validator: Validator[T]) -> None:
        self._store = store
        self._validator = validator

    def get(self, entity_id: IdT) -> T:
        try:
            return self._load(entity_id)
        except EntityNotFoundError:
            raise
        except Exception as exc:
            raise CoreError(
                f"Failed to load {self.entity_name} #{entity_id.value}: {exc}"
            ) from exc

    def partial_update(
        self, entity: T, field_names: Iterable[str], error_code: int = 0
    ) -> None:
        """Validate the whole entity, then persist only ``field_names``.

        Validation errors propagate as raised by the validator; the store
        is not touched in that case.
        """
        field_names = list(field_names)
        unknown = sorted(set(field_names) - self.updatable_fields)
        if unknown:
            raise ValidationError(
                f"Cannot update unknown {self.entity_name} field(s): {', '.join(unknown)}"
            )

        self._validator.validate(entity)
        try:
            self._store.persist_partial(entity, field_names)
        except EntityNotFoundError:
            raise
        except Exception as exc:
            raise self.update_error(
                f"Failed to update {self.entity_name} #{self._id_of(entity)}: {exc}",
                error_code,
            ) from exc
        logger.info(
            "Updated %s #%s fields %s", self.entity_name, self._id_of(entity), field_names
        )

    def delete(self, entity_id: IdT, error_code: int = 0) -> None:
        try:
            entity = self._load(entity_id)
            self._store.delete(entity)
        except EntityNotFoundError:
            raise
        except Exception as exc:
            raise self.delete_error(
                f"Failed to delete {self.entity_name} #{entity_id.value}: {exc}",
                error_code,
            ) from exc
        logger.info("Deleted %s #%s", self.entity_name, entity_id.value)

    def assert_exists(self, entity_id: IdT) -> None:
        if not self._store.exists(entity_id.value):
            raise self._not_found(entity_id)

    # --- Internal helpers -----------------------------------------------------

    def _load(self, entity_id: IdT) -> T:
        entity = self._store.load(entity_id.value)
        if entity is None:
            raise self._not_found(entity_id)
        return entity

    def _not_found(self, entity_id: IdT) -> EntityNotFoundError:
        return self.not_found_error(
            f"{self.entity_name} #{entity_id.value} was not found"
        )

    @staticmethod
    def _id_of(entity: T) -> object:
        return getattr(entity, "id", "?")
