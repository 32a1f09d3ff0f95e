"""Domain-level exceptions.

All failures raised by the combination data-access layer are subclasses of
DomainException so callers (and the CLI) can catch them uniformly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from variants.domain.model.combination import BulkDeleteResult


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class CombinationNotFoundError(EntityNotFoundError):
    """The combination, or the product it depends on, does not exist."""


class EntityPersistenceError(DomainException):
    """The store refused to write an entity.

    ``error_code`` is an opaque tag supplied by the caller so upstream code
    can tell which operation failed. Nothing in this package branches on it.
    """

    def __init__(self, message: str, error_code: int = 0) -> None:
        super().__init__(message)
        self.error_code = error_code


class CannotUpdateCombinationError(EntityPersistenceError):
    """A partial update of a combination failed at the store layer."""


class CannotDeleteCombinationError(EntityPersistenceError):
    """Deleting a combination failed at the store layer."""


class CannotBulkDeleteCombinationError(DomainException):
    """One or more combinations of a bulk delete could not be deleted.

    Carries the full outcome of the batch, not only the first failure.
    """

    def __init__(self, message: str, result: BulkDeleteResult) -> None:
        super().__init__(message)
        self.result = result


class CoreError(DomainException):
    """An external collaborator failed in an unexpected way."""
