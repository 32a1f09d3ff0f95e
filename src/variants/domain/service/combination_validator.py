"""Domain service: field-level validation of combinations.

Repositories run a Validator against the whole entity before any write,
so a rejected entity never reaches the store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Generic, TypeVar

from variants.domain.exceptions import ValidationError
from variants.domain.model.combination import Combination

T = TypeVar("T")

MAX_REFERENCE_LENGTH = 64
MAX_PRICE_IMPACT = Decimal("1000000000")


def _is_int(value: object) -> bool:
    # bool is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


class Validator(ABC, Generic[T]):

    @abstractmethod
    def validate(self, entity: T) -> None:
        """Raise ValidationError if the entity may not be persisted."""


class CombinationValidator(Validator[Combination]):
    """Checks the business fields of a combination.

    Collects every problem before raising, so the message lists all of
    them at once.
    """

    def validate(self, combination: Combination) -> None:
        errors: list[str] = []

        if not isinstance(combination.reference, str):
            errors.append("reference must be a string")
        elif len(combination.reference) > MAX_REFERENCE_LENGTH:
            errors.append(
                f"reference is longer than {MAX_REFERENCE_LENGTH} characters"
            )
        if not isinstance(combination.price_impact, Decimal):
            errors.append("price_impact must be a Decimal")
        elif abs(combination.price_impact) >= MAX_PRICE_IMPACT:
            errors.append(f"price_impact {combination.price_impact} is out of range")
        if not isinstance(combination.weight, Decimal):
            errors.append("weight must be a Decimal")
        elif combination.weight < Decimal("0"):
            errors.append("weight cannot be negative")
        if not _is_int(combination.quantity):
            errors.append("quantity must be an integer")
        if not _is_int(combination.minimal_quantity) or combination.minimal_quantity < 1:
            errors.append("minimal_quantity must be a positive integer")
        if not isinstance(combination.default_on, bool):
            errors.append("default_on must be a boolean")

        if errors:
            raise ValidationError(
                f"Combination #{combination.id} is invalid: " + "; ".join(errors)
            )
