"""Identifier value objects.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid identifiers can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass

from variants.domain.exceptions import ValidationError


def _assert_positive_int(kind: str, value: object) -> None:
    # bool is an int subclass; True must not pass for id 1
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(
            f"{kind} must be an integer, got {type(value).__name__}"
        )
    if value <= 0:
        raise ValidationError(f"{kind} must be positive, got {value}")


@dataclass(frozen=True, order=True)
class ProductId:
    """Identifies a catalog item."""

    value: int

    def __post_init__(self) -> None:
        _assert_positive_int("ProductId", self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class CombinationId:
    """Identifies one variant row of a product."""

    value: int

    def __post_init__(self) -> None:
        _assert_positive_int("CombinationId", self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class AttributeId:
    """Identifies a selectable option value, e.g. "red" or "size M"."""

    value: int

    def __post_init__(self) -> None:
        _assert_positive_int("AttributeId", self.value)

    def __str__(self) -> str:
        return str(self.value)
