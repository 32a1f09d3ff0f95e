"""Combination entity and the outcome of a bulk delete.

A combination is one concrete variant of a product, identified among its
siblings by the exact set of option values (attributes) it carries.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from variants.domain.exceptions import DomainException
from variants.domain.model.value_objects import AttributeId, CombinationId, ProductId


@dataclass
class Combination:
    """A product variant.

    Business fields (reference, price impact, weight, stock) are opaque to
    the data-access layer: it never interprets them, it only persists the
    ones a caller names in a partial update.
    """

    UPDATABLE_FIELDS = frozenset(
        {
            "reference",
            "price_impact",
            "weight",
            "quantity",
            "minimal_quantity",
            "default_on",
        }
    )

    id: CombinationId
    product_id: ProductId
    attribute_ids: frozenset[AttributeId] = frozenset()
    default_on: bool = False
    reference: str = ""
    price_impact: Decimal = Decimal("0")
    weight: Decimal = Decimal("0")
    quantity: int = 0
    minimal_quantity: int = 1

    @property
    def sorted_attribute_ids(self) -> tuple[int, ...]:
        return tuple(sorted(a.value for a in self.attribute_ids))


@dataclass(frozen=True)
class BulkDeleteResult:
    """Outcome of deleting many combinations one by one.

    ``failures`` keeps input order and pairs each failing id with the error
    raised for it, so callers can report a precise cause per id.
    """

    deleted: tuple[CombinationId, ...] = ()
    failures: tuple[tuple[CombinationId, DomainException], ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_ids(self) -> tuple[CombinationId, ...]:
        return tuple(cid for cid, _ in self.failures)

    def errors_by_id(self) -> dict[CombinationId, DomainException]:
        return dict(self.failures)
