"""SQL implementation of the catalog's default-combination rule.

Preference order among a product's combinations:
  1. rows flagged ``default_on``
  2. rows in stock
  3. smallest id

When ``minimum_quantity`` is positive, rows with less stock are skipped,
unless that leaves nothing, in which case all rows are considered again.
"""

from __future__ import annotations

from sqlalchemy import case, select
from sqlalchemy.engine import Engine

from variants.domain.model.value_objects import ProductId
from variants.domain.service.default_combination_resolver import (
    DefaultCombinationResolver,
)
from variants.infrastructure.persistence.tables import CombinationTables


class SqlDefaultCombinationResolver(DefaultCombinationResolver):

    def __init__(
        self, engine: Engine, tables: CombinationTables, minimum_quantity: int = 0
    ) -> None:
        self._engine = engine
        self._pa = tables.combination
        self._minimum_quantity = minimum_quantity

    def find_default_combination_id(self, product_id: ProductId) -> int | None:
        pa = self._pa
        query = (
            select(pa.c.id_product_attribute)
            .where(pa.c.id_product == product_id.value)
            .order_by(
                case((pa.c.default_on.is_(True), 0), else_=1),
                case((pa.c.quantity > 0, 0), else_=1),
                pa.c.id_product_attribute.asc(),
            )
            .limit(1)
        )
        with self._engine.connect() as conn:
            if self._minimum_quantity > 0:
                found = conn.execute(
                    query.where(pa.c.quantity >= self._minimum_quantity)
                ).scalar()
                if found is not None:
                    return int(found)
            found = conn.execute(query).scalar()
        return int(found) if found is not None else None
