"""SQLAlchemy-backed implementation of EntityStore for combinations."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Engine, Row

from variants.domain.exceptions import CombinationNotFoundError
from variants.domain.model.combination import Combination
from variants.domain.model.value_objects import AttributeId, CombinationId, ProductId
from variants.domain.repository.entity_store import EntityStore
from variants.infrastructure.persistence.tables import CombinationTables

# Entity attribute -> column of the variant table
_COLUMNS = {
    "reference": "reference",
    "price_impact": "price",
    "weight": "weight",
    "quantity": "quantity",
    "minimal_quantity": "minimal_quantity",
    "default_on": "default_on",
}


class SqlCombinationStore(EntityStore[Combination]):

    def __init__(self, engine: Engine, tables: CombinationTables) -> None:
        self._engine = engine
        self._pa = tables.combination
        self._pac = tables.combination_attribute

    # --- EntityStore interface ------------------------------------------------

    def load(self, entity_id: int) -> Combination | None:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(self._pa).where(self._pa.c.id_product_attribute == entity_id)
            ).first()
            if row is None:
                return None
            attribute_ids = conn.execute(
                select(self._pac.c.id_attribute).where(
                    self._pac.c.id_product_attribute == entity_id
                )
            ).scalars().all()
        return self._to_domain(row, attribute_ids)

    def persist_partial(self, entity: Combination, field_names: Iterable[str]) -> None:
        values = {
            _COLUMNS[name]: getattr(entity, name)
            for name in field_names
            if name in _COLUMNS
        }
        if not values:
            return
        with self._engine.begin() as conn:
            result = conn.execute(
                update(self._pa)
                .where(self._pa.c.id_product_attribute == entity.id.value)
                .values(**values)
            )
        if result.rowcount == 0:
            raise CombinationNotFoundError(f"Combination #{entity.id} was not found")

    def delete(self, entity: Combination) -> None:
        # link rows and the variant row go together or not at all
        with self._engine.begin() as conn:
            conn.execute(
                delete(self._pac).where(
                    self._pac.c.id_product_attribute == entity.id.value
                )
            )
            conn.execute(
                delete(self._pa).where(
                    self._pa.c.id_product_attribute == entity.id.value
                )
            )

    def exists(self, entity_id: int) -> bool:
        with self._engine.connect() as conn:
            found = conn.execute(
                select(1)
                .select_from(self._pa)
                .where(self._pa.c.id_product_attribute == entity_id)
                .limit(1)
            ).first()
        return found is not None

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_domain(row: Row, attribute_ids: Iterable[int]) -> Combination:
        m = row._mapping
        return Combination(
            id=CombinationId(int(m["id_product_attribute"])),
            product_id=ProductId(int(m["id_product"])),
            attribute_ids=frozenset(AttributeId(int(a)) for a in attribute_ids),
            default_on=bool(m["default_on"]),
            reference=m["reference"] or "",
            price_impact=Decimal(str(m["price"] or 0)),
            weight=Decimal(str(m["weight"] or 0)),
            quantity=int(m["quantity"] or 0),
            minimal_quantity=int(m["minimal_quantity"] or 1),
        )
