"""Combination repository.

Extends the generic entity repository with the queries that only make sense
for combinations: product/variant id lookups, matching an option selection
to a variant, the two default-variant strategies, and tolerant bulk delete.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from itertools import groupby

from sqlalchemy import select
from sqlalchemy.engine import Engine

from variants.domain.exceptions import (
    CannotBulkDeleteCombinationError,
    CannotDeleteCombinationError,
    CannotUpdateCombinationError,
    CombinationNotFoundError,
    CoreError,
    DomainException,
)
from variants.domain.model.combination import BulkDeleteResult, Combination
from variants.domain.model.value_objects import AttributeId, CombinationId, ProductId
from variants.domain.repository.entity_repository import EntityRepository
from variants.domain.repository.entity_store import EntityStore
from variants.domain.service.combination_validator import Validator
from variants.domain.service.default_combination_resolver import (
    DefaultCombinationResolver,
)
from variants.infrastructure.persistence.tables import CombinationTables

logger = logging.getLogger(__name__)


class CombinationRepository(EntityRepository[Combination, CombinationId]):

    entity_name = "Combination"
    updatable_fields = Combination.UPDATABLE_FIELDS
    not_found_error = CombinationNotFoundError
    update_error = CannotUpdateCombinationError
    delete_error = CannotDeleteCombinationError

    def __init__(
        self,
        engine: Engine,
        tables: CombinationTables,
        store: EntityStore[Combination],
        validator: Validator[Combination],
        default_resolver: DefaultCombinationResolver,
    ) -> None:
        super().__init__(store, validator)
        self._engine = engine
        self._pa = tables.combination
        self._pac = tables.combination_attribute
        self._default_resolver = default_resolver

    # --- Foreign-key lookups --------------------------------------------------

    def get_product_id(self, combination_id: CombinationId) -> ProductId:
        with self._engine.connect() as conn:
            product_id = conn.execute(
                select(self._pa.c.id_product).where(
                    self._pa.c.id_product_attribute == combination_id.value
                )
            ).scalar()
        if not product_id:
            raise CombinationNotFoundError(
                f"Combination #{combination_id} was not found"
            )
        return ProductId(int(product_id))

    def get_combination_ids(self, product_id: ProductId) -> list[CombinationId]:
        """Every combination of the product, ascending by id."""
        with self._engine.connect() as conn:
            ids = conn.execute(
                select(self._pa.c.id_product_attribute)
                .where(self._pa.c.id_product == product_id.value)
                .order_by(self._pa.c.id_product_attribute.asc())
            ).scalars().all()
        return [CombinationId(int(i)) for i in ids]

    # --- Attribute-set matching -----------------------------------------------

    def get_combination_ids_by_attributes(
        self, product_id: ProductId, attribute_ids: Sequence[AttributeId]
    ) -> list[CombinationId]:
        """Ids of the product's combinations whose attribute set is exactly
        ``attribute_ids``.

        Input order does not matter. A combination carrying more or fewer
        attributes than requested does not match. Every match is returned,
        since nothing prevents two siblings from sharing one set.
        """
        wanted = tuple(sorted(a.value for a in attribute_ids))
        query = (
            select(self._pa.c.id_product_attribute, self._pac.c.id_attribute)
            .join(
                self._pac,
                self._pac.c.id_product_attribute == self._pa.c.id_product_attribute,
            )
            .where(self._pa.c.id_product == product_id.value)
            .order_by(
                self._pa.c.id_product_attribute.asc(), self._pac.c.id_attribute.asc()
            )
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query).all()

        matches = []
        for combination_id, group in groupby(rows, key=lambda row: row[0]):
            if tuple(int(row[1]) for row in group) == wanted:
                matches.append(CombinationId(int(combination_id)))
        logger.debug(
            "Product #%s attributes %s matched combinations %s",
            product_id, list(wanted), [m.value for m in matches],
        )
        return matches

    # --- Default combination --------------------------------------------------

    def get_default_combination_id(self, product_id: ProductId) -> CombinationId | None:
        """The combination flagged ``default_on`` in storage.

        Trusts the flag only. If several rows are flagged, the smallest id
        wins.
        """
        with self._engine.connect() as conn:
            ids = conn.execute(
                select(self._pa.c.id_product_attribute)
                .where(self._pa.c.id_product == product_id.value)
                .where(self._pa.c.default_on.is_(True))
                .order_by(self._pa.c.id_product_attribute.asc())
                .limit(2)
            ).scalars().all()
        if not ids:
            return None
        if len(ids) > 1:
            logger.warning(
                "Product #%s has several combinations flagged default, using #%s",
                product_id, ids[0],
            )
        return CombinationId(int(ids[0]))

    def find_default_combination(self, product_id: ProductId) -> Combination | None:
        """Best default candidate according to catalog rules, not the flag."""
        try:
            found = self._default_resolver.find_default_combination_id(product_id)
            combination_id = CombinationId(int(found)) if found else None
        except Exception:
            logger.exception(
                "Default combination resolver failed for product #%s", product_id
            )
            raise CoreError(
                "Error occurred while trying to get product default combination"
            ) from None

        if combination_id is None:
            return None
        return self.get(combination_id)

    # --- Bulk operations ------------------------------------------------------

    def bulk_delete(self, combination_ids: Sequence[CombinationId]) -> BulkDeleteResult:
        """Delete each combination independently.

        A failing id does not stop the batch. Once every id was attempted,
        raises CannotBulkDeleteCombinationError carrying the whole outcome if
        anything failed. Combinations already deleted stay deleted.
        """
        deleted: list[CombinationId] = []
        failures: list[tuple[CombinationId, DomainException]] = []

        for combination_id in combination_ids:
            try:
                self.delete(combination_id)
            except (CombinationNotFoundError, CannotDeleteCombinationError) as exc:
                logger.warning("Could not delete combination #%s: %s", combination_id, exc)
                failures.append((combination_id, exc))
            else:
                deleted.append(combination_id)

        result = BulkDeleteResult(deleted=tuple(deleted), failures=tuple(failures))
        if not result.ok:
            raise CannotBulkDeleteCombinationError(
                "Errors occurred during bulk deletion of combinations: "
                + ", ".join(f"#{cid}" for cid in result.failed_ids),
                result,
            )
        return result
