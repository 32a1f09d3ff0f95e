"""Shared fixtures: an in-memory SQLite catalog with the combination tables."""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.pool import StaticPool

from variants.domain.model.value_objects import CombinationId
from variants.domain.service.combination_validator import CombinationValidator
from variants.infrastructure.persistence.combination_repository import (
    CombinationRepository,
)
from variants.infrastructure.persistence.sql_combination_store import (
    SqlCombinationStore,
)
from variants.infrastructure.persistence.tables import build_tables, create_schema
from tests.fakes import FakeDefaultResolver


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture
def tables(engine):
    schema = build_tables("ps_")
    create_schema(engine, schema)
    return schema


@pytest.fixture
def add_combination(engine, tables):
    """Insert a combination row plus its attribute links, return its id."""

    def _add(
        product_id: int,
        attribute_ids: list[int],
        *,
        default_on: bool | None = None,
        quantity: int = 0,
        reference: str = "",
        price: str = "0",
    ) -> CombinationId:
        with engine.begin() as conn:
            result = conn.execute(
                insert(tables.combination).values(
                    id_product=product_id,
                    reference=reference,
                    price=Decimal(price),
                    weight=Decimal("0"),
                    quantity=quantity,
                    minimal_quantity=1,
                    default_on=default_on,
                )
            )
            combination_id = result.inserted_primary_key[0]
            for attribute_id in attribute_ids:
                conn.execute(
                    insert(tables.combination_attribute).values(
                        id_attribute=attribute_id,
                        id_product_attribute=combination_id,
                    )
                )
        return CombinationId(int(combination_id))

    return _add


@pytest.fixture
def resolver():
    return FakeDefaultResolver()


@pytest.fixture
def repo(engine, tables, resolver):
    return CombinationRepository(
        engine=engine,
        tables=tables,
        store=SqlCombinationStore(engine, tables),
        validator=CombinationValidator(),
        default_resolver=resolver,
    )
