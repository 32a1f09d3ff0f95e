"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from variants.domain.service.combination_validator import CombinationValidator
from variants.infrastructure.config import Settings
from variants.infrastructure.persistence.combination_repository import (
    CombinationRepository,
)
from variants.infrastructure.persistence.sql_combination_store import (
    SqlCombinationStore,
)
from variants.infrastructure.persistence.sql_default_combination_resolver import (
    SqlDefaultCombinationResolver,
)
from variants.infrastructure.persistence.tables import (
    CombinationTables,
    build_tables,
    create_schema,
)


def engine(settings: Settings) -> Engine:
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url)


def tables(settings: Settings) -> CombinationTables:
    return build_tables(settings.table_prefix)


def combination_repository(
    db: Engine, schema: CombinationTables
) -> CombinationRepository:
    return CombinationRepository(
        engine=db,
        tables=schema,
        store=SqlCombinationStore(db, schema),
        validator=CombinationValidator(),
        default_resolver=SqlDefaultCombinationResolver(db, schema),
    )


def init_schema(db: Engine, schema: CombinationTables) -> None:
    create_schema(db, schema)
