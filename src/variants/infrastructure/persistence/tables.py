"""Relational schema for combinations.

Two tables: the variant table keyed by combination id, and the link table
mapping each combination to the attribute ids that distinguish it.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import (
    Boolean,
    Column,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
)
from sqlalchemy.engine import Engine


@dataclass(frozen=True)
class CombinationTables:
    metadata: MetaData
    combination: Table
    combination_attribute: Table


def build_tables(prefix: str = "ps_") -> CombinationTables:
    """Declare both tables under ``prefix`` on a fresh MetaData."""
    metadata = MetaData()
    combination = Table(
        f"{prefix}product_attribute",
        metadata,
        Column("id_product_attribute", Integer, primary_key=True, autoincrement=True),
        Column("id_product", Integer, nullable=False, index=True),
        Column("reference", String(64), nullable=False, default=""),
        Column("price", Numeric(20, 6), nullable=False, default=0),
        Column("weight", Numeric(20, 6), nullable=False, default=0),
        Column("quantity", Integer, nullable=False, default=0),
        Column("minimal_quantity", Integer, nullable=False, default=1),
        # NULL and false both mean "not the default"
        Column("default_on", Boolean, nullable=True),
    )
    combination_attribute = Table(
        f"{prefix}product_attribute_combination",
        metadata,
        Column("id_attribute", Integer, primary_key=True),
        Column("id_product_attribute", Integer, primary_key=True, index=True),
    )
    return CombinationTables(metadata, combination, combination_attribute)


def create_schema(engine: Engine, tables: CombinationTables) -> None:
    tables.metadata.create_all(engine)
