"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CombinationDTO:
    """Output: one combination as displayed to the user."""

    id: int
    product_id: int
    attribute_ids: list[int]
    default_on: bool
    reference: str
    price_impact: str  # formatted, e.g. "+1.50"
    weight: str
    quantity: int


@dataclass(frozen=True)
class DefaultCombinationDTO:
    """Output: both default strategies for one product, side by side."""

    product_id: int
    flagged_id: int | None
    resolved_id: int | None

    @property
    def agrees(self) -> bool:
        return self.flagged_id == self.resolved_id


@dataclass(frozen=True)
class DeleteFailureDTO:
    combination_id: int
    reason: str


@dataclass(frozen=True)
class DeleteReportDTO:
    """Output: what a bulk delete did, id by id."""

    deleted: list[int]
    failed: list[DeleteFailureDTO]
