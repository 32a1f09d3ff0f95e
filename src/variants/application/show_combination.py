"""Application service: Show Combination use case."""

from __future__ import annotations

from typing import TYPE_CHECKING

from variants.application.dto import CombinationDTO, DefaultCombinationDTO
from variants.domain.model.combination import Combination
from variants.domain.model.value_objects import CombinationId, ProductId

if TYPE_CHECKING:
    from variants.infrastructure.persistence.combination_repository import (
        CombinationRepository,
    )


def to_dto(combination: Combination) -> CombinationDTO:
    return CombinationDTO(
        id=combination.id.value,
        product_id=combination.product_id.value,
        attribute_ids=list(combination.sorted_attribute_ids),
        default_on=combination.default_on,
        reference=combination.reference,
        price_impact=f"{combination.price_impact:+.2f}",
        weight=f"{combination.weight:.3f}",
        quantity=combination.quantity,
    )


class ShowCombinationHandler:

    def __init__(self, combination_repo: CombinationRepository) -> None:
        self._combination_repo = combination_repo

    def handle(self, combination_id: int) -> CombinationDTO:
        return to_dto(self._combination_repo.get(CombinationId(combination_id)))


class ShowDefaultCombinationHandler:
    """Reports both default strategies without reconciling them.

    The stored flag and the catalog rule can legitimately disagree.
    """

    def __init__(self, combination_repo: CombinationRepository) -> None:
        self._combination_repo = combination_repo

    def handle(self, product_id: int) -> DefaultCombinationDTO:
        pid = ProductId(product_id)
        flagged = self._combination_repo.get_default_combination_id(pid)
        resolved = self._combination_repo.find_default_combination(pid)
        return DefaultCombinationDTO(
            product_id=product_id,
            flagged_id=flagged.value if flagged else None,
            resolved_id=resolved.id.value if resolved else None,
        )
