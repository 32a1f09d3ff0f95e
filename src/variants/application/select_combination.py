"""Application service: Select Combination use case.

Turns a shopper's option selection (e.g. red + size M) into the concrete
combination for that exact selection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from variants.application.dto import CombinationDTO
from variants.application.show_combination import to_dto
from variants.domain.exceptions import CombinationNotFoundError
from variants.domain.model.value_objects import AttributeId, ProductId

if TYPE_CHECKING:
    from variants.infrastructure.persistence.combination_repository import (
        CombinationRepository,
    )


class SelectCombinationHandler:

    def __init__(self, combination_repo: CombinationRepository) -> None:
        self._combination_repo = combination_repo

    def handle(self, product_id: int, attribute_ids: list[int]) -> list[CombinationDTO]:
        """Return every combination matching the selection.

        Usually one; more than one only when the catalog holds duplicate
        variants. Raises CombinationNotFoundError when nothing matches.
        """
        matches = self._combination_repo.get_combination_ids_by_attributes(
            ProductId(product_id), [AttributeId(a) for a in attribute_ids]
        )
        if not matches:
            raise CombinationNotFoundError(
                f"Product #{product_id} has no combination with attributes "
                f"{sorted(attribute_ids)}"
            )
        return [to_dto(self._combination_repo.get(cid)) for cid in matches]
