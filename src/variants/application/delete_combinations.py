"""Application service: Delete Combinations use case.

Deletes many combinations at once and reports, per id, what happened.
There is no transaction around the batch: ids that were deleted stay
deleted even when others fail.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from variants.application.dto import DeleteFailureDTO, DeleteReportDTO
from variants.domain.exceptions import CannotBulkDeleteCombinationError
from variants.domain.model.value_objects import CombinationId

if TYPE_CHECKING:
    from variants.infrastructure.persistence.combination_repository import (
        CombinationRepository,
    )


class DeleteCombinationsHandler:

    def __init__(self, combination_repo: CombinationRepository) -> None:
        self._combination_repo = combination_repo

    def handle(self, combination_ids: list[int]) -> DeleteReportDTO:
        ids = [CombinationId(i) for i in combination_ids]
        try:
            result = self._combination_repo.bulk_delete(ids)
        except CannotBulkDeleteCombinationError as exc:
            result = exc.result

        return DeleteReportDTO(
            deleted=[cid.value for cid in result.deleted],
            failed=[
                DeleteFailureDTO(combination_id=cid.value, reason=str(error))
                for cid, error in result.failures
            ],
        )
