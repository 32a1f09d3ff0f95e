"""Abstract catalog service that picks a product's best default variant.

Unlike the ``default_on`` flag stored on each row, the resolver applies
catalog business rules (stock, preference order). The two answers may differ.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from variants.domain.model.value_objects import ProductId


class DefaultCombinationResolver(ABC):

    @abstractmethod
    def find_default_combination_id(self, product_id: ProductId) -> int | None:
        """Return the id of the best default combination, or None."""
