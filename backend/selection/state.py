# backend/selection/state.py
"""
Selection state for one stack-building session.

Holds the installed use case, one product per category, the category cursor
and the last computed compatibility results. Nothing outlives the object:
the owner creates one per session and drops it (or calls reset) when done.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..catalog.models import Product
from ..compatibility.scoring import (
    CompatibilityResult,
    StackScore,
    calculate_compatibility,
    stack_score,
)
from ..errors import InvariantViolation
from ..use_cases import CategoryDefinition, UseCaseTemplate


class SelectionState:
    def __init__(self) -> None:
        self.use_case: Optional[UseCaseTemplate] = None
        self._selected: Dict[str, Product] = {}
        self.current_category_index: int = 0
        self.compatibility: List[CompatibilityResult] = []

    # Mutations

    def set_use_case(self, template: UseCaseTemplate) -> None:
        self.use_case = template
        self._selected = {}
        self.current_category_index = 0
        self.compatibility = []

    def add_product(self, category_name: str, product: Product) -> None:
        """
        Make `product` the selection for `category_name`, replacing any
        earlier pick. Unknown categories are rejected before anything is
        written.
        """
        if self.use_case is None:
            raise InvariantViolation("no use case installed")
        if self.use_case.category(category_name) is None:
            raise InvariantViolation(
                f"'{category_name}' is not a category of use case '{self.use_case.id}'"
            )
        self._selected[category_name] = product

    def remove_product(self, category_name: str) -> None:
        self._selected.pop(category_name, None)

    def set_current_category_index(self, index: int) -> None:
        # unchecked; step-wise callers validate bounds
        self.current_category_index = index

    def calculate_compatibility(self) -> List[CompatibilityResult]:
        self.compatibility = calculate_compatibility(self.products)
        return self.compatibility

    def reset(self) -> None:
        self.use_case = None
        self._selected = {}
        self.current_category_index = 0
        self.compatibility = []

    # Queries

    def can_proceed_to_next(self) -> bool:
        category = self.current_category
        if category is None:
            return False
        if not category.required:
            return True
        return category.name in self._selected

    @property
    def current_category(self) -> Optional[CategoryDefinition]:
        if self.use_case is None:
            return None
        if not 0 <= self.current_category_index < len(self.use_case.categories):
            return None
        return self.use_case.categories[self.current_category_index]

    @property
    def category_count(self) -> int:
        return len(self.use_case.categories) if self.use_case else 0

    @property
    def is_complete(self) -> bool:
        return self.use_case is not None and self.current_category_index == self.category_count

    @property
    def selected(self) -> Dict[str, Product]:
        """Snapshot of category name -> product, in selection order."""
        return dict(self._selected)

    @property
    def products(self) -> List[Product]:
        return list(self._selected.values())

    def selection_for(self, category_name: str) -> Optional[Product]:
        return self._selected.get(category_name)

    def stack_score(self) -> StackScore:
        return stack_score(self.compatibility)
