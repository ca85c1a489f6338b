# backend/selection/workflow.py
"""
Step-by-step navigation over a SelectionState.

One category per step; `next` is guarded by can_proceed_to_next and moves
exactly one step, `back` moves one step back or leaves the use case from the
first step. Finishing the last category lands on the results step
(cursor == category count) and computes compatibility.
"""

from __future__ import annotations

from typing import Optional

from ..catalog.models import Product
from ..errors import InvariantViolation
from ..log import get_logger
from ..use_cases import CategoryDefinition, UseCaseTemplate
from .state import SelectionState

logger = get_logger(__name__)


class StackWorkflow:
    def __init__(self, state: Optional[SelectionState] = None) -> None:
        self.state = state or SelectionState()

    def start(self, template: UseCaseTemplate) -> None:
        self.state.set_use_case(template)
        logger.debug(f"Started use case {template.id}")

    def _require_category(self) -> CategoryDefinition:
        category = self.state.current_category
        if category is None:
            raise InvariantViolation("no category is active at the current step")
        return category

    def toggle(self, product: Product) -> bool:
        """
        Select `product` for the active category, or deselect it if it is
        already the selection. Returns True when the product ends up selected.
        """
        category = self._require_category()
        current = self.state.selection_for(category.name)
        if current is not None and current.id == product.id:
            self.state.remove_product(category.name)
            return False
        self.state.add_product(category.name, product)
        return True

    def next(self) -> None:
        if not self.state.can_proceed_to_next():
            category = self.state.current_category
            name = category.name if category else "<none>"
            raise InvariantViolation(f"cannot advance past category '{name}'")
        finishing = self.is_last_category
        self.state.set_current_category_index(self.state.current_category_index + 1)
        if finishing:
            self.state.calculate_compatibility()

    def back(self) -> None:
        if self.state.use_case is None:
            return
        if self.state.current_category_index > 0:
            self.state.set_current_category_index(self.state.current_category_index - 1)
        else:
            self.state.reset()

    def jump_to(self, index: int) -> None:
        if self.state.use_case is None:
            raise InvariantViolation("no use case installed")
        if not 0 <= index < self.state.category_count:
            raise InvariantViolation(
                f"category index {index} out of range 0..{self.state.category_count - 1}"
            )
        self.state.set_current_category_index(index)

    @property
    def step(self) -> int:
        """1-based step number, capped at the category count on the results step."""
        return min(self.state.current_category_index + 1, self.state.category_count)

    @property
    def total_steps(self) -> int:
        return self.state.category_count

    @property
    def is_last_category(self) -> bool:
        return (
            self.state.use_case is not None
            and self.state.current_category_index == self.state.category_count - 1
        )
