"""Data models for tree mutation results."""

from dataclasses import dataclass

from formcanvas.models.contracts.components import ComponentTree
from formcanvas.models.enums import ApplyOutcome


@dataclass(frozen=True)
class ApplyResult:
    """Result of applying a mutation to a component tree."""

    tree: ComponentTree
    outcome: ApplyOutcome
    changed: bool = False  # True only if ``tree`` differs from the input tree
    reason: str | None = None  # Human readable explanation for non-applied outcomes
    node_id: str | None = None  # Id of the inserted or moved node

    @property
    def applied(self) -> bool:
        return self.outcome == ApplyOutcome.APPLIED
