"""
Container Policy

Constants and predicates for row/column nesting and capacity. The constraint
resolver and the tree mutator both consult a ContainerPolicy.
"""

from __future__ import annotations

from dataclasses import dataclass

from formcanvas.config import Settings, get_settings
from formcanvas.models.contracts.components import ComponentNode
from formcanvas.models.enums import MissingTargetPolicy, NodeKind

DEFAULT_MAX_ROW_CHILDREN = 4


@dataclass(frozen=True)
class ContainerPolicy:
    """Layout rules for a canvas."""

    max_row_children: int = DEFAULT_MAX_ROW_CHILDREN
    row_may_nest_row: bool = False
    row_moves_vertically_only: bool = True
    dissolve_single_child_rows: bool = True
    missing_target: MissingTargetPolicy = MissingTargetPolicy.REJECT

    def __post_init__(self) -> None:
        if self.max_row_children < 2:
            raise ValueError("a row needs room for at least two children")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ContainerPolicy:
        settings = settings or get_settings()
        return cls(
            max_row_children=settings.max_row_children,
            dissolve_single_child_rows=settings.dissolve_single_child_rows,
            missing_target=MissingTargetPolicy(settings.missing_target_policy),
        )

    def row_has_capacity(self, row: ComponentNode, incoming: int = 1) -> bool:
        """True if ``incoming`` more children fit into ``row``."""
        if not row.is_row:
            return True
        return len(row.children) + incoming <= self.max_row_children

    def may_contain(self, parent_kind: NodeKind | None, child_kind: NodeKind) -> bool:
        """
        Whether a node of ``child_kind`` may be a direct child of ``parent_kind``.

        ``parent_kind`` None stands for the canvas root, which accepts anything.
        """
        if parent_kind is None:
            return True
        if parent_kind == NodeKind.LEAF:
            return False
        if parent_kind == NodeKind.ROW and child_kind == NodeKind.ROW:
            return self.row_may_nest_row
        return True


DEFAULT_POLICY = ContainerPolicy()
