"""
Drop Feedback

Renderer-independent hint for the action a drop would perform: an indicator
glyph, a CSS class the canvas can toggle, and a short description.
"""

from dataclasses import dataclass

from formcanvas.models.contracts.drag import (
    Action,
    AppendToRow,
    FormRow,
    InsertAfter,
    InsertBefore,
    InsertInto,
    MoveWithinContainer,
    Reject,
)
from formcanvas.models.enums import RejectReason, RowSide


@dataclass(frozen=True)
class DropFeedback:
    """What the canvas shows while hovering."""

    indicator: str
    css_class: str
    description: str
    accepted: bool = True


REJECT_DESCRIPTIONS: dict[RejectReason, str] = {
    RejectReason.SELF_DROP: "Cannot drop a component into itself",
    RejectReason.CAPACITY_EXCEEDED: "This row is full",
    RejectReason.INVALID_NESTING: "Rows cannot be placed inside rows",
    RejectReason.NO_TARGET: "Nothing to drop onto here",
}


def _side_feedback(side: RowSide | None) -> DropFeedback:
    if side == RowSide.LEFT:
        return DropFeedback("←", "drop-left", "Place side-by-side (left)")
    return DropFeedback("→", "drop-right", "Place side-by-side (right)")


def describe_action(action: Action | None) -> DropFeedback:
    """Feedback for ``action``; None means the pointer is over no drop target."""
    if action is None:
        return DropFeedback("", "drop-none", "Drop here", accepted=False)

    if isinstance(action, Reject):
        return DropFeedback(
            "⊘",
            "drop-rejected",
            action.detail or REJECT_DESCRIPTIONS[action.reason],
            accepted=False,
        )
    if isinstance(action, InsertBefore):
        return DropFeedback("↑", "drop-before", "Insert above")
    if isinstance(action, InsertAfter):
        return DropFeedback("↓", "drop-after", "Insert below")
    if isinstance(action, InsertInto):
        if action.container_id is None:
            return DropFeedback("⊙", "drop-center", "Add to canvas")
        return DropFeedback("⊕", "drop-inside", "Add to container")
    if isinstance(action, (FormRow, AppendToRow)):
        return _side_feedback(action.side)
    if isinstance(action, MoveWithinContainer):
        return DropFeedback("↕", "drop-reorder", f"Move to position {action.to_index + 1}")

    raise TypeError(f"Unsupported action: {action!r}")
