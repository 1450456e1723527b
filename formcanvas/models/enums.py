"""
Enumeration types used across the drag-and-drop engine.

All enums subclass str so they serialize cleanly inside pydantic contracts
and compare equal to their wire values.
"""

from enum import Enum


class NodeKind(str, Enum):
    """Structural kind of a component node"""
    LEAF = "leaf"
    ROW = "row"
    COLUMN = "column"


class Zone(str, Enum):
    """Region of a drop target the pointer occupies"""
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class RowSide(str, Enum):
    """Side of the target a dragged item lands on when forming a row"""
    LEFT = "left"
    RIGHT = "right"


class ApplyOutcome(str, Enum):
    """Result of applying an action to a component tree"""
    APPLIED = "applied"
    TARGET_NOT_FOUND = "target_not_found"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    SELF_DROP_REJECTED = "self_drop_rejected"
    INVALID_NESTING = "invalid_nesting"
    CANCELLED = "cancelled"


class RejectReason(str, Enum):
    """Why the constraint resolver refused a drop"""
    SELF_DROP = "self-drop"
    CAPACITY_EXCEEDED = "capacity-exceeded"
    INVALID_NESTING = "invalid-nesting"
    NO_TARGET = "no-target"


class SessionState(str, Enum):
    """Drag session lifecycle states"""
    IDLE = "idle"
    ARMED = "armed"
    DRAGGING = "dragging"
    HOVERING = "hovering"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


class MissingTargetPolicy(str, Enum):
    """Fallback for inserts whose target id no longer exists"""
    REJECT = "reject"
    APPEND_TO_ROOT = "append-to-root"


class ClassificationStrategy(str, Enum):
    """How corner regions are disambiguated by the zone classifier"""
    VERTICAL_FIRST = "vertical-first"
    DOMINANT_AXIS = "dominant-axis"


# Rejection reasons map one-to-one onto apply outcomes
REJECT_OUTCOMES: dict[RejectReason, ApplyOutcome] = {
    RejectReason.SELF_DROP: ApplyOutcome.SELF_DROP_REJECTED,
    RejectReason.CAPACITY_EXCEEDED: ApplyOutcome.CAPACITY_EXCEEDED,
    RejectReason.INVALID_NESTING: ApplyOutcome.INVALID_NESTING,
    RejectReason.NO_TARGET: ApplyOutcome.TARGET_NOT_FOUND,
}
