"""
Form Canvas Models

Pydantic contracts (component tree, drag payloads, actions):
    from formcanvas.models import LeafNode, RowContainer, InsertAfter
    from formcanvas.models.contracts.components import LeafNode  # Granular access

Geometry value types:
    from formcanvas.models import Point, Rect, HoverTarget

Enums:
    from formcanvas.models import Zone, ApplyOutcome
    from formcanvas.models.enums import Zone
"""

# Component tree
from formcanvas.models.contracts.components import (
    ColumnContainer,
    ComponentNode,
    ComponentTree,
    ContainerNode,
    LayoutHints,
    LeafNode,
    RowContainer,
)

# Drag payloads and actions
from formcanvas.models.contracts.drag import (
    Action,
    AppendToRow,
    DragPayload,
    ExistingItem,
    FormRow,
    InsertAfter,
    InsertBefore,
    InsertInto,
    MoveWithinContainer,
    NewItem,
    Reject,
)

# Enums
from formcanvas.models.enums import (
    ApplyOutcome,
    ClassificationStrategy,
    MissingTargetPolicy,
    NodeKind,
    RejectReason,
    RowSide,
    SessionState,
    Zone,
)

# Geometry
from formcanvas.models.geometry import (
    Ancestry,
    HoverTarget,
    Point,
    Rect,
    ZoneThresholds,
)

__all__ = [
    # Component tree
    "ColumnContainer",
    "ComponentNode",
    "ComponentTree",
    "ContainerNode",
    "LayoutHints",
    "LeafNode",
    "RowContainer",
    # Drag payloads and actions
    "Action",
    "AppendToRow",
    "DragPayload",
    "ExistingItem",
    "FormRow",
    "InsertAfter",
    "InsertBefore",
    "InsertInto",
    "MoveWithinContainer",
    "NewItem",
    "Reject",
    # Enums
    "ApplyOutcome",
    "ClassificationStrategy",
    "MissingTargetPolicy",
    "NodeKind",
    "RejectReason",
    "RowSide",
    "SessionState",
    "Zone",
    # Geometry
    "Ancestry",
    "HoverTarget",
    "Point",
    "Rect",
    "ZoneThresholds",
]
