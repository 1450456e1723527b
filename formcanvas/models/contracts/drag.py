"""
Drag and Drop Contracts

Pydantic models describing what is being dragged (DragPayload) and what the
constraint resolver decided to do with it (Action). Both are discriminated
unions so they round-trip through JSON for renderers that live in another
process.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from formcanvas.models.enums import NodeKind, RejectReason, RowSide


# -----------------------------------------------------------------------------
# Drag Payloads
# -----------------------------------------------------------------------------


class NewItem(BaseModel):
    """An item dragged from the palette; it does not exist in the tree yet."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["new"] = Field(default="new", description="Payload kind")
    component_type: str = Field(min_length=1, description="Palette type to instantiate")
    node_kind: NodeKind = Field(
        default=NodeKind.LEAF, description="Kind of node the palette item creates"
    )
    label: str | None = Field(default=None, description="Initial label")
    props: dict[str, Any] = Field(default_factory=dict, description="Initial properties")

    @property
    def id(self) -> None:
        return None

    @property
    def is_row(self) -> bool:
        return self.node_kind == NodeKind.ROW


class ExistingItem(BaseModel):
    """A node picked up from inside the tree."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["existing"] = Field(default="existing", description="Payload kind")
    id: str = Field(min_length=1, description="Id of the dragged node")
    node_kind: NodeKind = Field(default=NodeKind.LEAF, description="Kind of the dragged node")
    origin_container_path: list[str] = Field(
        default_factory=list,
        description="Container ids from the root down to the node's parent (empty at root)",
    )
    origin_index: int = Field(ge=0, description="Index of the node within its parent")

    @property
    def is_row(self) -> bool:
        return self.node_kind == NodeKind.ROW

    @property
    def origin_container_id(self) -> str | None:
        """Id of the container the node was picked from, None for the root."""
        return self.origin_container_path[-1] if self.origin_container_path else None


DragPayload = Annotated[
    Union[NewItem, ExistingItem],
    Field(discriminator="kind"),
]


# -----------------------------------------------------------------------------
# Actions (output of the constraint resolver)
# -----------------------------------------------------------------------------


class ActionBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def is_reject(self) -> bool:
        return False


class InsertBefore(ActionBase):
    """Place the payload directly above the target, in the target's container."""

    type: Literal["insert_before"] = "insert_before"
    target_id: str


class InsertAfter(ActionBase):
    """Place the payload directly below the target, in the target's container."""

    type: Literal["insert_after"] = "insert_after"
    target_id: str


class InsertInto(ActionBase):
    """Append the payload as the last child of a container (None = canvas root)."""

    type: Literal["insert_into"] = "insert_into"
    container_id: str | None


class FormRow(ActionBase):
    """Replace the target with a new row holding the target and the payload."""

    type: Literal["form_row"] = "form_row"
    target_id: str
    side: RowSide


class AppendToRow(ActionBase):
    """
    Add the payload as a member of an existing row.

    Without an anchor the payload goes to the end of the row (the start when
    side is LEFT). With an anchor it is placed immediately left or right of
    that member.
    """

    type: Literal["append_to_row"] = "append_to_row"
    row_id: str
    anchor_id: str | None = None
    side: RowSide | None = None


class MoveWithinContainer(ActionBase):
    """Stable reorder of one container's children (None addresses the root)."""

    type: Literal["move_within_container"] = "move_within_container"
    container_id: str | None
    from_index: int = Field(ge=0)
    to_index: int = Field(ge=0)


class Reject(ActionBase):
    """The drop is not allowed here."""

    type: Literal["reject"] = "reject"
    reason: RejectReason
    detail: str | None = None

    @property
    def is_reject(self) -> bool:
        return True


Action = Annotated[
    Union[
        InsertBefore,
        InsertAfter,
        InsertInto,
        FormRow,
        AppendToRow,
        MoveWithinContainer,
        Reject,
    ],
    Field(discriminator="type"),
]
