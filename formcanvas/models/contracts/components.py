"""
Form Canvas Component Definitions

Core types for the recursive layout tree edited by the drag-and-drop engine.

This module is the single source of truth for:
- Leaf components (inputs, selects, headings, ...)
- Layout containers (RowContainer, ColumnContainer)
- The ComponentNode discriminated union and the ComponentTree alias

Nodes are immutable. Tree mutations build new nodes with model_copy() and
share untouched subtrees with the input tree.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# -----------------------------------------------------------------------------
# Literal Types
# -----------------------------------------------------------------------------

ComponentWidth = Literal["auto", "full", "1/2", "1/3", "1/4", "2/3", "3/4"]

LayoutAlignment = Literal["start", "center", "end", "stretch"]

# Palette items known to the builder. Unknown types are still accepted so that
# embedding applications can register their own components.
KNOWN_COMPONENT_TYPES = frozenset(
    [
        "heading",
        "text",
        "divider",
        "text_input",
        "email_input",
        "number_input",
        "textarea",
        "rich_text",
        "select",
        "multi_select",
        "checkbox",
        "radio_group",
        "date_picker",
        "file_upload",
        "signature",
        "button",
    ]
)


# -----------------------------------------------------------------------------
# Shared Supporting Types
# -----------------------------------------------------------------------------


class LayoutHints(BaseModel):
    """Optional sizing hints honoured by the renderer."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: ComponentWidth | None = Field(default=None, description="Component width")
    alignment: LayoutAlignment | None = Field(
        default=None, description="Cross-axis alignment"
    )


# -----------------------------------------------------------------------------
# Node Base (shared fields for all nodes)
# -----------------------------------------------------------------------------


class NodeBase(BaseModel):
    """Base fields shared by all nodes."""

    model_config = ConfigDict(extra="forbid", frozen=True)  # Reject unknown fields

    id: str = Field(min_length=1, description="Unique node identifier")
    layout_hints: LayoutHints = Field(
        default_factory=LayoutHints, description="Renderer sizing hints"
    )

    @property
    def is_container(self) -> bool:
        return False

    @property
    def is_row(self) -> bool:
        return False


# -----------------------------------------------------------------------------
# Leaf Components
# -----------------------------------------------------------------------------


class LeafNode(NodeBase):
    """A form component that never has children (input, select, heading...)."""

    kind: Literal["leaf"] = Field(default="leaf", description="Node kind")
    component_type: str = Field(min_length=1, description="Palette type, e.g. 'text_input'")
    label: str | None = Field(default=None, description="Display label")
    props: dict[str, Any] = Field(
        default_factory=dict, description="Component specific properties"
    )


# -----------------------------------------------------------------------------
# Layout Containers (nodes with children)
# Note: These use the forward reference "ComponentNode" which is resolved at
# the end of the file via model_rebuild() calls.
# -----------------------------------------------------------------------------


class RowContainer(NodeBase):
    """Row layout container - lays out its children horizontally."""

    kind: Literal["row"] = Field(default="row", description="Node kind")
    children: list["ComponentNode"] = Field(
        default_factory=list, description="Child nodes, left to right"
    )

    @property
    def is_container(self) -> bool:
        return True

    @property
    def is_row(self) -> bool:
        return True


class ColumnContainer(NodeBase):
    """Column layout container - stacks its children vertically."""

    kind: Literal["column"] = Field(default="column", description="Node kind")
    children: list["ComponentNode"] = Field(
        default_factory=list, description="Child nodes, top to bottom"
    )

    @property
    def is_container(self) -> bool:
        return True


# -----------------------------------------------------------------------------
# Discriminated Union
# -----------------------------------------------------------------------------

ComponentNode = Annotated[
    Union[LeafNode, RowContainer, ColumnContainer],
    Field(discriminator="kind"),
]

ContainerNode = Union[RowContainer, ColumnContainer]

# The canvas root is an ordered list of nodes laid out as a column
ComponentTree = list[ComponentNode]


RowContainer.model_rebuild()
ColumnContainer.model_rebuild()
