"""
Node Factory

Builds tree nodes for palette drops and ids for synthesized containers.
"""

from collections.abc import Callable
from uuid import uuid4

from formcanvas.models.contracts.components import (
    ColumnContainer,
    ComponentNode,
    LeafNode,
    RowContainer,
)
from formcanvas.models.contracts.drag import NewItem
from formcanvas.models.enums import NodeKind

IdFactory = Callable[[str], str]
NodeFactory = Callable[[NewItem, IdFactory], ComponentNode]


def default_id_factory(prefix: str) -> str:
    """Generate a short unique id such as ``row_3f2a9c1d``."""
    return f"{prefix}_{uuid4().hex[:8]}"


def create_node(payload: NewItem, id_factory: IdFactory = default_id_factory) -> ComponentNode:
    """Instantiate the node a palette item stands for."""
    if payload.node_kind == NodeKind.ROW:
        return RowContainer(id=id_factory("row"))
    if payload.node_kind == NodeKind.COLUMN:
        return ColumnContainer(id=id_factory("column"))
    return LeafNode(
        id=id_factory(payload.component_type),
        component_type=payload.component_type,
        label=payload.label,
        props=dict(payload.props),
    )
