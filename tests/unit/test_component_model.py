# tests/unit/test_component_model.py
"""Unit tests for the component tree, payload and action contracts."""
import pytest
from pydantic import ValidationError


def test_row_container_accepts_children():
    """Row container should accept a children list."""
    from formcanvas.models.contracts.components import LeafNode, RowContainer

    field = LeafNode(id="f1", component_type="text_input", label="Name")
    row = RowContainer(id="row1", children=[field])

    assert row.kind == "row"
    assert row.is_row is True
    assert row.is_container is True
    assert len(row.children) == 1
    assert row.children[0].id == "f1"


def test_leaf_rejects_children():
    """Leaf nodes should reject a children field."""
    from formcanvas.models.contracts.components import LeafNode

    with pytest.raises(ValidationError) as exc_info:
        LeafNode(id="f1", component_type="select", children=[])  # type: ignore[call-arg]

    assert "children" in str(exc_info.value).lower() or "extra" in str(exc_info.value).lower()


def test_leaf_requires_id_and_type():
    from formcanvas.models.contracts.components import LeafNode

    with pytest.raises(ValidationError):
        LeafNode(id="", component_type="select")

    with pytest.raises(ValidationError):
        LeafNode(id="f1")  # type: ignore[call-arg]


def test_nodes_are_immutable():
    from formcanvas.models.contracts.components import LeafNode

    node = LeafNode(id="f1", component_type="checkbox")

    with pytest.raises(ValidationError):
        node.label = "Changed"


def test_discriminated_union_routes_by_kind():
    """ComponentNode union should route to the correct model by kind."""
    from pydantic import TypeAdapter
    from formcanvas.models.contracts.components import ComponentNode

    adapter = TypeAdapter(ComponentNode)

    column = adapter.validate_python(
        {
            "id": "c1",
            "kind": "column",
            "children": [{"id": "f1", "kind": "leaf", "component_type": "textarea"}],
        }
    )
    assert column.__class__.__name__ == "ColumnContainer"
    assert column.children[0].__class__.__name__ == "LeafNode"

    with pytest.raises(ValidationError):
        adapter.validate_python({"id": "x", "kind": "grid"})


def test_layout_hints():
    from formcanvas.models.contracts.components import LayoutHints, LeafNode

    node = LeafNode(
        id="f1",
        component_type="text_input",
        layout_hints=LayoutHints(width="1/2", alignment="start"),
    )
    assert node.layout_hints.width == "1/2"

    with pytest.raises(ValidationError):
        LayoutHints(width="5/7")  # type: ignore[arg-type]


def test_tree_round_trips_through_json():
    from pydantic import TypeAdapter
    from formcanvas.models.contracts.components import (
        ComponentTree,
        LeafNode,
        RowContainer,
    )

    tree = [
        RowContainer(
            id="r1",
            children=[
                LeafNode(id="a", component_type="text_input", props={"required": True}),
                LeafNode(id="b", component_type="date_picker"),
            ],
        )
    ]
    adapter = TypeAdapter(ComponentTree)

    restored = adapter.validate_json(adapter.dump_json(tree))

    assert [node.model_dump() for node in restored] == [node.model_dump() for node in tree]


# ============================================================================
# Drag payloads
# ============================================================================


def test_new_item_payload():
    from formcanvas.models.contracts.drag import NewItem
    from formcanvas.models.enums import NodeKind

    item = NewItem(component_type="select")

    assert item.kind == "new"
    assert item.id is None
    assert item.node_kind == NodeKind.LEAF
    assert item.is_row is False
    assert NewItem(component_type="horizontal_layout", node_kind="row").is_row is True


def test_existing_item_origin():
    from formcanvas.models.contracts.drag import ExistingItem

    item = ExistingItem(id="f1", origin_container_path=["c1", "r1"], origin_index=2)

    assert item.origin_container_id == "r1"
    assert ExistingItem(id="f1", origin_index=0).origin_container_id is None

    with pytest.raises(ValidationError):
        ExistingItem(id="f1", origin_index=-1)


def test_payload_union_routes_by_kind():
    from pydantic import TypeAdapter
    from formcanvas.models.contracts.drag import DragPayload

    adapter = TypeAdapter(DragPayload)

    new = adapter.validate_python({"kind": "new", "component_type": "button"})
    existing = adapter.validate_python({"kind": "existing", "id": "f1", "origin_index": 0})

    assert new.__class__.__name__ == "NewItem"
    assert existing.__class__.__name__ == "ExistingItem"


# ============================================================================
# Actions
# ============================================================================


def test_action_union_routes_by_type():
    from pydantic import TypeAdapter
    from formcanvas.models.contracts.drag import Action
    from formcanvas.models.enums import RejectReason, RowSide

    adapter = TypeAdapter(Action)

    form_row = adapter.validate_python({"type": "form_row", "target_id": "a", "side": "left"})
    reject = adapter.validate_python({"type": "reject", "reason": "capacity-exceeded"})
    root = adapter.validate_python({"type": "insert_into", "container_id": None})

    assert form_row.side == RowSide.LEFT
    assert form_row.is_reject is False
    assert reject.reason == RejectReason.CAPACITY_EXCEEDED
    assert reject.is_reject is True
    assert root.container_id is None


def test_move_within_container_rejects_negative_index():
    from formcanvas.models.contracts.drag import MoveWithinContainer

    with pytest.raises(ValidationError):
        MoveWithinContainer(container_id=None, from_index=-1, to_index=0)
