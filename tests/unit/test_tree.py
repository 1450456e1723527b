# tests/unit/test_tree.py
"""Unit tests for component tree traversal, flattening and validation."""
import pytest

from formcanvas.core.exceptions import MalformedTreeError
from formcanvas.models.contracts.components import RowContainer
from formcanvas.models.enums import NodeKind
from formcanvas.services.container_policy import ContainerPolicy
from tests.conftest import ids, leaf


def test_walk_is_depth_first_preorder(nested_tree):
    from formcanvas.services.tree import collect_ids

    assert collect_ids(nested_tree) == ["Col", "A", "R", "B", "C", "D"]


def test_locate_reports_parent_and_index(nested_tree):
    from formcanvas.services.tree import locate

    location = locate(nested_tree, "C")

    assert location.index == 1
    assert location.parent_id == "R"
    assert location.ancestry.ids == ["Col", "R"]


def test_locate_root_level(nested_tree):
    from formcanvas.services.tree import locate

    location = locate(nested_tree, "D")

    assert location.parent is None
    assert location.parent_id is None
    assert location.index == 1


def test_find_missing_node(nested_tree):
    from formcanvas.services.tree import ancestry_of, find_node, locate

    assert locate(nested_tree, "ghost") is None
    assert find_node(nested_tree, "ghost") is None
    assert ancestry_of(nested_tree, "ghost") is None


def test_is_descendant(nested_tree):
    from formcanvas.services.tree import is_descendant

    assert is_descendant(nested_tree, "Col", "B") is True
    assert is_descendant(nested_tree, "R", "C") is True
    assert is_descendant(nested_tree, "R", "A") is False
    assert is_descendant(nested_tree, "B", "B") is False
    assert is_descendant(nested_tree, "ghost", "B") is False


def test_subtree_ids(nested_tree):
    from formcanvas.services.tree import subtree_ids

    assert subtree_ids(nested_tree[0]) == {"Col", "A", "R", "B", "C"}
    assert subtree_ids(nested_tree[1]) == {"D"}


def test_existing_item_payload(nested_tree):
    from formcanvas.services.tree import existing_item_payload

    payload = existing_item_payload(nested_tree, "R")

    assert payload.id == "R"
    assert payload.node_kind == NodeKind.ROW
    assert payload.origin_container_path == ["Col"]
    assert payload.origin_container_id == "Col"
    assert payload.origin_index == 1
    assert existing_item_payload(nested_tree, "ghost") is None


def test_flatten_tree(nested_tree):
    """Flatten nested containers: column > row > leaves."""
    from formcanvas.services.tree import flatten_tree

    rows = flatten_tree(nested_tree)

    # Col, A, R, B, C, D
    assert len(rows) == 6

    col_row = next(r for r in rows if r["id"] == "Col")
    row_row = next(r for r in rows if r["id"] == "R")
    leaf_row = next(r for r in rows if r["id"] == "C")

    assert col_row["parent_id"] is None
    assert col_row["kind"] == "column"
    assert col_row["component_type"] is None
    assert row_row["parent_id"] == "Col"
    assert row_row["order"] == 1
    assert leaf_row["parent_id"] == "R"
    assert leaf_row["depth"] == 2
    assert leaf_row["component_type"] == "text_input"


def test_replace_node_with_several(flat_tree):
    from formcanvas.services.tree import replace_node

    updated = replace_node(flat_tree, "B", [leaf("X"), leaf("Y")])

    assert ids(updated) == ["A", "X", "Y", "C"]
    assert ids(flat_tree) == ["A", "B", "C"]


def test_replace_missing_node(flat_tree):
    from formcanvas.services.tree import replace_node

    assert replace_node(flat_tree, "ghost", []) is None


def test_update_children_of_leaf_is_none(flat_tree):
    from formcanvas.services.tree import update_children

    assert update_children(flat_tree, "A", lambda children: children) is None


def test_remove_node_shares_untouched_subtrees(nested_tree):
    from formcanvas.services.tree import remove_node

    updated, removed = remove_node(nested_tree, "A")

    assert removed.id == "A"
    assert ids(updated[0].children) == ["R"]
    assert updated[0].children[0] is nested_tree[0].children[1]
    assert updated[1] is nested_tree[1]


def test_parse_tree_routes_by_kind():
    from formcanvas.services.tree import parse_tree

    tree = parse_tree(
        [
            {"id": "h", "kind": "leaf", "component_type": "heading", "label": "Title"},
            {
                "id": "r",
                "kind": "row",
                "children": [
                    {"id": "a", "kind": "leaf", "component_type": "text_input"},
                    {"id": "c", "kind": "column", "children": []},
                ],
            },
        ]
    )

    assert tree[0].__class__.__name__ == "LeafNode"
    assert tree[1].__class__.__name__ == "RowContainer"
    assert tree[1].children[1].__class__.__name__ == "ColumnContainer"


# ============================================================================
# validate_tree
# ============================================================================


class TestValidateTree:
    """Tests for structural checks on trees handed to the engine."""

    def test_valid_tree_passes(self, nested_tree):
        from formcanvas.services.tree import validate_tree

        validate_tree(nested_tree)

    def test_duplicate_ids(self):
        from formcanvas.services.tree import validate_tree

        tree = [leaf("A"), RowContainer(id="R", children=[leaf("A")])]

        with pytest.raises(MalformedTreeError) as exc_info:
            validate_tree(tree)

        assert exc_info.value.node_id == "A"

    def test_row_inside_row(self):
        from formcanvas.services.tree import validate_tree

        tree = [RowContainer(id="R", children=[RowContainer(id="R2")])]

        with pytest.raises(MalformedTreeError) as exc_info:
            validate_tree(tree)

        assert exc_info.value.node_id == "R2"

    def test_over_capacity_row(self, full_row_tree):
        from formcanvas.services.tree import validate_tree

        with pytest.raises(MalformedTreeError):
            validate_tree(full_row_tree, ContainerPolicy(max_row_children=3))

    def test_nested_rows_allowed_by_policy(self):
        from formcanvas.services.tree import validate_tree

        tree = [RowContainer(id="R", children=[RowContainer(id="R2")])]

        validate_tree(tree, ContainerPolicy(row_may_nest_row=True))
