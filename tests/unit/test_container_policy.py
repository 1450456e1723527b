# tests/unit/test_container_policy.py
"""Unit tests for row nesting and capacity rules."""
import pytest

from formcanvas.models.contracts.components import RowContainer
from formcanvas.models.enums import NodeKind
from formcanvas.services.container_policy import ContainerPolicy
from tests.conftest import leaf


def test_row_capacity_at_default_limit():
    policy = ContainerPolicy()
    row = RowContainer(id="R", children=[leaf("A"), leaf("B"), leaf("C")])

    assert policy.row_has_capacity(row) is True
    assert policy.row_has_capacity(row, incoming=2) is False
    assert policy.row_has_capacity(row, incoming=0) is True


def test_non_rows_have_no_capacity_limit():
    from formcanvas.models.contracts.components import ColumnContainer

    column = ColumnContainer(id="C", children=[leaf(str(index)) for index in range(20)])

    assert ContainerPolicy().row_has_capacity(column) is True


@pytest.mark.parametrize(
    "parent, child, allowed",
    [
        (None, NodeKind.ROW, True),
        (None, NodeKind.LEAF, True),
        (NodeKind.COLUMN, NodeKind.ROW, True),
        (NodeKind.ROW, NodeKind.COLUMN, True),
        (NodeKind.ROW, NodeKind.LEAF, True),
        (NodeKind.ROW, NodeKind.ROW, False),
        (NodeKind.LEAF, NodeKind.LEAF, False),
    ],
)
def test_may_contain(parent, child, allowed):
    assert ContainerPolicy().may_contain(parent, child) is allowed


def test_row_in_row_can_be_allowed():
    assert ContainerPolicy(row_may_nest_row=True).may_contain(NodeKind.ROW, NodeKind.ROW) is True


def test_row_needs_room_for_two():
    with pytest.raises(ValueError):
        ContainerPolicy(max_row_children=1)
