"""
Pytest fixtures for the form canvas engine.

This module provides:
1. Small component trees used across the unit tests
2. A deterministic id factory for synthesized containers
3. Settings isolated from the developer's environment
"""

import itertools
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from formcanvas.config import Settings, get_settings  # noqa: E402
from formcanvas.models.contracts.components import (  # noqa: E402
    ColumnContainer,
    LeafNode,
    RowContainer,
)


# ==================== HELPERS ====================


def leaf(node_id: str, component_type: str = "text_input") -> LeafNode:
    return LeafNode(id=node_id, component_type=component_type)


def ids(nodes) -> list[str]:
    """Ids of one level of nodes."""
    return [node.id for node in nodes]


# ==================== FIXTURES ====================


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Ignore FORMCANVAS_* variables and cached settings between tests."""
    for key in list(os.environ):
        if key.startswith("FORMCANVAS_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def id_factory():
    """Deterministic ids: row_1, row_2, text_input_3, ..."""
    counter = itertools.count(1)

    def factory(prefix: str) -> str:
        return f"{prefix}_{next(counter)}"

    return factory


@pytest.fixture
def flat_tree():
    """[A, B, C] at the root."""
    return [leaf("A"), leaf("B"), leaf("C")]


@pytest.fixture
def row_tree():
    """[H, R[X, Y], F]"""
    return [
        leaf("H", "heading"),
        RowContainer(id="R", children=[leaf("X"), leaf("Y")]),
        leaf("F"),
    ]


@pytest.fixture
def full_row_tree():
    """R[X, Y, Z, W] (full at the default capacity of 4) followed by V."""
    return [
        RowContainer(id="R", children=[leaf("X"), leaf("Y"), leaf("Z"), leaf("W")]),
        leaf("V"),
    ]


@pytest.fixture
def nested_tree():
    """[Col[A, R[B, C]], D]"""
    return [
        ColumnContainer(
            id="Col",
            children=[
                leaf("A"),
                RowContainer(id="R", children=[leaf("B"), leaf("C")]),
            ],
        ),
        leaf("D"),
    ]
