"""
Component Tree Traversal

One generic traversal shared by every tree operation:
- Walk / find / locate nodes by id
- Rebuild the path to a container while copying only what changes
- Remove and replace nodes
- Flatten the nested tree to rows (used for validation and snapshots)

All functions are pure. Untouched subtrees are shared between the input and
the output tree; nodes on the path to a change are re-created with
model_copy(), so no node reachable from the input is ever modified.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from pydantic import TypeAdapter

from formcanvas.core.exceptions import MalformedTreeError
from formcanvas.models.contracts.components import ComponentNode, ComponentTree
from formcanvas.models.contracts.drag import ExistingItem
from formcanvas.models.enums import NodeKind
from formcanvas.models.geometry import Ancestry
from formcanvas.services.container_policy import DEFAULT_POLICY, ContainerPolicy

logger = logging.getLogger(__name__)

ChildrenTransform = Callable[[list[ComponentNode]], list[ComponentNode]]


@dataclass(frozen=True)
class NodeLocation:
    """Where a node lives: its parent (None for the root level) and index."""

    node: ComponentNode
    index: int
    path: list[ComponentNode] = field(default_factory=list)

    @property
    def parent(self) -> ComponentNode | None:
        return self.path[-1] if self.path else None

    @property
    def parent_id(self) -> str | None:
        parent = self.parent
        return parent.id if parent is not None else None

    @property
    def ancestry(self) -> Ancestry:
        return Ancestry(parent_chain=list(self.path))


# =============================================================================
# Parsing
# =============================================================================


def parse_tree(data: list[dict[str, Any]]) -> ComponentTree:
    """
    Validate raw JSON-like data into a component tree.

    Raises:
        ValidationError: If a node fails Pydantic validation (unknown kind,
            a leaf carrying children, ...).
    """
    adapter = TypeAdapter(ComponentTree)
    return adapter.validate_python(data)


# =============================================================================
# Read-only traversal
# =============================================================================


def child_nodes(node: ComponentNode) -> list[ComponentNode]:
    """Children of a container, empty list for a leaf."""
    if node.is_container:
        return node.children
    return []


def walk(tree: ComponentTree, _path: list[ComponentNode] | None = None) -> Iterator[NodeLocation]:
    """Depth-first, pre-order walk yielding the location of every node."""
    path = _path or []
    for index, node in enumerate(tree):
        yield NodeLocation(node=node, index=index, path=path)
        children = child_nodes(node)
        if children:
            yield from walk(children, [*path, node])


def locate(tree: ComponentTree, node_id: str) -> NodeLocation | None:
    """Find where ``node_id`` lives, or None if it is not in the tree."""
    for location in walk(tree):
        if location.node.id == node_id:
            return location
    return None


def find_node(tree: ComponentTree, node_id: str) -> ComponentNode | None:
    location = locate(tree, node_id)
    return location.node if location else None


def ancestry_of(tree: ComponentTree, node_id: str) -> Ancestry | None:
    location = locate(tree, node_id)
    return location.ancestry if location else None


def subtree_ids(node: ComponentNode) -> set[str]:
    """Ids of ``node`` and everything below it."""
    ids = {node.id}
    for location in walk(child_nodes(node)):
        ids.add(location.node.id)
    return ids


def collect_ids(tree: ComponentTree) -> list[str]:
    """All ids in walk order, duplicates included."""
    return [location.node.id for location in walk(tree)]


def is_descendant(tree: ComponentTree, ancestor_id: str, node_id: str) -> bool:
    """True if ``node_id`` sits strictly below ``ancestor_id``."""
    ancestor = find_node(tree, ancestor_id)
    if ancestor is None or ancestor_id == node_id:
        return False
    return node_id in subtree_ids(ancestor)


def existing_item_payload(tree: ComponentTree, node_id: str) -> ExistingItem | None:
    """Build the drag payload for picking ``node_id`` up from the tree."""
    location = locate(tree, node_id)
    if location is None:
        return None
    return ExistingItem(
        id=node_id,
        node_kind=NodeKind(location.node.kind),
        origin_container_path=[node.id for node in location.path],
        origin_index=location.index,
    )


# =============================================================================
# Tree Flattening (nested -> rows)
# =============================================================================


def flatten_tree(tree: ComponentTree) -> list[dict[str, Any]]:
    """
    Flatten the nested tree into one dict per node.

    Each row holds:
    - id: Node id
    - parent_id: Parent node id (None for root level)
    - kind: "leaf", "row" or "column"
    - component_type: Palette type for leaves, None for containers
    - order: Index among siblings
    - depth: Number of enclosing containers
    """
    rows: list[dict[str, Any]] = []
    for location in walk(tree):
        node = location.node
        rows.append(
            {
                "id": node.id,
                "parent_id": location.parent_id,
                "kind": node.kind,
                "component_type": getattr(node, "component_type", None),
                "order": location.index,
                "depth": len(location.path),
            }
        )
    return rows


# =============================================================================
# Copy-on-write rebuilding
# =============================================================================


def update_children(
    tree: ComponentTree,
    container_id: str | None,
    transform: ChildrenTransform,
) -> ComponentTree | None:
    """
    Return a new tree whose ``container_id`` children were passed through ``transform``.

    ``container_id`` None addresses the root level. Returns None when the
    container is missing or is not a container. ``transform`` receives a copy
    of the children list and may modify it freely.
    """
    if container_id is None:
        return transform(list(tree))
    return _rebuild(tree, container_id, transform)


def _rebuild(
    nodes: list[ComponentNode],
    container_id: str,
    transform: ChildrenTransform,
) -> list[ComponentNode] | None:
    for index, node in enumerate(nodes):
        if node.id == container_id:
            if not node.is_container:
                return None
            updated = node.model_copy(update={"children": transform(list(node.children))})
            return [*nodes[:index], updated, *nodes[index + 1:]]

        children = child_nodes(node)
        if children:
            rebuilt = _rebuild(children, container_id, transform)
            if rebuilt is not None:
                updated = node.model_copy(update={"children": rebuilt})
                return [*nodes[:index], updated, *nodes[index + 1:]]
    return None


def replace_node(
    tree: ComponentTree,
    node_id: str,
    replacements: list[ComponentNode],
) -> ComponentTree | None:
    """Swap ``node_id`` for zero or more nodes at the same position."""
    location = locate(tree, node_id)
    if location is None:
        return None

    def splice(children: list[ComponentNode]) -> list[ComponentNode]:
        children[location.index:location.index + 1] = replacements
        return children

    return update_children(tree, location.parent_id, splice)


def remove_node(tree: ComponentTree, node_id: str) -> tuple[ComponentTree, ComponentNode | None]:
    """Remove ``node_id`` wherever it lives. Returns (new tree, removed node)."""
    location = locate(tree, node_id)
    if location is None:
        return tree, None
    updated = replace_node(tree, node_id, [])
    if updated is None:
        return tree, None
    return updated, location.node


# =============================================================================
# Validation
# =============================================================================


def validate_tree(tree: ComponentTree, policy: ContainerPolicy = DEFAULT_POLICY) -> None:
    """
    Check the structural invariants of a tree handed to the engine.

    Raises:
        MalformedTreeError: On duplicate ids, a row directly inside a row, or a
            row holding more children than the policy allows.
    """
    seen: set[str] = set()
    for location in walk(tree):
        node = location.node
        if node.id in seen:
            raise MalformedTreeError(f"Duplicate node id '{node.id}'", node_id=node.id)
        seen.add(node.id)

        parent = location.parent
        parent_kind = NodeKind(parent.kind) if parent is not None else None
        if not policy.may_contain(parent_kind, NodeKind(node.kind)):
            raise MalformedTreeError(
                f"Node '{node.id}' ({node.kind}) cannot be a direct child of '{parent.id}'",
                node_id=node.id,
            )

        if node.is_row and len(node.children) > policy.max_row_children:
            raise MalformedTreeError(
                f"Row '{node.id}' holds {len(node.children)} children "
                f"(max {policy.max_row_children})",
                node_id=node.id,
            )
