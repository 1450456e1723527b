"""
Tree Mutator

Pure tree transforms applying a resolved Action to a component tree:
- insert_before / insert_after / insert_into
- form_row / append_to_row
- extract_node / dissolve_row
- move_within_container
- apply (dispatch + move = extract followed by insert)

Every function returns an ApplyResult. The input tree is never modified; when
an operation is refused the very same tree object is returned with
changed=False and the matching outcome.
"""

import logging
from dataclasses import replace

from formcanvas.core.exceptions import MalformedTreeError
from formcanvas.models.contracts.components import ComponentNode, ComponentTree, RowContainer
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
    Reject,
)
from formcanvas.models.enums import (
    REJECT_OUTCOMES,
    ApplyOutcome,
    MissingTargetPolicy,
    NodeKind,
    RowSide,
)
from formcanvas.services.container_policy import DEFAULT_POLICY, ContainerPolicy
from formcanvas.services.models import ApplyResult
from formcanvas.services.node_factory import (
    IdFactory,
    NodeFactory,
    create_node,
    default_id_factory,
)
from formcanvas.services.tree import (
    collect_ids,
    find_node,
    locate,
    remove_node,
    replace_node,
    subtree_ids,
    update_children,
)

logger = logging.getLogger(__name__)

# Attempts at drawing an unused id before giving up
MAX_ID_ATTEMPTS = 32


# =============================================================================
# Shared helpers
# =============================================================================


def _ensure_fresh_ids(tree: ComponentTree, node: ComponentNode) -> None:
    """Inserting ``node`` must not duplicate an id already in ``tree``."""
    clash = subtree_ids(node) & set(collect_ids(tree))
    if clash:
        raise MalformedTreeError(
            f"Cannot insert '{node.id}': id(s) already in tree: {sorted(clash)}",
            node_id=node.id,
        )


def _fresh_id(tree: ComponentTree, taken: set[str], id_factory: IdFactory, prefix: str) -> str:
    existing = set(collect_ids(tree)) | taken
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = id_factory(prefix)
        if candidate not in existing:
            return candidate
    raise MalformedTreeError(f"Id factory kept returning ids already in use (prefix '{prefix}')")


def _refused(tree: ComponentTree, outcome: ApplyOutcome, reason: str) -> ApplyResult:
    logger.info(f"Mutation refused ({outcome.value}): {reason}")
    return ApplyResult(tree=tree, outcome=outcome, changed=False, reason=reason)


def _missing_target(
    tree: ComponentTree,
    node: ComponentNode,
    target_id: str,
    missing: MissingTargetPolicy,
) -> ApplyResult:
    reason = f"Target '{target_id}' not found"
    if missing == MissingTargetPolicy.APPEND_TO_ROOT:
        logger.warning(f"{reason}, appending '{node.id}' at the root level")
        return ApplyResult(
            tree=[*tree, node],
            outcome=ApplyOutcome.TARGET_NOT_FOUND,
            changed=True,
            reason=reason,
            node_id=node.id,
        )
    return _refused(tree, ApplyOutcome.TARGET_NOT_FOUND, reason)


def _placement_violation(
    parent: ComponentNode | None,
    node: ComponentNode,
    policy: ContainerPolicy,
) -> tuple[ApplyOutcome, str] | None:
    """Check that ``node`` may become a new direct child of ``parent``."""
    if parent is not None and not parent.is_container:
        return ApplyOutcome.INVALID_NESTING, f"'{parent.id}' cannot hold children"

    parent_kind = NodeKind(parent.kind) if parent is not None else None
    if not policy.may_contain(parent_kind, NodeKind(node.kind)):
        return (
            ApplyOutcome.INVALID_NESTING,
            f"A {node.kind} cannot be placed directly inside {parent_kind.value} '{parent.id}'",
        )

    if parent is not None and not policy.row_has_capacity(parent):
        return (
            ApplyOutcome.CAPACITY_EXCEEDED,
            f"Row '{parent.id}' already holds {policy.max_row_children} components",
        )
    return None


# =============================================================================
# Vertical placement
# =============================================================================


def _insert_adjacent(
    tree: ComponentTree,
    target_id: str,
    node: ComponentNode,
    offset: int,
    missing: MissingTargetPolicy,
    policy: ContainerPolicy,
) -> ApplyResult:
    _ensure_fresh_ids(tree, node)

    location = locate(tree, target_id)
    if location is None:
        return _missing_target(tree, node, target_id, missing)

    violation = _placement_violation(location.parent, node, policy)
    if violation:
        return _refused(tree, *violation)

    def splice(children: list[ComponentNode]) -> list[ComponentNode]:
        children.insert(location.index + offset, node)
        return children

    updated = update_children(tree, location.parent_id, splice)
    return ApplyResult(tree=updated, outcome=ApplyOutcome.APPLIED, changed=True, node_id=node.id)


def insert_before(
    tree: ComponentTree,
    target_id: str,
    node: ComponentNode,
    *,
    missing: MissingTargetPolicy = MissingTargetPolicy.REJECT,
    policy: ContainerPolicy = DEFAULT_POLICY,
) -> ApplyResult:
    """Insert ``node`` right before ``target_id`` among the target's siblings."""
    return _insert_adjacent(tree, target_id, node, 0, missing, policy)


def insert_after(
    tree: ComponentTree,
    target_id: str,
    node: ComponentNode,
    *,
    missing: MissingTargetPolicy = MissingTargetPolicy.REJECT,
    policy: ContainerPolicy = DEFAULT_POLICY,
) -> ApplyResult:
    """Insert ``node`` right after ``target_id`` among the target's siblings."""
    return _insert_adjacent(tree, target_id, node, 1, missing, policy)


def insert_into(
    tree: ComponentTree,
    container_id: str | None,
    node: ComponentNode,
    *,
    missing: MissingTargetPolicy = MissingTargetPolicy.REJECT,
    policy: ContainerPolicy = DEFAULT_POLICY,
) -> ApplyResult:
    """Append ``node`` as the last child of ``container_id`` (None = root level)."""
    _ensure_fresh_ids(tree, node)

    if container_id is not None:
        container = find_node(tree, container_id)
        if container is None:
            return _missing_target(tree, node, container_id, missing)

        violation = _placement_violation(container, node, policy)
        if violation:
            return _refused(tree, *violation)

    def append(children: list[ComponentNode]) -> list[ComponentNode]:
        children.append(node)
        return children

    updated = update_children(tree, container_id, append)
    return ApplyResult(tree=updated, outcome=ApplyOutcome.APPLIED, changed=True, node_id=node.id)


# =============================================================================
# Horizontal placement (rows)
# =============================================================================


def form_row(
    tree: ComponentTree,
    target_id: str,
    node: ComponentNode,
    side: RowSide,
    *,
    missing: MissingTargetPolicy = MissingTargetPolicy.REJECT,
    policy: ContainerPolicy = DEFAULT_POLICY,
    id_factory: IdFactory = default_id_factory,
) -> ApplyResult:
    """
    Replace ``target_id`` in place with a new row holding the target and ``node``.

    side=LEFT yields children [node, target], side=RIGHT yields [target, node].
    """
    _ensure_fresh_ids(tree, node)

    location = locate(tree, target_id)
    if location is None:
        return _missing_target(tree, node, target_id, missing)

    target = location.node
    if target.is_row or node.is_row:
        return _refused(
            tree,
            ApplyOutcome.INVALID_NESTING,
            "Rows cannot be placed side by side inside another row",
        )

    parent = location.parent
    parent_kind = NodeKind(parent.kind) if parent is not None else None
    if not policy.may_contain(parent_kind, NodeKind.ROW):
        return _refused(
            tree,
            ApplyOutcome.INVALID_NESTING,
            f"'{target_id}' is already inside row '{parent.id}'",
        )

    children = [node, target] if side == RowSide.LEFT else [target, node]
    row = RowContainer(
        id=_fresh_id(tree, subtree_ids(node), id_factory, "row"),
        children=children,
    )
    updated = replace_node(tree, target_id, [row])
    logger.debug(f"Formed row '{row.id}' from '{target_id}' and '{node.id}' ({side.value})")
    return ApplyResult(tree=updated, outcome=ApplyOutcome.APPLIED, changed=True, node_id=node.id)


def append_to_row(
    tree: ComponentTree,
    row_id: str,
    node: ComponentNode,
    *,
    anchor_id: str | None = None,
    side: RowSide | None = None,
    missing: MissingTargetPolicy = MissingTargetPolicy.REJECT,
    policy: ContainerPolicy = DEFAULT_POLICY,
) -> ApplyResult:
    """
    Add ``node`` as a member of row ``row_id`` if the row has room.

    With ``anchor_id`` the node goes directly left/right of that member;
    otherwise it is appended (or prepended when ``side`` is LEFT).
    """
    _ensure_fresh_ids(tree, node)

    row = find_node(tree, row_id)
    if row is None:
        return _missing_target(tree, node, row_id, missing)

    if not row.is_row:
        return _refused(tree, ApplyOutcome.INVALID_NESTING, f"'{row_id}' is not a row")

    violation = _placement_violation(row, node, policy)
    if violation:
        return _refused(tree, *violation)

    if anchor_id is not None:
        anchor_index = next(
            (index for index, child in enumerate(row.children) if child.id == anchor_id),
            None,
        )
        if anchor_index is None:
            return _refused(
                tree,
                ApplyOutcome.TARGET_NOT_FOUND,
                f"'{anchor_id}' is not a member of row '{row_id}'",
            )
        position = anchor_index if side == RowSide.LEFT else anchor_index + 1
    else:
        position = 0 if side == RowSide.LEFT else len(row.children)

    def splice(children: list[ComponentNode]) -> list[ComponentNode]:
        children.insert(position, node)
        return children

    updated = update_children(tree, row_id, splice)
    return ApplyResult(tree=updated, outcome=ApplyOutcome.APPLIED, changed=True, node_id=node.id)


# =============================================================================
# Removal and reordering
# =============================================================================


def extract_node(
    tree: ComponentTree,
    node_id: str,
    *,
    dissolve_rows: bool = False,
) -> tuple[ComponentTree, ComponentNode | None]:
    """
    Remove ``node_id`` from wherever it lives.

    Returns (new tree, removed node); (original tree, None) if it is absent.
    With ``dissolve_rows`` a row left with a single child is replaced by that
    child, and an emptied row disappears.
    """
    location = locate(tree, node_id)
    if location is None:
        return tree, None

    updated, removed = remove_node(tree, node_id)
    parent = location.parent
    if dissolve_rows and parent is not None and parent.is_row:
        updated = dissolve_row(updated, parent.id)
    return updated, removed


def dissolve_row(tree: ComponentTree, row_id: str) -> ComponentTree:
    """Replace a row holding at most one child by that child."""
    row = find_node(tree, row_id)
    if row is None or not row.is_row or len(row.children) > 1:
        return tree

    logger.debug(f"Dissolving row '{row_id}' ({len(row.children)} child left)")
    updated = replace_node(tree, row_id, list(row.children))
    return updated if updated is not None else tree


def move_within_container(
    tree: ComponentTree,
    container_id: str | None,
    from_index: int,
    to_index: int,
) -> ApplyResult:
    """
    Stable reorder of one container's children (None = root level).

    ``to_index`` is the position the moved child ends up at.
    """
    if container_id is None:
        children = tree
    else:
        container = find_node(tree, container_id)
        if container is None:
            return _refused(tree, ApplyOutcome.TARGET_NOT_FOUND, f"Container '{container_id}' not found")
        if not container.is_container:
            return _refused(tree, ApplyOutcome.INVALID_NESTING, f"'{container_id}' is not a container")
        children = container.children

    size = len(children)
    if not (0 <= from_index < size and 0 <= to_index < size):
        return _refused(
            tree,
            ApplyOutcome.TARGET_NOT_FOUND,
            f"Index out of range for '{container_id or 'root'}' ({from_index} -> {to_index}, size {size})",
        )

    moved_id = children[from_index].id
    if from_index == to_index:
        return ApplyResult(tree=tree, outcome=ApplyOutcome.APPLIED, changed=False, node_id=moved_id)

    def reorder(items: list[ComponentNode]) -> list[ComponentNode]:
        item = items.pop(from_index)
        items.insert(to_index, item)
        return items

    updated = update_children(tree, container_id, reorder)
    return ApplyResult(tree=updated, outcome=ApplyOutcome.APPLIED, changed=True, node_id=moved_id)


# =============================================================================
# Action dispatch
# =============================================================================


def _destination_ids(action: Action) -> list[str]:
    if isinstance(action, (InsertBefore, InsertAfter, FormRow)):
        return [action.target_id]
    if isinstance(action, InsertInto):
        return [action.container_id] if action.container_id else []
    if isinstance(action, AppendToRow):
        return [action.row_id] + ([action.anchor_id] if action.anchor_id else [])
    return []


def _dispatch(
    tree: ComponentTree,
    action: Action,
    node: ComponentNode,
    policy: ContainerPolicy,
    id_factory: IdFactory,
) -> ApplyResult:
    missing = policy.missing_target
    if isinstance(action, InsertBefore):
        return insert_before(tree, action.target_id, node, missing=missing, policy=policy)
    if isinstance(action, InsertAfter):
        return insert_after(tree, action.target_id, node, missing=missing, policy=policy)
    if isinstance(action, InsertInto):
        return insert_into(tree, action.container_id, node, missing=missing, policy=policy)
    if isinstance(action, FormRow):
        return form_row(
            tree,
            action.target_id,
            node,
            action.side,
            missing=missing,
            policy=policy,
            id_factory=id_factory,
        )
    if isinstance(action, AppendToRow):
        return append_to_row(
            tree,
            action.row_id,
            node,
            anchor_id=action.anchor_id,
            side=action.side,
            missing=missing,
            policy=policy,
        )
    raise TypeError(f"Unsupported action for node placement: {action!r}")


def _apply_move(
    tree: ComponentTree,
    action: Action,
    payload: ExistingItem,
    policy: ContainerPolicy,
    id_factory: IdFactory,
) -> ApplyResult:
    source = locate(tree, payload.id)
    if source is None:
        return _refused(
            tree,
            ApplyOutcome.TARGET_NOT_FOUND,
            f"Dragged node '{payload.id}' no longer exists",
        )

    moving_ids = subtree_ids(source.node)
    if any(dest in moving_ids for dest in _destination_ids(action)):
        return _refused(
            tree,
            ApplyOutcome.SELF_DROP_REJECTED,
            f"Cannot drop '{payload.id}' onto itself or its own descendant",
        )

    working, node = extract_node(tree, payload.id)
    result = _dispatch(working, action, node, policy, id_factory)
    if not result.changed:
        # Never hand back a half-applied move
        return replace(result, tree=tree)

    updated = result.tree
    origin = source.parent
    if policy.dissolve_single_child_rows and origin is not None and origin.is_row:
        updated = dissolve_row(updated, origin.id)
    return replace(result, tree=updated)


def apply(
    tree: ComponentTree,
    action: Action,
    payload: DragPayload | None = None,
    *,
    policy: ContainerPolicy = DEFAULT_POLICY,
    id_factory: IdFactory = default_id_factory,
    node_factory: NodeFactory = create_node,
) -> ApplyResult:
    """
    Apply a resolved action to ``tree``.

    - Reject actions map straight to their outcome, tree unchanged.
    - MoveWithinContainer reorders in place and needs no payload.
    - ExistingItem payloads are extracted first and re-inserted; if the insert
      is refused the original tree is returned untouched.
    - NewItem payloads are instantiated through ``node_factory``.

    Raises:
        ValueError: If a placement action is applied without a payload.
    """
    if isinstance(action, Reject):
        outcome = REJECT_OUTCOMES[action.reason]
        return _refused(tree, outcome, action.detail or action.reason.value)

    if isinstance(action, MoveWithinContainer):
        return move_within_container(tree, action.container_id, action.from_index, action.to_index)

    if payload is None:
        raise ValueError(f"Action '{action.type}' needs a drag payload")

    if isinstance(payload, ExistingItem):
        result = _apply_move(tree, action, payload, policy, id_factory)
    else:
        node = node_factory(payload, id_factory)
        result = _dispatch(tree, action, node, policy, id_factory)

    if result.applied:
        logger.info(f"Applied {action.type} for '{result.node_id}'")
    return result
