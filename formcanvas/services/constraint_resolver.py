"""
Constraint Resolver

Turns a raw zone into a concrete Action under the container policy.

Rules, first match wins:
1. Dropping a node onto itself or onto one of its descendants is rejected.
2. Top/Bottom insert before/after the target, at the target's own sibling
   level. Over a row member that level is the row.
3. Left/Right:
   - a dragged row is coerced to vertical placement after the target
   - onto a row: join that row
   - onto a row member: join the member's row next to the member
   - otherwise: form a new row with the target
4. Center drops into containers and falls back to "after" for leaves.
5. Adding to a row that is already full is rejected, as is placing a row
   beside a row member.

resolve_gap() covers the between-siblings case reported by SiblingGapLocator.
"""

import logging

from formcanvas.models.contracts.components import ComponentNode
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
from formcanvas.models.enums import NodeKind, RejectReason, RowSide, Zone
from formcanvas.models.geometry import Ancestry
from formcanvas.services.container_policy import DEFAULT_POLICY, ContainerPolicy

logger = logging.getLogger(__name__)


def _is_self_drop(payload: DragPayload, target_id: str | None, ancestry: Ancestry) -> bool:
    if not isinstance(payload, ExistingItem):
        return False
    return target_id == payload.id or payload.id in ancestry.ids


def _incoming(payload: DragPayload, row_id: str) -> int:
    """How many children ``row_id`` gains; a move within the row gains none."""
    if isinstance(payload, ExistingItem) and payload.origin_container_id == row_id:
        return 0
    return 1


def _vertical(zone: Zone, target: ComponentNode) -> Action:
    if zone == Zone.TOP:
        return InsertBefore(target_id=target.id)
    return InsertAfter(target_id=target.id)


def _horizontal(
    side: RowSide,
    payload: DragPayload,
    target: ComponentNode,
    parent: ComponentNode | None,
    policy: ContainerPolicy,
) -> Action:
    # Ahead of the row-target rule so a dragged row never gets AppendToRow
    if payload.is_row and policy.row_moves_vertically_only:
        return InsertAfter(target_id=target.id)
    if target.is_row:
        return AppendToRow(row_id=target.id, side=side)
    if parent is not None and parent.is_row:
        return AppendToRow(row_id=parent.id, anchor_id=target.id, side=side)
    return FormRow(target_id=target.id, side=side)


def _center(payload: DragPayload, target: ComponentNode) -> Action:
    if target.is_container:
        if target.is_row and payload.is_row:
            return InsertAfter(target_id=target.id)
        return InsertInto(container_id=target.id)
    return _vertical(Zone.BOTTOM, target)


def _check_row(
    action: Action,
    payload: DragPayload,
    target: ComponentNode,
    parent: ComponentNode | None,
    policy: ContainerPolicy,
) -> Action:
    """Reject actions that would overfill a row or nest a row in one."""
    if isinstance(action, AppendToRow):
        row = target if target.id == action.row_id else parent
    elif isinstance(action, InsertInto) and target.is_row:
        row = target
    elif isinstance(action, (InsertBefore, InsertAfter)) and parent is not None and parent.is_row:
        row = parent
        if not policy.may_contain(NodeKind.ROW, payload.node_kind):
            return Reject(
                reason=RejectReason.INVALID_NESTING,
                detail="Rows cannot be nested inside rows",
            )
    else:
        return action

    if row is not None and not policy.row_has_capacity(row, _incoming(payload, row.id)):
        return Reject(
            reason=RejectReason.CAPACITY_EXCEEDED,
            detail=f"Row '{row.id}' already holds {policy.max_row_children} components",
        )
    return action


def resolve(
    zone: Zone,
    payload: DragPayload,
    target: ComponentNode,
    ancestry: Ancestry | None = None,
    policy: ContainerPolicy = DEFAULT_POLICY,
) -> Action:
    """
    Decide what dropping ``payload`` in ``zone`` of ``target`` would do.

    ``ancestry`` lists the containers enclosing ``target``, outermost first.
    """
    ancestry = ancestry or Ancestry()
    parent = ancestry.parent

    if _is_self_drop(payload, target.id, ancestry):
        action: Action = Reject(
            reason=RejectReason.SELF_DROP,
            detail=f"Cannot drop '{payload.id}' onto itself or its own descendant",
        )
    elif zone in (Zone.TOP, Zone.BOTTOM):
        action = _check_row(_vertical(zone, target), payload, target, parent, policy)
    elif zone in (Zone.LEFT, Zone.RIGHT):
        side = RowSide.LEFT if zone == Zone.LEFT else RowSide.RIGHT
        action = _check_row(
            _horizontal(side, payload, target, parent, policy), payload, target, parent, policy
        )
    else:
        action = _check_row(_center(payload, target), payload, target, parent, policy)

    logger.debug(f"Resolved {zone.value} over '{target.id}' -> {action.type}")
    return action


def resolve_gap(
    payload: DragPayload,
    container: ComponentNode | None,
    children: list[ComponentNode],
    insertion_index: int,
    ancestry: Ancestry | None = None,
    policy: ContainerPolicy = DEFAULT_POLICY,
) -> Action:
    """
    Resolve a drop into the gap before ``children[insertion_index]``.

    ``container`` None stands for the canvas root; ``ancestry`` lists the
    containers enclosing ``container``. Reordering inside the payload's own
    container yields MoveWithinContainer for live feedback.
    """
    ancestry = ancestry or Ancestry()
    container_id = container.id if container is not None else None
    insertion_index = max(0, min(insertion_index, len(children)))

    if container_id is not None and _is_self_drop(payload, container_id, ancestry):
        return Reject(
            reason=RejectReason.SELF_DROP,
            detail=f"Cannot drop '{payload.id}' inside itself",
        )

    if container is not None and container.is_row:
        if payload.is_row:
            return Reject(
                reason=RejectReason.INVALID_NESTING,
                detail="Rows cannot be nested inside rows",
            )
        if not policy.row_has_capacity(container, _incoming(payload, container.id)):
            return Reject(
                reason=RejectReason.CAPACITY_EXCEEDED,
                detail=f"Row '{container.id}' already holds {policy.max_row_children} components",
            )

    if isinstance(payload, ExistingItem) and payload.origin_container_id == container_id:
        from_index = payload.origin_index
        to_index = insertion_index - 1 if insertion_index > from_index else insertion_index
        return MoveWithinContainer(
            container_id=container_id,
            from_index=from_index,
            to_index=min(to_index, max(len(children) - 1, 0)),
        )

    if insertion_index < len(children):
        return InsertBefore(target_id=children[insertion_index].id)
    if children:
        return InsertAfter(target_id=children[-1].id)
    return InsertInto(container_id=container_id)
