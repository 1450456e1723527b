"""
Drag Session

Explicit state machine for one drag gesture, from pointer-down to drop or cancel:

    Idle -> Armed -> Dragging -> Hovering -> Dropped | Cancelled

- press()/move(): a press only becomes a drag once the pointer travelled
  further than the drag distance threshold, so plain clicks never drag
- on_hover(): every pointer-move over a target re-runs the zone classifier and
  the constraint resolver before anything is shown
- on_drop(): hands the pending action to the tree mutator
- on_cancel(): ends the gesture without touching the tree

A session is single-use. Once Dropped or Cancelled it accepts no more events;
the canvas controller discards it and creates a new one for the next gesture.
"""

import logging
import math
from collections.abc import Sequence

from formcanvas.config import Settings, get_settings
from formcanvas.core.exceptions import InvalidSessionTransitionError
from formcanvas.models.contracts.components import ComponentNode, ComponentTree
from formcanvas.models.contracts.drag import Action, DragPayload
from formcanvas.models.enums import ApplyOutcome, ClassificationStrategy, SessionState, Zone
from formcanvas.models.geometry import Ancestry, HoverTarget, Point, ZoneThresholds
from formcanvas.services import tree_mutator
from formcanvas.services.constraint_resolver import resolve, resolve_gap
from formcanvas.services.container_policy import DEFAULT_POLICY, ContainerPolicy
from formcanvas.services.models import ApplyResult
from formcanvas.services.node_factory import (
    IdFactory,
    NodeFactory,
    create_node,
    default_id_factory,
)
from formcanvas.services.zone_classifier import DEFAULT_THRESHOLDS, classify

logger = logging.getLogger(__name__)

DEFAULT_DRAG_DISTANCE = 4.0

LIVE_STATES = (SessionState.ARMED, SessionState.DRAGGING, SessionState.HOVERING)
TERMINAL_STATES = (SessionState.DROPPED, SessionState.CANCELLED)


class DragSession:
    """State of a single drag gesture."""

    def __init__(
        self,
        policy: ContainerPolicy = DEFAULT_POLICY,
        thresholds: ZoneThresholds = DEFAULT_THRESHOLDS,
        strategy: ClassificationStrategy = ClassificationStrategy.VERTICAL_FIRST,
        drag_distance: float = DEFAULT_DRAG_DISTANCE,
        id_factory: IdFactory = default_id_factory,
        node_factory: NodeFactory = create_node,
    ):
        self.policy = policy
        self.thresholds = thresholds
        self.strategy = strategy
        self.drag_distance = drag_distance
        self.id_factory = id_factory
        self.node_factory = node_factory

        self.state = SessionState.IDLE
        self.payload: DragPayload | None = None
        self.press_point: Point | None = None
        self.zone: Zone | None = None
        self.target_id: str | None = None
        self.pending_action: Action | None = None
        self.result: ApplyResult | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs) -> "DragSession":
        """Build a session configured from engine settings."""
        settings = settings or get_settings()
        return cls(
            policy=ContainerPolicy.from_settings(settings),
            thresholds=ZoneThresholds.from_settings(settings),
            strategy=ClassificationStrategy(settings.classification_strategy),
            drag_distance=settings.drag_distance_threshold,
            **kwargs,
        )

    @property
    def is_active(self) -> bool:
        """True between press (or drag start) and drop/cancel."""
        return self.state in LIVE_STATES

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def _require(self, event: str, *states: SessionState) -> None:
        if self.state not in states:
            raise InvalidSessionTransitionError(event, self.state.value)

    def _clear_hover(self) -> None:
        self.zone = None
        self.target_id = None
        self.pending_action = None

    def _finish(self, state: SessionState, result: ApplyResult) -> ApplyResult:
        self.state = state
        self.result = result
        self._clear_hover()
        return result

    # =========================================================================
    # Gesture start
    # =========================================================================

    def press(self, payload: DragPayload, pointer: Point) -> None:
        """Pointer-down on a draggable source (Idle -> Armed)."""
        self._require("press", SessionState.IDLE)
        self.payload = payload
        self.press_point = pointer
        self.state = SessionState.ARMED

    def move(self, pointer: Point) -> bool:
        """
        Pointer moved while the button is held.

        Returns True once the session is dragging. An armed session starts
        dragging when the pointer travelled strictly further than the drag
        distance threshold from the press point.
        """
        self._require("move", *LIVE_STATES)
        if self.state != SessionState.ARMED:
            return True

        distance = math.hypot(pointer.x - self.press_point.x, pointer.y - self.press_point.y)
        if distance > self.drag_distance:
            self.state = SessionState.DRAGGING
            logger.debug(f"Drag started for {self.payload.kind} item after {distance:.1f}px")
            return True
        return False

    def on_drag_start(self, payload: DragPayload | None = None) -> None:
        """
        Start dragging immediately (Idle or Armed -> Dragging).

        Used when the host toolkit already applied its own drag threshold. An
        armed session keeps its payload unless a new one is given.
        """
        self._require("drag_start", SessionState.IDLE, SessionState.ARMED)
        payload = payload or self.payload
        if payload is None:
            raise InvalidSessionTransitionError("drag_start without payload", self.state.value)
        self.payload = payload
        self.state = SessionState.DRAGGING
        logger.debug(f"Drag started for {payload.kind} item")

    # =========================================================================
    # Hovering
    # =========================================================================

    def on_hover(self, pointer: Point, candidate: HoverTarget | None) -> Action | None:
        """
        Recompute the pending action for the element under the pointer.

        ``candidate`` None means the pointer left every drop target; the
        session falls back to Dragging and None is returned.
        """
        self._require("hover", SessionState.DRAGGING, SessionState.HOVERING)
        if candidate is None:
            self.on_leave()
            return None

        zone = classify(pointer, candidate.rect, self.thresholds, self.strategy)
        action = resolve(zone, self.payload, candidate.node, candidate.ancestry, self.policy)

        self.zone = zone
        self.target_id = candidate.node.id
        self.pending_action = action
        self.state = SessionState.HOVERING
        return action

    def on_hover_gap(
        self,
        container: ComponentNode | None,
        children: Sequence[ComponentNode],
        insertion_index: int,
        ancestry: Ancestry | None = None,
    ) -> Action:
        """Recompute the pending action for a gap between a container's children."""
        self._require("hover", SessionState.DRAGGING, SessionState.HOVERING)
        action = resolve_gap(
            self.payload, container, list(children), insertion_index, ancestry, self.policy
        )

        self.zone = None
        self.target_id = container.id if container is not None else None
        self.pending_action = action
        self.state = SessionState.HOVERING
        return action

    def on_leave(self) -> None:
        """The pointer left the hovered target (Hovering -> Dragging)."""
        self._require("leave", SessionState.DRAGGING, SessionState.HOVERING)
        self._clear_hover()
        self.state = SessionState.DRAGGING

    # =========================================================================
    # Gesture end
    # =========================================================================

    def on_drop(self, tree: ComponentTree) -> ApplyResult:
        """
        Pointer released.

        - Armed (a click) or Dragging (no target): cancelled, tree unchanged
        - Hovering with a Reject pending: cancelled with the matching outcome
        - Hovering otherwise: the pending action is applied to ``tree``

        Raises:
            InvalidSessionTransitionError: If the session is idle or finished.
        """
        self._require("drop", *LIVE_STATES)

        if self.state != SessionState.HOVERING:
            logger.info("Drop outside any drop target, drag cancelled")
            result = ApplyResult(
                tree=tree,
                outcome=ApplyOutcome.CANCELLED,
                reason="Released outside any drop target",
            )
            return self._finish(SessionState.CANCELLED, result)

        action = self.pending_action
        result = tree_mutator.apply(
            tree,
            action,
            self.payload,
            policy=self.policy,
            id_factory=self.id_factory,
            node_factory=self.node_factory,
        )

        if action.is_reject:
            return self._finish(SessionState.CANCELLED, result)

        logger.info(f"Dropped {self.payload.kind} item: {action.type} -> {result.outcome.value}")
        return self._finish(SessionState.DROPPED, result)

    def on_cancel(self) -> bool:
        """
        Abort the gesture (e.g. Escape). No mutation happens.

        Returns False if there was nothing to cancel.
        """
        if not self.is_active:
            return False
        logger.info(f"Drag cancelled while {self.state.value}")
        self.state = SessionState.CANCELLED
        self._clear_hover()
        return True
