"""
Canvas Controller

Owns the current component tree and at most one DragSession. The renderer
forwards pointer events here by node id; the controller looks the nodes up in
its tree, drives the session, and swaps in the new tree after a drop.
"""

import logging
from typing import Any

from formcanvas.config import Settings, get_settings
from formcanvas.core.exceptions import InvalidSessionTransitionError, NodeNotFoundError
from formcanvas.models.contracts.components import ComponentTree
from formcanvas.models.contracts.drag import Action, DragPayload
from formcanvas.models.enums import SessionState
from formcanvas.models.geometry import HoverTarget, Point, Rect
from formcanvas.services.container_policy import ContainerPolicy
from formcanvas.services.drag_session import DragSession
from formcanvas.services.drop_feedback import DropFeedback, describe_action
from formcanvas.services.models import ApplyResult
from formcanvas.services.node_factory import (
    IdFactory,
    NodeFactory,
    create_node,
    default_id_factory,
)
from formcanvas.services.tree import (
    child_nodes,
    existing_item_payload,
    locate,
    parse_tree,
    validate_tree,
)
from formcanvas.services.zone_classifier import GeometryProvider, SiblingGapLocator

logger = logging.getLogger(__name__)


class CanvasController:
    """Single owner of the canvas tree and its drag session."""

    def __init__(
        self,
        tree: ComponentTree | None = None,
        settings: Settings | None = None,
        geometry: GeometryProvider | None = None,
        id_factory: IdFactory = default_id_factory,
        node_factory: NodeFactory = create_node,
    ):
        self.settings = settings or get_settings()
        self.policy = ContainerPolicy.from_settings(self.settings)
        self.id_factory = id_factory
        self.node_factory = node_factory
        self.gap_locator = SiblingGapLocator(geometry) if geometry is not None else None

        self.tree: ComponentTree = list(tree or [])
        validate_tree(self.tree, self.policy)

        self.session: DragSession | None = None
        self.last_result: ApplyResult | None = None

    @classmethod
    def from_data(cls, data: list[dict[str, Any]], **kwargs) -> "CanvasController":
        """Build a controller from raw (JSON-decoded) node dicts."""
        return cls(parse_tree(data), **kwargs)

    @property
    def is_dragging(self) -> bool:
        return self.session is not None and self.session.is_active

    def _active_session(self, event: str) -> DragSession:
        if self.session is None:
            raise InvalidSessionTransitionError(event, SessionState.IDLE.value)
        return self.session

    def _release_session(self) -> None:
        self.session = None
        if self.gap_locator is not None:
            self.gap_locator.invalidate()

    # =========================================================================
    # Starting a gesture
    # =========================================================================

    def begin_drag(self, payload: DragPayload, pointer: Point | None = None) -> DragSession:
        """
        Start a new drag session for ``payload``.

        With ``pointer`` the session is armed and waits for the drag distance
        threshold; without it the session starts dragging right away. Any
        session still active is cancelled first.
        """
        if self.is_dragging:
            logger.warning(
                f"Drag session already {self.session.state.value}, cancelling it for a new drag"
            )
            self.session.on_cancel()
        self._release_session()

        session = DragSession.from_settings(
            self.settings, id_factory=self.id_factory, node_factory=self.node_factory
        )
        if pointer is not None:
            session.press(payload, pointer)
        else:
            session.on_drag_start(payload)
        self.session = session
        return session

    def pick_up(self, node_id: str, pointer: Point | None = None) -> DragSession:
        """Start dragging an existing node of the tree."""
        payload = existing_item_payload(self.tree, node_id)
        if payload is None:
            raise NodeNotFoundError(node_id)
        return self.begin_drag(payload, pointer)

    # =========================================================================
    # Pointer movement
    # =========================================================================

    def pointer_move(self, pointer: Point) -> bool:
        """Forward a pointer-move; True once the session is dragging."""
        return self._active_session("move").move(pointer)

    def hover(self, pointer: Point, target_id: str | None, rect: Rect | None = None) -> Action | None:
        """
        The pointer is over ``target_id`` rendered at ``rect``.

        ``target_id`` None, or an id no longer in the tree, counts as leaving
        every drop target.
        """
        session = self._active_session("hover")
        location = locate(self.tree, target_id) if target_id is not None else None
        if location is None or rect is None:
            return session.on_hover(pointer, None)

        candidate = HoverTarget(node=location.node, rect=rect, ancestry=location.ancestry)
        return session.on_hover(pointer, candidate)

    def hover_gap(self, pointer: Point, container_id: str | None) -> Action:
        """
        The pointer is between the rendered children of ``container_id``.

        Requires a geometry provider; children are measured by node id.
        """
        session = self._active_session("hover")
        if self.gap_locator is None:
            raise RuntimeError("hover_gap() needs a geometry provider")

        if container_id is None:
            container, children, ancestry = None, self.tree, None
        else:
            location = locate(self.tree, container_id)
            if location is None:
                raise NodeNotFoundError(container_id)
            container = location.node
            children = child_nodes(container)
            ancestry = location.ancestry

        index = self.gap_locator.insertion_index(
            container_id, [child.id for child in children], pointer
        )
        return session.on_hover_gap(container, children, index, ancestry)

    def feedback(self) -> DropFeedback | None:
        """Hint for the pending action, None when nothing is being dragged."""
        if not self.is_dragging:
            return None
        return describe_action(self.session.pending_action)

    # =========================================================================
    # Ending a gesture
    # =========================================================================

    def drop(self) -> ApplyResult:
        """Release the pointer; the tree is replaced if the drop changed it."""
        session = self._active_session("drop")
        try:
            result = session.on_drop(self.tree)
        finally:
            self._release_session()

        if result.changed:
            self.tree = result.tree
        self.last_result = result
        return result

    def cancel(self) -> bool:
        """Abort the current gesture, if any."""
        if self.session is None:
            return False
        cancelled = self.session.on_cancel()
        self._release_session()
        return cancelled
