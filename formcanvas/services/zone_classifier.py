"""
Zone Classifier

Maps a pointer position over a drop target to one of the five zones
(top, bottom, left, right, center). Pure arithmetic against a single
rectangle; safe to call on every pointer-move.

Two classification strategies exist:
- vertical-first (canonical): top/bottom bands win over left/right bands
- dominant-axis: only the bands of the axis further from the target's
  centre are checked

Also provides SiblingGapLocator, which finds the insertion index between the
rendered children of a container using rectangles obtained through a
GeometryProvider.
"""

import logging
from collections.abc import Hashable, Sequence
from typing import Literal, Protocol

from formcanvas.models.enums import ClassificationStrategy, Zone
from formcanvas.models.geometry import Point, Rect, ZoneThresholds

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLDS = ZoneThresholds()


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def _relative(pointer: Point, rect: Rect) -> tuple[float, float]:
    """Pointer position as fractions of the rectangle, clamped onto it."""
    return (
        _clamp((pointer.x - rect.left) / rect.width),
        _clamp((pointer.y - rect.top) / rect.height),
    )


def _vertical_band(rel_y: float, threshold: float) -> Zone | None:
    if rel_y < threshold:
        return Zone.TOP
    if rel_y > 1.0 - threshold:
        return Zone.BOTTOM
    return None


def _horizontal_band(rel_x: float, threshold: float) -> Zone | None:
    if rel_x < threshold:
        return Zone.LEFT
    if rel_x > 1.0 - threshold:
        return Zone.RIGHT
    return None


def classify(
    pointer: Point,
    rect: Rect,
    thresholds: ZoneThresholds = DEFAULT_THRESHOLDS,
    strategy: ClassificationStrategy = ClassificationStrategy.VERTICAL_FIRST,
) -> Zone:
    """
    Classify ``pointer`` relative to ``rect``.

    A pointer outside the rectangle is clamped onto its nearest edge. A
    degenerate (zero width or height) rectangle always yields CENTER.
    """
    if rect.width <= 0 or rect.height <= 0:
        return Zone.CENTER

    rel_x, rel_y = _relative(pointer, rect)
    vertical = _vertical_band(rel_y, thresholds.vertical)
    horizontal = _horizontal_band(rel_x, thresholds.horizontal)

    if strategy == ClassificationStrategy.DOMINANT_AXIS:
        # Only the axis further from centre is checked, ties go vertical
        if abs(rel_x - 0.5) > abs(rel_y - 0.5):
            return horizontal or Zone.CENTER
        return vertical or Zone.CENTER

    return vertical or horizontal or Zone.CENTER


# =============================================================================
# Sibling gap scanning
# =============================================================================


class GeometryProvider(Protocol):
    """Supplies bounding rectangles for rendered elements."""

    def get_rect(self, element_ref: Hashable) -> Rect | None:
        """Rectangle of ``element_ref``, or None if it is not rendered."""
        ...


class SiblingGapLocator:
    """
    Finds the gap between a container's rendered children closest to the pointer.

    Sibling rectangles are fetched once per hovered container and cached
    until invalidate() is called (on drop, cancel, scroll or re-layout).
    """

    def __init__(
        self,
        provider: GeometryProvider,
        axis: Literal["vertical", "horizontal"] = "vertical",
    ):
        self.provider = provider
        self.axis = axis
        self._cache: dict[Hashable, list[Rect | None]] = {}

    def _rects(self, container_key: Hashable, sibling_refs: Sequence[Hashable]) -> list[Rect | None]:
        cached = self._cache.get(container_key)
        if cached is None or len(cached) != len(sibling_refs):
            cached = [self.provider.get_rect(ref) for ref in sibling_refs]
            self._cache[container_key] = cached
            logger.debug(f"Measured {len(cached)} siblings of '{container_key}'")
        return cached

    def insertion_index(
        self,
        container_key: Hashable,
        sibling_refs: Sequence[Hashable],
        pointer: Point,
        axis: Literal["vertical", "horizontal"] | None = None,
    ) -> int:
        """
        Index at which a dropped item would be inserted among the siblings.

        The pointer before a sibling's midpoint inserts before that sibling;
        past every midpoint it appends. Unrendered siblings are skipped.
        """
        axis = axis or self.axis
        coordinate = pointer.y if axis == "vertical" else pointer.x
        for index, rect in enumerate(self._rects(container_key, sibling_refs)):
            if rect is None:
                continue
            midpoint = rect.mid_y if axis == "vertical" else rect.mid_x
            if coordinate < midpoint:
                return index
        return len(sibling_refs)

    def invalidate(self, container_key: Hashable | None = None) -> None:
        """Drop cached rectangles for one container, or for all of them."""
        if container_key is None:
            self._cache.clear()
        else:
            self._cache.pop(container_key, None)
