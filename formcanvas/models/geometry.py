"""Geometry value types passed to the zone classifier on every pointer-move."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from formcanvas.config import Settings
    from formcanvas.models.contracts.components import ComponentNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    """Pointer position in canvas coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Bounding rectangle of a rendered element."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def mid_x(self) -> float:
        return self.left + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.top + self.height / 2

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom


@dataclass(frozen=True)
class ZoneThresholds:
    """Band sizes as fractions of the target's width/height."""

    horizontal: float = 0.25
    vertical: float = 0.3

    def __post_init__(self) -> None:
        for name, value in (("horizontal", self.horizontal), ("vertical", self.vertical)):
            if not 0.0 <= value <= 0.5:
                raise ValueError(f"{name} threshold must be within [0, 0.5], got {value}")

    @classmethod
    def from_settings(cls, settings: Settings) -> ZoneThresholds:
        if not settings.has_center_band:
            logger.warning(
                f"Zone thresholds leave no center band (vertical={settings.vertical_threshold}, "
                f"horizontal={settings.horizontal_threshold}), Center drops are unreachable"
            )
        return cls(
            horizontal=settings.horizontal_threshold,
            vertical=settings.vertical_threshold,
        )


@dataclass(frozen=True)
class Ancestry:
    """Containers enclosing a node, outermost first, immediate parent last."""

    parent_chain: list[ComponentNode] = field(default_factory=list)

    @property
    def parent(self) -> ComponentNode | None:
        return self.parent_chain[-1] if self.parent_chain else None

    @property
    def ids(self) -> list[str]:
        return [node.id for node in self.parent_chain]


@dataclass(frozen=True)
class HoverTarget:
    """The element currently under the pointer, as reported by the canvas."""

    node: ComponentNode
    rect: Rect
    ancestry: Ancestry = field(default_factory=Ancestry)
