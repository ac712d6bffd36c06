from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_rect(cls, rect: dict[str, Any] | None) -> BoundingBox | None:
        if not rect:
            return None
        return cls(
            x=float(rect.get("x", 0.0)),
            y=float(rect.get("y", 0.0)),
            width=float(rect.get("width", 0.0)),
            height=float(rect.get("height", 0.0)),
        )

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass(frozen=True, slots=True)
class CapturedElement:
    """Recovery signals recorded for one locator while it still resolved."""

    original_locator: str
    alternative_locators: tuple[str, ...]
    snapshot_image: bytes
    bounding_box: BoundingBox | None
    nearby_text: str
    captured_at: int


@dataclass(frozen=True, slots=True)
class ElementSnapshot:
    image: bytes
    bounding_box: BoundingBox | None
    captured_at: int


@dataclass(frozen=True, slots=True)
class VisualMatch:
    x: float
    y: float
    width: float
    height: float
    confidence: float

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass(slots=True)
class HealAttempt:
    broken_locator: str
    strategy: str
    new_locator: str
    success: bool
    had_bundle: bool
    strategies_tried: list[str] = field(default_factory=list)
    duration_ms: float = 0.0
