"""
Map geometry helpers: bounds clamping, straight-line extrapolation and
coarse region and heading naming for minimap positions.

Dota world coordinates run roughly -8288..8288 on both axes. Radiant base is
the bottom-left corner, Dire base the top-right; the river runs along y = -x.
"""

from __future__ import annotations
from dataclasses import dataclass

from models.snapshot import Position

_MAP_EXTENT = 8288.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True, slots=True)
class MapBounds:
    min_x: float = -_MAP_EXTENT
    min_y: float = -_MAP_EXTENT
    max_x: float = _MAP_EXTENT
    max_y: float = _MAP_EXTENT

    def clamp(self, pos: Position) -> Position:
        return Position(
            clamp(pos.x, self.min_x, self.max_x),
            clamp(pos.y, self.min_y, self.max_y),
        )


def extrapolate(
    p1: Position,
    t1: int,
    p2: Position,
    t2: int,
    t3: int,
    bounds: MapBounds,
) -> Position:
    """
    Project the motion p1(t1) → p2(t2) forward to t3 at constant velocity.
    Zero or negative elapsed time between the two points means no movement.
    """
    span = t2 - t1
    if span <= 0:
        return bounds.clamp(p2)
    scale = (t3 - t2) / span
    return bounds.clamp(Position(
        p2.x + (p2.x - p1.x) * scale,
        p2.y + (p2.y - p1.y) * scale,
    ))


def describe_region(pos: Position) -> str:
    x, y = pos.x, pos.y
    if x < -5000 and y < -5000:
        return "radiant base"
    if x > 5000 and y > 5000:
        return "dire base"
    if x < -5500 or y > 5500:
        return "top lane"
    if x > 5500 or y < -5500:
        return "bot lane"
    if abs(x - y) < 1500:
        return "mid lane"
    if abs(x + y) < 1000:
        return "river"
    return "radiant jungle" if x + y < 0 else "dire jungle"


def heading(start: Position, end: Position) -> str | None:
    """Compass direction of the move start → end along its dominant axis."""
    dx, dy = end.x - start.x, end.y - start.y
    if dx == 0 and dy == 0:
        return None
    if abs(dx) > abs(dy):
        return "East" if dx > 0 else "West"
    return "North" if dy > 0 else "South"
