from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Iterable, Optional

from shapely import affinity
from shapely.geometry import GeometryCollection, MultiPoint, Point, box

from .errors import InvalidDimensions

SEAT_SPACING = 15.0
ROW_SPACING = 20.0

CURVE_BASE_RADIUS = 100.0
CURVE_ROW_SPACING = 15.0


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def _is_count(v: object) -> bool:
    # bool is an int subclass; True rows makes no sense
    return isinstance(v, numbers.Integral) and not isinstance(v, bool)


def validate_dimensions(row_count: object, seats_per_row: object) -> None:
    for name, v in (("row_count", row_count), ("seats_per_row", seats_per_row)):
        if not _is_count(v):
            raise InvalidDimensions(f"{name} must be an integer, got {v!r}")
        if v < 0:
            raise InvalidDimensions(f"{name} must be non-negative, got {v}")


def row_label(index: int) -> str:
    """
    Spreadsheet-style label for a zero-based row index: 0 -> A, 25 -> Z, 26 -> AA.
    """
    if not _is_count(index) or index < 0:
        raise InvalidDimensions(f"row index must be a non-negative integer, got {index!r}")
    label = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(65 + rem) + label
    return label


def curve_radius(
    row_index: int,
    base_radius: float = CURVE_BASE_RADIUS,
    row_spacing: float = CURVE_ROW_SPACING,
) -> float:
    return base_radius + row_index * row_spacing


def seat_angle(seat_index: int, seat_count: int, start_angle: float, end_angle: float) -> float:
    if seat_count <= 1:
        return (start_angle + end_angle) / 2.0
    t = seat_index / (seat_count - 1)
    return start_angle + (end_angle - start_angle) * t


def arc_point(radius: float, angle_deg: float, cx: float = 0.0, cy: float = 0.0) -> tuple[float, float]:
    # 0 deg points along +y, away from the stage
    a = math.radians(angle_deg)
    return cx + radius * math.sin(a), cy + radius * math.cos(a)


def rotate_point(x: float, y: float, rotation_deg: float, origin: tuple[float, float] = (0.0, 0.0)) -> tuple[float, float]:
    if not rotation_deg:
        return x, y
    p = affinity.rotate(Point(x, y), rotation_deg, origin=origin)
    return p.x, p.y


def bounds(
    points: Iterable[tuple[float, float]],
    boxes: Iterable[tuple[float, float, float, float]] = (),
) -> Optional[Bounds]:
    """
    Bounding box around points and (x, y, width, height) rectangles.
    Returns None when there is nothing to bound.
    """
    parts = []
    pts = list(points)
    if pts:
        parts.append(MultiPoint(pts))
    for (x, y, w, h) in boxes:
        parts.append(box(x, y, x + w, y + h))
    if not parts:
        return None
    min_x, min_y, max_x, max_y = GeometryCollection(parts).bounds
    return Bounds(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)
