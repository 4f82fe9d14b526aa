from __future__ import annotations

from typing import Iterable

from .geometry import (
    CURVE_BASE_RADIUS,
    CURVE_ROW_SPACING,
    ROW_SPACING,
    SEAT_SPACING,
    curve_radius,
    row_label,
    seat_angle,
    validate_dimensions,
)
from .schemas import Curve, Row, Seat, SeatType

DEFAULT_CURVE_SPAN = 60.0


def seat_id(row_index: int, seat_index: int, section_id: str = "") -> str:
    base = f"R{row_index}S{seat_index}"
    return f"{section_id}-{base}" if section_id else f"seat-{base}"


def generate_rows(
    row_count: int,
    seats_per_row: int,
    curved: bool,
    *,
    section_id: str = "",
    category: str = "",
    base_radius: float = CURVE_BASE_RADIUS,
    curve_span: float = DEFAULT_CURVE_SPAN,
) -> list[Row]:
    """
    Build `row_count` rows of `seats_per_row` seats each.

    Seats sit on a grid (SEAT_SPACING apart, rows ROW_SPACING apart). The first
    and last seat of every row are wheelchair places. For curved sections each
    row also carries an arc descriptor whose radius grows by CURVE_ROW_SPACING
    per row; the angular span is the same for every row of the call.

    Fully deterministic, so regenerating with the same arguments yields the
    same ids.
    """
    validate_dimensions(row_count, seats_per_row)
    if row_count == 0 or seats_per_row == 0:
        return []

    rows: list[Row] = []
    for r in range(row_count):
        label = row_label(r)
        y = r * ROW_SPACING
        curve = None
        if curved:
            curve = Curve(
                radius=curve_radius(r, base_radius, CURVE_ROW_SPACING),
                start_angle=-curve_span / 2.0,
                end_angle=curve_span / 2.0,
            )

        seats: list[Seat] = []
        for s in range(seats_per_row):
            edge = s == 0 or s == seats_per_row - 1
            seats.append(
                Seat(
                    id=seat_id(r, s, section_id),
                    section_id=section_id,
                    row=label,
                    number=s + 1,
                    x=s * SEAT_SPACING,
                    y=y,
                    angle=seat_angle(s, seats_per_row, curve.start_angle, curve.end_angle) if curve else None,
                    category=category,
                    type=SeatType.wheelchair if edge else SeatType.regular,
                    accessible=edge,
                )
            )
        rows.append(Row(id=f"row-{r}", label=label, y=y, seats=seats, curve=curve))
    return rows


def count_seats(rows: Iterable[Row]) -> int:
    return sum(len(r.seats) for r in rows)
