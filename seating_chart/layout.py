from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from .errors import MalformedEditorInput, SeatingLayoutError
from .geometry import SEAT_SPACING, arc_point, bounds, rotate_point
from .log import logger
from .schemas import (
    Aisle,
    GenerateLayoutRequest,
    GenerateLayoutResponse,
    LayoutType,
    PriceCategory,
    SeatingLayout,
    Section,
    Stage,
    ViewBox,
)
from .templates import generate_sections

LAYOUT_VERSION = "2.0"
VIEW_BOX_PADDING = 50.0


def default_stage() -> Stage:
    return Stage(x=400, y=50, width=400, height=60, label="STAGE")


def default_view_box() -> ViewBox:
    return ViewBox(x=0, y=0, width=1200, height=800)


def total_capacity(sections: Iterable[Section]) -> int:
    return sum(len(row.seats) for section in sections for row in section.rows)


def check_unique_seat_ids(sections: Iterable[Section]) -> None:
    seen: set[str] = set()
    for section in sections:
        for row in section.rows:
            for seat in row.seats:
                if seat.id in seen:
                    raise MalformedEditorInput(f"duplicate seat id {seat.id!r} (section {section.id!r})")
                seen.add(seat.id)


def seat_positions(section: Section) -> list[tuple[str, float, float]]:
    """
    Layout-global (seat_id, x, y) for every seat of a section.

    Straight rows use the seat's grid position; curved rows place each seat
    on its row's arc, centred on the middle of the straight row. The section
    rotation is applied around its anchor.
    """
    mid_x = (section.seats_per_row - 1) * SEAT_SPACING / 2.0 if section.seats_per_row else 0.0
    out: list[tuple[str, float, float]] = []
    for row in section.rows:
        for seat in row.seats:
            if row.curve is not None and seat.angle is not None:
                lx, ly = arc_point(row.curve.radius, seat.angle, cx=mid_x, cy=row.y - row.curve.radius)
            else:
                lx, ly = seat.x, seat.y
            gx, gy = rotate_point(section.x + lx, section.y + ly, section.rotation, origin=(section.x, section.y))
            out.append((seat.id, gx, gy))
    return out


def fit_view_box(sections: Iterable[Section], stage: Optional[Stage] = None) -> ViewBox:
    points = [(x, y) for section in sections for (_, x, y) in seat_positions(section)]
    boxes = [(stage.x, stage.y, stage.width, stage.height)] if stage else []
    b = bounds(points, boxes)
    if b is None:
        return default_view_box()
    return ViewBox(
        x=round(b.min_x - VIEW_BOX_PADDING, 2),
        y=round(b.min_y - VIEW_BOX_PADDING, 2),
        width=round(b.width + 2 * VIEW_BOX_PADDING, 2),
        height=round(b.height + 2 * VIEW_BOX_PADDING, 2),
    )


def assemble(
    sections: Iterable[Section],
    stage: Optional[Stage] = None,
    aisles: Optional[Iterable[Aisle]] = None,
    view_box: Optional[ViewBox] = None,
    *,
    venue_id: str,
    name: str = "Unnamed Layout",
    layout_id: Optional[str] = None,
    layout_type: LayoutType = LayoutType.seating_chart,
    price_categories: Optional[Iterable[PriceCategory]] = None,
    configuration: Optional[dict[str, Any]] = None,
) -> SeatingLayout:
    """
    Build the canonical SeatingLayout. Missing stage/aisles/view box get
    defaults; capacity is always derived from the seats in `sections`.
    """
    if not (venue_id or "").strip():
        raise MalformedEditorInput("venue_id is required")
    sections = list(sections)
    check_unique_seat_ids(sections)

    stage = stage or default_stage()
    return SeatingLayout(
        id=layout_id,
        venue_id=venue_id,
        name=name,
        type=layout_type,
        sections=sections,
        stage=stage,
        aisles=list(aisles or []),
        view_box=view_box or fit_view_box(sections, stage),
        price_categories=list(price_categories or []),
        configuration=dict(configuration or {}),
    )


def generate_seating_layout(
    venue_type: object,
    *,
    venue_id: str,
    name: str,
    capacity_hint: object = None,
) -> SeatingLayout:
    sections = generate_sections(venue_type, capacity_hint)
    return assemble(
        sections,
        venue_id=venue_id,
        name=name,
        configuration={"version": LAYOUT_VERSION, "format": "svg"},
    )


def generate_layout(request: Union[GenerateLayoutRequest, dict[str, Any]]) -> GenerateLayoutResponse:
    """
    Request boundary for the admin generator. Never raises for generation
    problems: callers get an empty response instead of a half-built layout.
    """
    try:
        if not isinstance(request, GenerateLayoutRequest):
            request = GenerateLayoutRequest.model_validate(request)
        sections = generate_sections(request.venue_type, request.capacity)
        configuration = {"version": LAYOUT_VERSION}
        # Unset request fields are left out rather than sent as null.
        if request.venue_name is not None:
            configuration["generatedFor"] = request.venue_name
        if request.layout_type is not None:
            configuration["type"] = request.layout_type
        return GenerateLayoutResponse(
            sections=sections,
            total_capacity=total_capacity(sections),
            configuration=configuration,
        )
    except (SeatingLayoutError, ValueError, TypeError) as e:
        logger.error("layout generation failed: {}", e)
        return GenerateLayoutResponse()


MANIFEST_COLUMNS = [
    "section",
    "row",
    "seat",
    "seat_id",
    "seat_type",
    "status",
    "category",
    "price",
    "x",
    "y",
]


def seat_manifest(layout: SeatingLayout) -> list[dict[str, Any]]:
    """One flat record per seat, in section/row/seat order, with global coordinates."""
    out: list[dict[str, Any]] = []
    for section in layout.sections:
        positions = {sid: (x, y) for (sid, x, y) in seat_positions(section)}
        row_pricing = section.row_pricing or {}
        for row in section.rows:
            for seat in row.seats:
                x, y = positions[seat.id]
                out.append(
                    {
                        "section": section.name,
                        "row": row.label,
                        "seat": seat.number,
                        "seat_id": seat.id,
                        "seat_type": seat.type.value,
                        "status": seat.status.value,
                        "category": row_pricing.get(row.label) or seat.category or section.pricing,
                        "price": seat.price,
                        "x": round(x, 2),
                        "y": round(y, 2),
                    }
                )
    return out
