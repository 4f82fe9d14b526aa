"""
Bridge between the interactive layout builder and persistence.

Builder output is loosely shaped: any optional field may be missing and
sections may come back either as generated rows or as a row count plus a flat
seat list. `normalize` is the one place where that is resolved into the strict
SeatingLayout schema.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import ValidationError

from .errors import InvalidDimensions, MalformedEditorInput
from .generator import generate_rows
from .layout import LAYOUT_VERSION, assemble, total_capacity
from .log import logger
from .schemas import DraftSection, LayoutDraft, LayoutType, Row, SeatingLayout, Section, SectionType

DEFAULT_LAYOUT_NAME = "Unnamed Layout"


def _coerce_draft(partial: Union[LayoutDraft, dict[str, Any], None]) -> LayoutDraft:
    if partial is None:
        return LayoutDraft()
    if isinstance(partial, LayoutDraft):
        return partial
    if not isinstance(partial, dict):
        raise MalformedEditorInput(f"layout draft must be an object, got {type(partial).__name__}")
    try:
        return LayoutDraft.model_validate(partial)
    except ValidationError as e:
        raise MalformedEditorInput(f"invalid layout draft: {e}") from e


def _rows_from_seats(draft: DraftSection, section_id: str) -> list[Row]:
    # Group the flat seat list by row label, keeping first-seen order.
    by_label: dict[str, Row] = {}
    for seat in draft.seats or []:
        row = by_label.get(seat.row)
        if row is None:
            row = Row(id=f"row-{len(by_label)}", label=seat.row, y=seat.y)
            by_label[seat.row] = row
        if not seat.section_id:
            seat = seat.model_copy(update={"section_id": section_id})
        row.seats.append(seat)
    return list(by_label.values())


def _materialize_section(draft: DraftSection, index: int) -> Section:
    section_id = (draft.id or "").strip() or f"section-{index + 1}"
    pricing = draft.pricing or "standard"
    has_curve_params = draft.curve_radius is not None and draft.curve_angle is not None

    if isinstance(draft.rows, list):
        rows = draft.rows
    elif draft.seats:
        rows = _rows_from_seats(draft, section_id)
    else:
        wants_curve = draft.section_type == SectionType.curved or bool(draft.curved)
        curved = has_curve_params and (wants_curve or draft.section_type is None)
        try:
            rows = generate_rows(
                draft.rows or 0,
                draft.seats_per_row or 0,
                curved,
                section_id=section_id,
                category=pricing,
            )
        except InvalidDimensions as e:
            raise MalformedEditorInput(f"section {section_id!r}: {e}") from e

    section_type = draft.section_type
    if section_type is None:
        every_row_curved = all(r.curve is not None for r in rows)
        section_type = SectionType.curved if has_curve_params and every_row_curved else SectionType.standard

    try:
        return Section(
            id=section_id,
            name=(draft.name or "").strip() or f"Section {index + 1}",
            x=draft.x or 0.0,
            y=draft.y or 0.0,
            rotation=draft.rotation or 0.0,
            curve_radius=draft.curve_radius,
            curve_angle=draft.curve_angle,
            rows=rows,
            pricing=pricing,
            row_pricing=draft.row_pricing,
            color=draft.color,
            section_type=section_type,
        )
    except ValidationError as e:
        raise MalformedEditorInput(f"section {section_id!r}: {e}") from e


def normalize(partial: Union[LayoutDraft, dict[str, Any], None], venue_id: Optional[str]) -> SeatingLayout:
    """
    Turn builder output into a canonical SeatingLayout owned by `venue_id`.

    Raises MalformedEditorInput instead of letting an incomplete record
    through. Normalizing the same draft twice gives the same layout.
    """
    if not isinstance(venue_id, str) or not venue_id.strip():
        raise MalformedEditorInput("venue_id is required")
    venue_id = venue_id.strip()
    draft = _coerce_draft(partial)

    if draft.venue_id and draft.venue_id != venue_id:
        logger.warning("draft names venue {!r}; stamping {!r}", draft.venue_id, venue_id)

    sections = [_materialize_section(s, i) for i, s in enumerate(draft.sections or [])]

    claimed = draft.capacity if draft.capacity is not None else draft.total_capacity
    actual = total_capacity(sections)
    if claimed is not None and claimed != actual:
        logger.info("draft claims capacity {}, layout holds {} seats", claimed, actual)

    return assemble(
        sections,
        draft.stage,
        draft.aisles,
        draft.view_box,
        venue_id=venue_id,
        name=(draft.name or "").strip() or DEFAULT_LAYOUT_NAME,
        layout_id=draft.id,
        layout_type=draft.type or LayoutType.seating_chart,
        price_categories=draft.price_categories,
        configuration={"version": LAYOUT_VERSION, "format": "svg"},
    )


def to_record(layout: SeatingLayout) -> dict[str, Any]:
    """JSON-ready record for persistence, without null placeholders."""
    return layout.model_dump(mode="json", by_alias=True, exclude_none=True)


def from_record(record: dict[str, Any]) -> SeatingLayout:
    try:
        return SeatingLayout.model_validate(record)
    except ValidationError as e:
        raise MalformedEditorInput(f"stored layout is not canonical: {e}") from e
