from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    # JSON uses camelCase (venueId, viewBox, ...); python code uses snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SeatStatus(str, Enum):
    available = "available"
    reserved = "reserved"
    sold = "sold"
    disabled = "disabled"
    accessible = "accessible"


class SeatType(str, Enum):
    regular = "regular"
    wheelchair = "wheelchair"


class SectionType(str, Enum):
    standard = "standard"
    curved = "curved"


class LayoutType(str, Enum):
    seating_chart = "seating_chart"
    general_admission = "general_admission"


class Seat(WireModel):
    id: str
    section_id: str = ""
    row: str
    number: int
    x: float = 0.0
    y: float = 0.0
    angle: Optional[float] = None
    price: float = 0.0
    category: str = ""
    status: SeatStatus = SeatStatus.available
    type: SeatType = SeatType.regular
    accessible: bool = False


class Curve(WireModel):
    radius: float = Field(gt=0)
    start_angle: float
    end_angle: float


class Row(WireModel):
    id: str = ""
    label: str
    y: float = 0.0
    seats: list[Seat] = Field(default_factory=list)
    curve: Optional[Curve] = None


class Section(WireModel):
    id: str
    name: str
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    curve_radius: Optional[float] = None
    curve_angle: Optional[float] = None
    rows: list[Row] = Field(default_factory=list)
    pricing: str = "standard"
    row_pricing: Optional[dict[str, str]] = None
    color: Optional[str] = None
    section_type: SectionType = SectionType.standard

    @computed_field
    @property
    def seats_per_row(self) -> int:
        return max((len(r.seats) for r in self.rows), default=0)

    @model_validator(mode="after")
    def _curvature_matches_type(self) -> "Section":
        has_params = self.curve_radius is not None and self.curve_angle is not None
        every_row_curved = all(r.curve is not None for r in self.rows)
        # With no rows there is nothing to contradict the declared type.
        curved = has_params and (every_row_curved if self.rows else self.section_type == SectionType.curved)
        if (self.section_type == SectionType.curved) != curved:
            raise ValueError(
                f"section {self.id!r}: section_type={self.section_type.value} but "
                f"curve parameters present={has_params}, every row curved={every_row_curved}"
            )
        return self


class Stage(WireModel):
    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)
    label: str = "STAGE"
    type: str = Field(default="stage", pattern="^stage$")


class Aisle(WireModel):
    id: str = ""
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = Field(ge=0, default=0.0)


class PriceCategory(WireModel):
    id: str
    name: str
    color: str = "#4a5568"
    price: float = Field(ge=0, default=0.0)


class ViewBox(WireModel):
    x: float
    y: float
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class SeatingLayout(WireModel):
    id: Optional[str] = None
    venue_id: str
    name: str
    type: LayoutType = LayoutType.seating_chart
    sections: list[Section] = Field(default_factory=list)
    stage: Stage
    aisles: list[Aisle] = Field(default_factory=list)
    view_box: ViewBox
    price_categories: list[PriceCategory] = Field(default_factory=list)
    configuration: dict[str, Any] = Field(default_factory=dict)

    @computed_field
    @property
    def capacity(self) -> int:
        return sum(len(row.seats) for section in self.sections for row in section.rows)


class DraftSection(WireModel):
    """
    A section as the interactive builder hands it back. `rows` is either the
    generated list of Row objects or just a count next to `seats_per_row` and a
    flat `seats` list.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None
    rotation: Optional[float] = None
    curve_radius: Optional[float] = None
    curve_angle: Optional[float] = None
    rows: Union[list[Row], int, None] = None
    seats_per_row: Optional[int] = None
    seats: Optional[list[Seat]] = None
    pricing: Optional[str] = None
    row_pricing: Optional[dict[str, str]] = None
    color: Optional[str] = None
    section_type: Optional[SectionType] = None
    curved: Optional[bool] = None


class LayoutDraft(WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    venue_id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[LayoutType] = None
    sections: Optional[list[DraftSection]] = None
    stage: Optional[Stage] = None
    aisles: Optional[list[Aisle]] = None
    view_box: Optional[ViewBox] = None
    price_categories: Optional[list[PriceCategory]] = None
    # Accepted for compatibility with older records; always recomputed.
    capacity: Optional[int] = None
    total_capacity: Optional[int] = None


class GenerateLayoutRequest(WireModel):
    venue_name: Optional[str] = None
    venue_type: Optional[str] = None
    # Validated by the generator so a bad hint yields the empty response.
    capacity: Any = None
    layout_type: Optional[str] = None


class GenerateLayoutResponse(WireModel):
    sections: list[Section] = Field(default_factory=list)
    total_capacity: int = 0
    configuration: dict[str, Any] = Field(default_factory=dict)


class SuggestedLayout(WireModel):
    name: str
    type: LayoutType
    sections: Optional[list[str]] = None
    capacity: Optional[int] = None


class VenueProfile(WireModel):
    description: str
    amenities: list[str]
    parking_capacity: int
    suggested_layouts: list[SuggestedLayout]
