from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .errors import InvalidDimensions, MalformedEditorInput
from .generator import generate_rows
from .log import logger
from .schemas import LayoutType, Section, SectionType, SuggestedLayout, VenueProfile


class VenueType(str, Enum):
    theater = "theater"
    arena = "arena"
    stadium = "stadium"
    club = "club"
    generic = "generic"

    @classmethod
    def parse(cls, value: object) -> Optional["VenueType"]:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class PricingTier(str, Enum):
    vip = "vip"
    premium = "premium"
    standard = "standard"
    economy = "economy"


@dataclass(frozen=True)
class SectionTemplate:
    id: str
    name: str
    x: float
    y: float
    rows: int
    seats_per_row: int
    pricing: PricingTier
    color: str
    rotation: float = 0.0
    curve_radius: Optional[float] = None
    curve_angle: Optional[float] = None

    @property
    def curved(self) -> bool:
        return self.curve_radius is not None and self.curve_angle is not None

    def build(self) -> Section:
        rows = generate_rows(
            self.rows,
            self.seats_per_row,
            self.curved,
            section_id=self.id,
            category=self.pricing.value,
        )
        return Section(
            id=self.id,
            name=self.name,
            x=self.x,
            y=self.y,
            rotation=self.rotation,
            curve_radius=self.curve_radius,
            curve_angle=self.curve_angle,
            rows=rows,
            pricing=self.pricing.value,
            color=self.color,
            section_type=SectionType.curved if self.curved else SectionType.standard,
        )


def _theater() -> list[SectionTemplate]:
    return [
        SectionTemplate("orchestra", "Orchestra", 400, 200, 15, 30, PricingTier.premium, "#c0c0c0"),
        SectionTemplate(
            "mezzanine", "Mezzanine", 400, 450, 8, 25, PricingTier.standard, "#cd7f32", curve_radius=150, curve_angle=60
        ),
        SectionTemplate(
            "balcony", "Balcony", 400, 600, 5, 20, PricingTier.economy, "#4a5568", curve_radius=200, curve_angle=45
        ),
    ]


def _arena() -> list[SectionTemplate]:
    return [
        SectionTemplate("floor", "Floor", 400, 300, 10, 20, PricingTier.vip, "#ffd700"),
        SectionTemplate("lower-left", "Lower Left", 200, 400, 15, 15, PricingTier.premium, "#c0c0c0", rotation=-30),
        SectionTemplate("lower-right", "Lower Right", 600, 400, 15, 15, PricingTier.premium, "#c0c0c0", rotation=30),
    ]


def _stadium() -> list[SectionTemplate]:
    return [
        SectionTemplate("field-level", "Field Level", 600, 350, 20, 40, PricingTier.vip, "#ffd700"),
        SectionTemplate(
            "lower-deck", "Lower Deck", 600, 650, 25, 50, PricingTier.premium, "#c0c0c0", curve_radius=250, curve_angle=90
        ),
        SectionTemplate(
            "club-level", "Club Level", 600, 900, 10, 40, PricingTier.premium, "#cd7f32", curve_radius=320, curve_angle=80
        ),
        SectionTemplate(
            "upper-deck", "Upper Deck", 600, 1100, 30, 60, PricingTier.economy, "#4a5568", curve_radius=400, curve_angle=100
        ),
    ]


def _club() -> list[SectionTemplate]:
    return [
        SectionTemplate("vip-tables", "VIP Tables", 400, 200, 4, 8, PricingTier.vip, "#ffd700"),
        SectionTemplate("general-admission", "General Admission", 400, 350, 10, 30, PricingTier.standard, "#4a5568"),
    ]


def _generic() -> list[SectionTemplate]:
    return [SectionTemplate("main", "Main Section", 400, 300, 20, 25, PricingTier.standard, "#4a5568")]


TEMPLATES: dict[VenueType, Callable[[], list[SectionTemplate]]] = {
    VenueType.theater: _theater,
    VenueType.arena: _arena,
    VenueType.stadium: _stadium,
    VenueType.club: _club,
    VenueType.generic: _generic,
}


def coerce_capacity_hint(value: object) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidDimensions(f"capacity hint must be a number, got {value!r}")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError as e:
            raise InvalidDimensions(f"capacity hint must be a number, got {value!r}") from e
    if not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise InvalidDimensions(f"capacity hint must be a finite number, got {value!r}")
    if value < 0:
        raise InvalidDimensions(f"capacity hint must be non-negative, got {value}")
    return int(value)


def resolve_venue_type(venue_type: object) -> VenueType:
    vt = VenueType.parse(venue_type)
    if vt is None:
        logger.info("unknown venue type {!r}; using the generic template", venue_type)
        return VenueType.generic
    return vt


def generate_sections(venue_type: object, capacity_hint: object = None) -> list[Section]:
    """
    Sections for a venue archetype. The capacity hint is advisory: templates
    are fixed, so the resulting capacity may differ from it.
    """
    hint = coerce_capacity_hint(capacity_hint)
    vt = resolve_venue_type(venue_type)
    sections = [t.build() for t in TEMPLATES[vt]()]

    seats = sum(len(r.seats) for s in sections for r in s.rows)
    logger.debug("generated {} sections / {} seats for {} (hint={})", len(sections), seats, vt.value, hint)
    return sections


_DESCRIPTIONS: dict[VenueType, str] = {
    VenueType.theater: (
        "{name} is a premier theatrical venue offering an intimate setting for live performances. "
        "With state-of-the-art acoustics and lighting, this theater provides an exceptional experience "
        "for both performers and audiences."
    ),
    VenueType.arena: (
        "{name} is a world-class arena venue designed for large-scale events. Featuring modern amenities "
        "and flexible seating configurations, it's perfect for concerts, sports, and major productions."
    ),
    VenueType.stadium: (
        "{name} is a massive outdoor stadium built for the biggest events. With excellent sightlines and "
        "modern facilities, it hosts everything from concerts to sporting events."
    ),
    VenueType.club: (
        "{name} is an intimate club venue perfect for live music and special events. The space offers a "
        "vibrant atmosphere with excellent acoustics and a full-service bar."
    ),
    VenueType.generic: (
        "{name} is a versatile venue suitable for a wide range of events. With modern facilities and "
        "flexible configurations, it can accommodate various performance and gathering needs."
    ),
}

_AMENITIES: dict[VenueType, list[str]] = {
    VenueType.theater: ["Parking", "Bar", "VIP Lounge", "Accessible", "Air Conditioning", "Coat Check"],
    VenueType.arena: ["Parking", "WiFi", "Food Service", "Bar", "VIP Lounge", "Accessible"],
    VenueType.stadium: ["Parking", "WiFi", "Food Service", "Bar", "VIP Lounge", "Accessible"],
    VenueType.club: ["Bar", "WiFi", "Accessible", "Air Conditioning"],
    VenueType.generic: ["Parking", "WiFi", "Accessible"],
}

PARKING_RATIO: dict[VenueType, float] = {
    VenueType.theater: 0.3,
    VenueType.arena: 0.5,
    VenueType.stadium: 0.7,
    VenueType.club: 0.2,
    VenueType.generic: 0.3,
}


def _suggested_layouts(vt: VenueType, capacity: int) -> list[SuggestedLayout]:
    chart = LayoutType.seating_chart
    ga = LayoutType.general_admission
    if vt is VenueType.theater:
        return [
            SuggestedLayout(name="Standard Theater", type=chart, sections=["Orchestra", "Mezzanine", "Balcony"]),
            SuggestedLayout(name="Cabaret Style", type=chart, sections=["Tables", "Bar Seating"]),
        ]
    if vt is VenueType.arena:
        return [
            SuggestedLayout(
                name="Concert Configuration", type=chart, sections=["Floor", "Lower Bowl", "Upper Bowl", "VIP Boxes"]
            ),
            SuggestedLayout(
                name="Sports Configuration",
                type=chart,
                sections=["Courtside", "Lower Level", "Club Level", "Upper Level"],
            ),
        ]
    if vt is VenueType.stadium:
        return [
            SuggestedLayout(name="Field Level", type=ga, capacity=int(capacity * 0.3)),
            SuggestedLayout(
                name="Stadium Seating", type=chart, sections=["Field Level", "Lower Deck", "Club Level", "Upper Deck"]
            ),
        ]
    if vt is VenueType.club:
        return [
            SuggestedLayout(name="Standing Room", type=ga, capacity=capacity),
            SuggestedLayout(name="VIP Tables", type=chart, sections=["VIP Tables", "General Admission"]),
        ]
    return [SuggestedLayout(name="General Layout", type=ga, capacity=capacity)]


def venue_profile(venue_name: Optional[str], venue_type: object, capacity: object = None) -> VenueProfile:
    """Marketing description, amenities and suggested layouts for a new venue."""
    name = (venue_name or "").strip()
    if not name:
        raise MalformedEditorInput("venue name required")
    cap = coerce_capacity_hint(capacity) or 0
    vt = resolve_venue_type(venue_type)
    return VenueProfile(
        description=_DESCRIPTIONS[vt].format(name=name),
        amenities=list(_AMENITIES[vt]),
        parking_capacity=int(cap * PARKING_RATIO[vt]),
        suggested_layouts=_suggested_layouts(vt, cap),
    )
