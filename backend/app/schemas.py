from __future__ import annotations

from typing import Any, Optional

from seating_chart.schemas import WireModel


class VenueCreate(WireModel):
    name: str
    venue_type: Optional[str] = None


class VenueProfileRequest(WireModel):
    venue_name: Optional[str] = None
    venue_type: Optional[str] = None
    capacity: Any = None


class LayoutSummary(WireModel):
    id: str
    name: str
    type: str
    capacity: int
