from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _layout_id() -> str:
    return uuid.uuid4().hex


class Venue(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    venue_type: Optional[str] = None

    created_at: datetime = Field(default_factory=_utc_now)


class LayoutDocument(SQLModel, table=True):
    id: str = Field(default_factory=_layout_id, primary_key=True)
    venue_id: int = Field(index=True, foreign_key="venue.id")
    name: str
    type: str = "seating_chart"
    capacity: int = 0

    # Canonical layout record (camelCase JSON); see seating_chart.editor.to_record.
    document_json: str

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    def document(self) -> dict:
        return json.loads(self.document_json)
