from __future__ import annotations

import csv
import io

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlmodel import Session, select
from starlette.concurrency import run_in_threadpool

from seating_chart.editor import from_record, normalize, to_record
from seating_chart.errors import LayoutNotFound, MalformedEditorInput, PersistenceFailure, SeatingLayoutError
from seating_chart.layout import MANIFEST_COLUMNS, generate_layout, seat_manifest
from seating_chart.log import logger
from seating_chart.schemas import GenerateLayoutResponse, VenueProfile
from seating_chart.templates import venue_profile

from .db import get_session, init_db
from .models import Venue
from .schemas import LayoutSummary, VenueCreate, VenueProfileRequest
from .store import LayoutStore


app = FastAPI(title="Venue Seating Layout API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

layout_store = LayoutStore()


@app.on_event("startup")
def _startup() -> None:
    init_db()


def _session() -> Session:
    return get_session()


def _store() -> LayoutStore:
    return layout_store


def _persistence_error(e: PersistenceFailure) -> HTTPException:
    return HTTPException(status_code=503, detail=f"persistence failure: {e}")


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.get("/generate-layout")
def generate_layout_info() -> dict:
    return {"message": "Layout generation API", "method": "POST"}


@app.post("/generate-layout", response_model=GenerateLayoutResponse)
async def generate_layout_endpoint(request: Request) -> GenerateLayoutResponse:
    # The body is parsed here, not by FastAPI, so unreadable input gets the empty shape instead of a 422.
    try:
        payload = await request.json()
    except ValueError as e:
        logger.error("layout generation failed: unreadable body: {}", e)
        return GenerateLayoutResponse()
    if not isinstance(payload, dict):
        logger.error("layout generation failed: expected an object, got {}", type(payload).__name__)
        return GenerateLayoutResponse()
    return await run_in_threadpool(generate_layout, payload)


@app.post("/generate-venue", response_model=VenueProfile)
def generate_venue(payload: VenueProfileRequest) -> VenueProfile:
    try:
        return venue_profile(payload.venue_name, payload.venue_type, payload.capacity)
    except MalformedEditorInput as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except SeatingLayoutError as e:
        logger.error("venue profile generation failed: {}", e)
        return VenueProfile(description="", amenities=[], parking_capacity=500, suggested_layouts=[])


@app.post("/venues")
def create_venue(payload: VenueCreate, session: Session = Depends(_session)) -> dict:
    v = Venue(**payload.model_dump())
    session.add(v)
    session.commit()
    session.refresh(v)
    return {"id": v.id, "name": v.name}


@app.get("/venues")
def list_venues(session: Session = Depends(_session)) -> list[dict]:
    venues = session.exec(select(Venue).order_by(Venue.created_at.desc())).all()
    return [{"id": v.id, "name": v.name, "venueType": v.venue_type} for v in venues]


@app.post("/venues/{venue_id}/layouts")
async def create_layout(venue_id: int, payload: dict, store: LayoutStore = Depends(_store)) -> dict:
    try:
        if not await store.venue_exists(venue_id):
            raise HTTPException(status_code=404, detail="venue not found")
        layout = normalize(payload, str(venue_id))
        layout_id = await store.create(venue_id, to_record(layout))
    except MalformedEditorInput as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except PersistenceFailure as e:
        raise _persistence_error(e) from e
    return {"id": layout_id, "capacity": layout.capacity}


@app.get("/venues/{venue_id}/layouts", response_model=list[LayoutSummary])
async def list_layouts(venue_id: int, store: LayoutStore = Depends(_store)) -> list[LayoutSummary]:
    try:
        if not await store.venue_exists(venue_id):
            raise HTTPException(status_code=404, detail="venue not found")
        rows = await store.list_for_venue(venue_id)
    except PersistenceFailure as e:
        raise _persistence_error(e) from e
    return [LayoutSummary(**r) for r in rows]


async def _load_or_404(store: LayoutStore, layout_id: str) -> dict:
    try:
        record = await store.load(layout_id)
    except PersistenceFailure as e:
        raise _persistence_error(e) from e
    if record is None:
        raise HTTPException(status_code=404, detail="layout not found")
    return record


@app.get("/layouts/{layout_id}")
async def get_layout(layout_id: str, store: LayoutStore = Depends(_store)) -> dict:
    return await _load_or_404(store, layout_id)


@app.put("/layouts/{layout_id}")
async def update_layout(layout_id: str, payload: dict, store: LayoutStore = Depends(_store)) -> dict:
    existing = await _load_or_404(store, layout_id)
    try:
        layout = normalize({**payload, "id": layout_id}, existing["venueId"])
        await store.update(layout_id, to_record(layout))
    except MalformedEditorInput as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except LayoutNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except PersistenceFailure as e:
        raise _persistence_error(e) from e
    return {"updated": True, "capacity": layout.capacity}


@app.delete("/layouts/{layout_id}")
async def delete_layout(layout_id: str, store: LayoutStore = Depends(_store)) -> dict:
    try:
        deleted = await store.delete(layout_id)
    except PersistenceFailure as e:
        raise _persistence_error(e) from e
    if not deleted:
        raise HTTPException(status_code=404, detail="layout not found")
    return {"deleted": True}


@app.get("/layouts/{layout_id}/seats.csv")
async def export_seats_csv(layout_id: str, store: LayoutStore = Depends(_store)) -> Response:
    record = await _load_or_404(store, layout_id)
    try:
        layout = from_record(record)
    except MalformedEditorInput as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    out = io.StringIO()
    w = csv.DictWriter(out, fieldnames=MANIFEST_COLUMNS)
    w.writeheader()
    w.writerows(seat_manifest(layout))

    return Response(
        content=out.getvalue(),
        media_type="text/csv",
        headers={"content-disposition": f'attachment; filename="layout_{layout_id}_seats.csv"'},
    )
