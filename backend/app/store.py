from __future__ import annotations

import copy
import json
import time
from datetime import datetime, timezone
from typing import Any, Callable, Generic, Hashable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from starlette.concurrency import run_in_threadpool

from seating_chart.errors import LayoutNotFound, PersistenceFailure
from seating_chart.log import logger

from .db import get_session, layout_cache_ttl_seconds
from .models import LayoutDocument, Venue

V = TypeVar("V")


class TTLCache(Generic[V]):
    """
    key -> (value, stored_at). Entries older than `ttl_seconds` are treated as
    missing; they are dropped when read and swept on every write.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[V, float]] = {}

    def get(self, key: Hashable) -> Optional[V]:
        hit = self._entries.get(key)
        if hit is None:
            return None
        value, stored_at = hit
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: V) -> None:
        if self.ttl_seconds <= 0:
            return
        now = self._clock()
        self._sweep(now)
        self._entries[key] = (value, now)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (_, stored_at) in self._entries.items() if now - stored_at >= self.ttl_seconds]
        for k in expired:
            del self._entries[k]

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class LayoutStore:
    """
    Persistence collaborator for canonical layout records.

    Blocking SQLModel work runs in the threadpool; callers await the result.
    Database errors surface as PersistenceFailure and are not retried here.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = get_session,
        cache: Optional[TTLCache[dict[str, Any]]] = None,
    ):
        self._session_factory = session_factory
        self.cache: TTLCache[dict[str, Any]] = cache if cache is not None else TTLCache(layout_cache_ttl_seconds())
        self._writes = 0

    async def _run(self, fn: Callable[..., V], *args: Any) -> V:
        try:
            return await run_in_threadpool(fn, *args)
        except SQLAlchemyError as e:
            logger.error("layout store failure in {}: {}", fn.__name__, e)
            raise PersistenceFailure(str(e)) from e

    # -- sync bodies -----------------------------------------------------

    def _venue_exists(self, venue_id: int) -> bool:
        with self._session_factory() as session:
            return session.get(Venue, venue_id) is not None

    def _create(self, venue_id: int, record: dict[str, Any]) -> str:
        with self._session_factory() as session:
            doc = LayoutDocument(
                venue_id=venue_id,
                name=record.get("name", ""),
                type=record.get("type", "seating_chart"),
                capacity=int(record.get("capacity", 0)),
                document_json="{}",
            )
            # The stored record carries its own id.
            doc.document_json = json.dumps({**record, "id": doc.id}, sort_keys=True)
            session.add(doc)
            session.commit()
            return doc.id

    def _update(self, layout_id: str, record: dict[str, Any]) -> None:
        with self._session_factory() as session:
            doc = session.get(LayoutDocument, layout_id)
            if not doc:
                raise LayoutNotFound(f"layout not found: {layout_id}")
            merged = {**doc.document(), **record, "id": layout_id}
            doc.name = merged.get("name", doc.name)
            doc.type = merged.get("type", doc.type)
            doc.capacity = int(merged.get("capacity", doc.capacity))
            doc.document_json = json.dumps(merged, sort_keys=True)
            doc.updated_at = datetime.now(timezone.utc)
            session.add(doc)
            session.commit()

    def _load(self, layout_id: str) -> Optional[dict[str, Any]]:
        with self._session_factory() as session:
            doc = session.get(LayoutDocument, layout_id)
            return doc.document() if doc else None

    def _delete(self, layout_id: str) -> bool:
        with self._session_factory() as session:
            doc = session.get(LayoutDocument, layout_id)
            if not doc:
                return False
            session.delete(doc)
            session.commit()
            return True

    def _list_for_venue(self, venue_id: int) -> list[dict[str, Any]]:
        with self._session_factory() as session:
            docs = session.exec(
                select(LayoutDocument).where(LayoutDocument.venue_id == venue_id).order_by(LayoutDocument.created_at)
            ).all()
            return [{"id": d.id, "name": d.name, "type": d.type, "capacity": d.capacity} for d in docs]

    # -- async contract --------------------------------------------------

    async def venue_exists(self, venue_id: int) -> bool:
        return await self._run(self._venue_exists, venue_id)

    async def create(self, venue_id: int, record: dict[str, Any]) -> str:
        layout_id = await self._run(self._create, venue_id, record)
        logger.info("created layout {} for venue {} ({} seats)", layout_id, venue_id, record.get("capacity", 0))
        return layout_id

    async def update(self, layout_id: str, record: dict[str, Any]) -> None:
        self._writes += 1
        try:
            await self._run(self._update, layout_id, record)
        finally:
            self._writes += 1
            self.cache.invalidate(layout_id)
        logger.info("updated layout {}", layout_id)

    async def load(self, layout_id: str) -> Optional[dict[str, Any]]:
        cached = self.cache.get(layout_id)
        if cached is not None:
            return copy.deepcopy(cached)
        writes_before = self._writes
        record = await self._run(self._load, layout_id)
        if record is not None:
            # Only cache reads that no update/delete overlapped.
            if self._writes == writes_before:
                self.cache.set(layout_id, record)
            return copy.deepcopy(record)
        return None

    async def delete(self, layout_id: str) -> bool:
        self._writes += 1
        try:
            deleted = await self._run(self._delete, layout_id)
        finally:
            self._writes += 1
            self.cache.invalidate(layout_id)
        if deleted:
            logger.info("deleted layout {}", layout_id)
        return deleted

    async def list_for_venue(self, venue_id: int) -> list[dict[str, Any]]:
        return await self._run(self._list_for_venue, venue_id)
