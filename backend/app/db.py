from __future__ import annotations

import os
from pathlib import Path

from sqlmodel import Session, SQLModel, create_engine


def _default_db_url() -> str:
    # Keep data out of git by default.
    data_dir = Path(os.environ.get("VENUE_LAYOUT_DATA_DIR", Path.cwd() / "data"))
    data_dir.mkdir(parents=True, exist_ok=True)
    db_path = data_dir / "venue_layouts.db"
    return f"sqlite:///{db_path}"


def _connect_args(url: str) -> dict:
    # Layout store calls run on threadpool workers, not the thread that opened the connection.
    return {"check_same_thread": False} if url.startswith("sqlite") else {}


def layout_cache_ttl_seconds() -> float:
    """How long a loaded layout record is served from the store cache (0 disables it)."""
    return float(os.environ.get("LAYOUT_CACHE_TTL_SECONDS", "30"))


DB_URL = os.environ.get("VENUE_LAYOUT_DB_URL") or _default_db_url()

engine = create_engine(DB_URL, echo=False, connect_args=_connect_args(DB_URL))


def init_db() -> None:
    from . import models  # noqa: F401 - ensure layout tables are registered

    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine)
