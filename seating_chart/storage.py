from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .editor import from_record, to_record
from .errors import LayoutNotFound, PersistenceFailure
from .schemas import SeatingLayout


def read_json(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise LayoutNotFound(f"layout file not found: {p}")

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise PersistenceFailure(f"failed to read layout JSON: {e}") from e
    if not isinstance(data, dict):
        raise PersistenceFailure(f"layout JSON must be an object: {p}")
    return data


def load_layout(path: str | Path) -> SeatingLayout:
    return from_record(read_json(path))


def save_layout(layout: SeatingLayout, path: str | Path) -> None:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(to_record(layout), indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except OSError as e:
        raise PersistenceFailure(f"failed to write layout JSON: {e}") from e
