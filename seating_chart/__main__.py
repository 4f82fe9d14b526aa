from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path

from .editor import normalize
from .errors import SeatingLayoutError
from .layout import MANIFEST_COLUMNS, generate_seating_layout, seat_manifest
from .storage import load_layout, read_json, save_layout
from .templates import VenueType


DEFAULT_FILE = "seating_layout.json"


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--file",
        default=DEFAULT_FILE,
        help=f"Path to layout JSON file (default: {DEFAULT_FILE})",
    )


def cmd_generate(args: argparse.Namespace) -> int:
    layout = generate_seating_layout(
        args.venue_type,
        venue_id=args.venue_id,
        name=args.name or f"{args.venue_type.title()} Layout",
        capacity_hint=args.capacity,
    )
    save_layout(layout, args.file)
    print(f"Generated {len(layout.sections)} sections ({layout.capacity} seats) at {args.file}")
    return 0


def cmd_normalize(args: argparse.Namespace) -> int:
    draft = read_json(args.input)
    layout = normalize(draft, args.venue_id)
    save_layout(layout, args.file)
    print(f"Normalized {args.input} into {args.file} ({layout.capacity} seats)")
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    layout = load_layout(args.file)
    print(f"{layout.name} [{layout.type.value}] venue={layout.venue_id} capacity={layout.capacity}")
    for s in layout.sections:
        seats = sum(len(r.seats) for r in s.rows)
        accessible = sum(1 for r in s.rows for seat in r.seats if seat.accessible)
        print(
            f"  {s.name:<20} {s.section_type.value:<8} rows={len(s.rows):<3} "
            f"seats={seats:<5} accessible={accessible:<4} pricing={s.pricing}"
        )
    return 0


def cmd_export_csv(args: argparse.Namespace) -> int:
    layout = load_layout(args.file)
    out = Path(args.output)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=MANIFEST_COLUMNS)
        w.writeheader()
        w.writerows(seat_manifest(layout))
    print(f"Exported {layout.capacity} seats to {out}")
    return 0


def cmd_show_json(args: argparse.Namespace) -> int:
    print(json.dumps(read_json(args.file), indent=2, sort_keys=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="seating_chart", description="Venue seating layout generator (CLI).")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_gen = sub.add_parser("generate", help="Generate a layout from a venue archetype")
    _add_common_args(p_gen)
    p_gen.add_argument("--venue-type", default=VenueType.generic.value, help="theater, arena, stadium, club or generic")
    p_gen.add_argument("--venue-id", required=True)
    p_gen.add_argument("--name")
    p_gen.add_argument("--capacity", help="Advisory capacity hint")
    p_gen.set_defaults(func=cmd_generate)

    p_norm = sub.add_parser("normalize", help="Normalize a layout builder draft into a canonical layout")
    _add_common_args(p_norm)
    p_norm.add_argument("--input", required=True)
    p_norm.add_argument("--venue-id", required=True)
    p_norm.set_defaults(func=cmd_normalize)

    p_sum = sub.add_parser("summary", help="Print per-section capacity")
    _add_common_args(p_sum)
    p_sum.set_defaults(func=cmd_summary)

    p_show = sub.add_parser("show", help="Print the layout JSON")
    _add_common_args(p_show)
    p_show.set_defaults(func=cmd_show_json)

    p_export = sub.add_parser("export-csv", help="Export the seat manifest to a CSV file")
    _add_common_args(p_export)
    p_export.add_argument("--output", required=True)
    p_export.set_defaults(func=cmd_export_csv)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        return int(args.func(args))
    except SeatingLayoutError as e:
        print(f"Error: {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
