"""`warhost options`: list catalog options."""
from __future__ import annotations

from backend.app.catalog import options as catalog_options

KINDS: tuple[str, ...] = ("factions", "subfactions", "planets", "segmentums", "tones")


def register(subparsers) -> None:
    p = subparsers.add_parser("options", help="List factions, subfactions, planets, segmentums or tones")
    p.add_argument("kind", choices=KINDS)
    p.add_argument("--faction", default=None, help="Faction key (required for subfactions)")
    p.add_argument("--segmentum", default=None, help="Filter planets by segmentum")
    p.set_defaults(func=run)


def run(args) -> int:
    if args.kind == "subfactions" and not args.faction:
        print("--faction is required for subfactions")
        return 2

    if args.kind == "factions":
        items = catalog_options.faction_options()
    elif args.kind == "subfactions":
        items = catalog_options.subfaction_options(args.faction)
    elif args.kind == "planets":
        items = catalog_options.planet_options(args.segmentum)
    elif args.kind == "segmentums":
        items = catalog_options.segmentum_options()
    else:
        items = catalog_options.tone_options()

    for item in items:
        print(f"{item['value']}\t{item['label']}")
    return 0
