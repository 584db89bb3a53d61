from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pinewood.core.logging_config import setup_logging
from pinewood.core.models import DEFAULT_DENS
from pinewood.core.paths import default_database_path
from pinewood.services.checkin_service import check_in_scout, export_roster, open_checkin_store
from pinewood.storage.sqlite_store import (
    CheckinError,
    CheckinStore,
    NotFound,
    UniquenessViolation,
)

log = logging.getLogger(__name__)

EXIT_STORAGE = 1
EXIT_DUPLICATE = 2
EXIT_NOT_FOUND = 3


def cmd_init(store: CheckinStore, args: argparse.Namespace) -> None:
    print(f"Initialized {store.path}")


def cmd_checkin(store: CheckinStore, args: argparse.Namespace) -> None:
    scout = check_in_scout(
        store,
        name=args.name,
        den=args.den,
        car_weight=args.weight,
        car_number=args.car_number,
    )
    print(f"Checked in {scout.name} ({scout.den}) as car #{scout.car_number} [id {scout.id}]")


def cmd_show(store: CheckinStore, args: argparse.Namespace) -> None:
    scout = store.get(args.id)
    print(scout.model_dump_json(indent=2))


def cmd_list(store: CheckinStore, args: argparse.Namespace) -> None:
    scouts = store.list_checked_in()
    if args.json:
        print(json.dumps([scout.model_dump() for scout in scouts], indent=2))
        return
    if not scouts:
        print("No scouts checked in")
        return
    for scout in scouts:
        print(
            f"#{scout.car_number:<4} {scout.name:<24} {scout.den:<16} "
            f"{scout.car_weight:5.2f} oz  {scout.created_at}"
        )


def cmd_next_number(store: CheckinStore, args: argparse.Namespace) -> None:
    print(store.next_car_number())


def cmd_config(store: CheckinStore, args: argparse.Namespace) -> None:
    print(store.race_config().model_dump_json(indent=2))


def cmd_export(store: CheckinStore, args: argparse.Namespace) -> None:
    out_path = export_roster(store, args.output)
    print(f"Exported roster to {out_path}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("pinewood", description="Race-day check-in")
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="database file (default: $PINEWOOD_DB or the app data directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")
    parser.add_argument("--log-dir", type=Path, default=None, help="directory for log files")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("init")
    sp.set_defaults(func=cmd_init)

    sp = sub.add_parser("checkin")
    sp.add_argument("name")
    sp.add_argument("--den", required=True, help=f"e.g. {', '.join(DEFAULT_DENS)}")
    sp.add_argument("--weight", type=float, required=True, help="car weight in ounces")
    sp.add_argument(
        "--car-number",
        type=int,
        default=None,
        help="defaults to the next available number",
    )
    sp.set_defaults(func=cmd_checkin)

    sp = sub.add_parser("show")
    sp.add_argument("id", type=int)
    sp.set_defaults(func=cmd_show)

    sp = sub.add_parser("list")
    sp.add_argument("--json", action="store_true")
    sp.set_defaults(func=cmd_list)

    sp = sub.add_parser("next-number")
    sp.set_defaults(func=cmd_next_number)

    sp = sub.add_parser("config")
    sp.set_defaults(func=cmd_config)

    sp = sub.add_parser("export")
    sp.add_argument("output", type=Path)
    sp.set_defaults(func=cmd_export)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logging(
            console_level=logging.DEBUG if args.verbose else logging.WARNING,
            log_dir=args.log_dir,
        )
    except OSError as exc:
        print(f"error: cannot set up logging: {exc}", file=sys.stderr)
        return EXIT_STORAGE

    db_path = args.db or default_database_path()
    try:
        with open_checkin_store(db_path) as store:
            args.func(store, args)
    except UniquenessViolation as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_DUPLICATE
    except NotFound as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except CheckinError as exc:
        log.error("%s", exc)
        return EXIT_STORAGE
    except OSError as exc:
        log.error("%s failed: %s", args.cmd, exc)
        return EXIT_STORAGE
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
