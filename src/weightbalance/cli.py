"""CLI entry point: database setup and report listing."""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from weightbalance.db.engine import SessionLocal, get_engine, init_db
from weightbalance.errors import RecordError
from weightbalance.report.render import format_report_text
from weightbalance.storage.flight_records import get_flight_record, list_flight_records


def cmd_init_db(args: argparse.Namespace) -> int:
    init_db(get_engine(args.db_url))
    print("Tables created.")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    get_engine(args.db_url)
    with SessionLocal() as session:
        records = list_flight_records(session)
    if not records:
        print("No reports.")
        return 0
    for r in records:
        print(
            f"  {r.id:>5}  {r.loading_index_doc:<16} {r.weight_report_doc:<16} "
            f"{r.report_date.isoformat()}  {r.aircraft_reg or '-'}"
        )
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    get_engine(args.db_url)
    with SessionLocal() as session:
        record = get_flight_record(session, args.id)
    print(format_report_text(record))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="weightbalance",
        description="Aircraft weight-and-balance report records",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--db-url", default=None,
        help="SQLAlchemy database URL (default: from ENVIRONMENT/DATABASE_URL/DATA_DIR)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init-db", help="Create all tables")
    init_parser.set_defaults(func=cmd_init_db)

    list_parser = subparsers.add_parser("list", help="List reports, newest first")
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser("show", help="Print one report with its details and totals")
    show_parser.add_argument("id", type=int, help="Flight record ID")
    show_parser.set_defaults(func=cmd_show)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        return args.func(args)
    except RecordError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
