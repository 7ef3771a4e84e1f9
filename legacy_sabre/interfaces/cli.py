"""
interfaces/cli.py
──────────────────────────────────────────────────────────────────────────────
Command-line interface for the Sabre SOAP client.

Every invocation opens a session, runs one command and always closes the
session again.

Usage:
  # Queue counts for the configured PCC
  python -m legacy_sabre.interfaces.cli queue-count

  # First item on queue 50 of another PCC, as JSON
  python -m legacy_sabre.interfaces.cli --json queue-access 50 --pcc ABCD

  # Booking ids on queue 50
  legacy-sabre queue-list 50

  # Convert 100 USD to EUR
  legacy-sabre currency 100 USD EUR

  # Yesterday's sales report
  legacy-sabre daily-sales --date 2025-03-13

Exit codes:
  0 — success
  1 — fatal error (credentials, fault, error in response …)
  2 — argument error
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from legacy_sabre.domain.exceptions import SabreError
from legacy_sabre.services.client import LegacySabre
from legacy_sabre.services.container import create_client

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="legacy-sabre",
        description="Run a single Sabre SOAP operation inside a fresh session.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON.",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    count = sub.add_parser("queue-count", help="Count items on every queue.")
    count.add_argument("--pcc", help="Pseudo city code (default: SABRE_ORGANIZATION).")

    access = sub.add_parser("queue-access", help="Show the first item of a queue.")
    access.add_argument("number", help="Queue number.")
    access.add_argument("--pcc", help="Pseudo city code (default: SABRE_ORGANIZATION).")

    listing = sub.add_parser("queue-list", help="List booking ids on a queue.")
    listing.add_argument("number", help="Queue number.")
    listing.add_argument("--pcc", help="Pseudo city code (default: SABRE_ORGANIZATION).")

    currency = sub.add_parser("currency", help="Convert an amount between currencies.")
    currency.add_argument("amount", help="Amount in the source currency.")
    currency.add_argument("source", help="Source currency code, e.g. USD.")
    currency.add_argument("destination", help="Destination currency code, e.g. EUR.")

    sales = sub.add_parser("daily-sales", help="Show the daily sales report.")
    sales.add_argument(
        "--date",
        type=date.fromisoformat,
        dest="report_date",
        help="Report date YYYY-MM-DD (default: today).",
    )
    sales.add_argument("--pcc", help="Pseudo city code (default: SABRE_ORGANIZATION).")
    return p


# ── Formatting helpers ─────────────────────────────────────────────────────

def _print_text(command: str, result) -> None:
    print(f"\n{'─' * 60}")
    if command == "queue-count":
        print(f"PCC   : {result.pcc}  |  Total: {result.total}")
        print(f"{'─' * 60}")
        for q in result.queues:
            print(f"  Queue {q.number:>4}  {q.count:>6}")
    elif command == "queue-access":
        print(f"Booking : {result.booking_id or '—'}")
        print(f"{'─' * 60}")
        for n in result.notifications:
            print(f"  [Q{n.queue}] {n.message}")
    elif command == "queue-list":
        print(f"Queue : {result.queue}  |  Bookings: {len(result.booking_ids)}")
        print(f"{'─' * 60}")
        for booking_id in result.booking_ids:
            print(f"  {booking_id}")
    elif command == "currency":
        print(f"{result.amount} {result.source} = {result.converted} {result.destination}")
        print(f"Rate  : {result.rate}")
    elif command == "daily-sales":
        print(f"Date  : {result.date}  |  PCC: {result.pcc}  |  Total: {result.total}")
        print(f"{'─' * 60}")
        for item in result.items:
            print(
                f"  {item.document_number}  {item.record_locator or '':<6}  "
                f"{item.amount:>10} {item.currency or ''}  {item.type or ''}"
            )
    print()


def _print_json(command: str, result) -> None:
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


# ── Main logic ─────────────────────────────────────────────────────────────

def _execute(client: LegacySabre, args: argparse.Namespace):
    if args.command == "queue-count":
        return client.queue.count(args.pcc)
    if args.command == "queue-access":
        result = client.queue.access(args.number, args.pcc)
        client.queue.exit()
        return result
    if args.command == "queue-list":
        return client.queue.access_list(args.number, args.pcc)
    if args.command == "currency":
        return client.currency.convert(args.amount, args.source, args.destination)
    if args.command == "daily-sales":
        return client.daily_sales.report(args.report_date, args.pcc)
    raise ValueError(f"Unknown command {args.command!r}")


def run(args: argparse.Namespace, client: LegacySabre | None = None) -> int:
    """Execute one command inside a session.

    Returns:
        Exit code (0 = success, 1 = error).
    """
    printer = _print_json if args.json_output else _print_text

    try:
        client = client or create_client()
    except SabreError as exc:
        logger.exception("Failed to initialise client")
        print(f"ERROR: Client initialisation failed: {exc}", file=sys.stderr)
        return 1

    try:
        with client:
            result = _execute(client, args)
        printer(args.command, result)
    except SabreError as exc:
        logger.exception("%s failed", args.command)
        print(f"ERROR [{exc.name} {exc.status_code}]: {exc}", file=sys.stderr)
        return 1
    return 0


def main() -> None:
    """Entry point for the legacy-sabre console script."""
    parser = _build_parser()
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(2)

    sys.exit(run(args))


if __name__ == "__main__":
    main()
