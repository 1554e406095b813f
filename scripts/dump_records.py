#!/usr/bin/env python3
"""Dump everything the ledger record store holds.

Loads clients and trips through :class:`RecordStore`, prints them with
their history and documents, and finishes with a statistics summary.

Usage
-----
Set environment variables and run::

    export TRIPLEDGER_BASE_URL="https://records.example.com/api"
    export TRIPLEDGER_PROJECT_ID="my-project"
    export TRIPLEDGER_API_TOKEN="..."
    python scripts/dump_records.py

Options::

    --trip ID            Only dump this trip's history and documents
    --period PERIOD      Statistics period: week, month or year (default: month)
    --json               Output as machine-readable JSON
    --output FILE        Write JSON output to FILE instead of stdout
    --verbose            Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from tripledger import LedgerClient, LedgerConfig, RecordStore, StatisticsPeriod  # noqa: E402


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _print_error(operation: str, message: str) -> None:
    print(f"!! {operation}: {message}", file=sys.stderr)


async def main() -> int:
    parser = argparse.ArgumentParser(
        description="Dump all ledger records for debugging / development.",
    )
    parser.add_argument("--trip", help="Only dump history and documents for this trip id")
    parser.add_argument(
        "--period",
        choices=[p.value for p in StatisticsPeriod],
        default=StatisticsPeriod.MONTH.value,
        help="Statistics period",
    )
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write JSON output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = LedgerConfig.from_env()
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "project_id": config.project_id,
        "clients": [],
        "trips": [],
    }

    out: list[str] = [_section("tripledger dump_records")]
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  project   : {config.project_id}")

    async with LedgerClient(config) as client:
        store = RecordStore(client, on_error=_print_error)
        loaded = await store.load()
        if not loaded:
            print(f"Load failed ({loaded.reason}): {loaded.message}", file=sys.stderr)
            return 1

        out.append(_section(f"CLIENTS ({len(store.clients)})"))
        for c in store.clients:
            out.append(f"  {c.id}  {c.name}  <{c.contact_person}>")
            result["clients"].append(c.wire_fields())

        trips = [t for t in store.trips if not args.trip or t.id == args.trip]
        out.append(_section(f"TRIPS ({len(trips)})"))
        for t in trips:
            out.append(
                f"  {t.id}  {t.date}  {t.start_location} -> {t.end_location}"
                f"  [{t.status}]  client={store.client_label(t.client_id)}"
                f"  income={t.income:.2f} expenses={t.expenses:.2f}"
            )
            entry: dict[str, Any] = {"trip": t.wire_fields(), "history": [], "documents": []}
            if t.id is not None:
                history = await store.get_trip_history(t.id)
                for h in history.unwrap_or([]):
                    out.append(f"      {h.change_date}  changed {', '.join(h.changed_field_names())}")
                    entry["history"].append(h.wire_fields())
                documents = await store.get_documents(t.id)
                for d in documents.unwrap_or([]):
                    out.append(f"      doc {d.document_type}: {d.name} ({d.uri})")
                    entry["documents"].append(d.wire_fields())
            result["trips"].append(entry)

        summary = store.statistics(StatisticsPeriod(args.period))
        result["statistics"] = {
            "period": args.period,
            "trip_count": summary.trip_count,
            "total_income": summary.total_income,
            "total_expenses": summary.total_expenses,
            "total_profit": summary.total_profit,
            "by_status": summary.by_status,
        }
        out.append(_section(f"STATISTICS ({args.period})"))
        out.append(f"  trips     : {summary.trip_count}")
        out.append(f"  income    : {summary.total_income:.2f}")
        out.append(f"  expenses  : {summary.total_expenses:.2f}")
        out.append(f"  profit    : {summary.total_profit:.2f}")
        for status, count in summary.by_status.items():
            out.append(f"  {status:<12}: {count}")

    if args.json_mode or args.output:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    else:
        print("\n".join(out))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
