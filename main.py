"""Expense dashboard entrypoint."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from expense_dashboard.application import run_dashboard_pipeline
from expense_dashboard.domain import FilterSet
from expense_dashboard.logging_setup import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    project_root = Path(__file__).resolve().parent
    parser = argparse.ArgumentParser(description="Aggregate an expense payload into dashboard summaries.")
    parser.add_argument("--input", type=Path, default=project_root / "data" / "raw" / "payload.json")
    parser.add_argument("--output-dir", type=Path, default=project_root / "output")
    parser.add_argument("--category")
    parser.add_argument("--city")
    parser.add_argument("--year", type=int)
    parser.add_argument("--month")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--print-summary", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    configure_logging(args.log_level)
    filters = FilterSet(category=args.category, city=args.city, year=args.year, month=args.month)
    summary = run_dashboard_pipeline(args.input, args.output_dir, filters)
    if args.print_summary:
        print(json.dumps(summary, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
