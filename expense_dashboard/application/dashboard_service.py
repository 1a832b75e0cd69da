"""Application service assembling every dashboard aggregate for one filter state."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Any

import polars as pl

from expense_dashboard.application.aggregation import (
    Records,
    compute_monthly_trend,
    compute_summary_stats,
    compute_top_category_totals,
)
from expense_dashboard.application.drilldown import compute_drilldown
from expense_dashboard.application.filters import apply_filters, filter_options, trend_scope
from expense_dashboard.application.reporting.metrics import fmt_change, fmt_money, fmt_share
from expense_dashboard.application.trends import compute_trend_rankings
from expense_dashboard.domain.calendar import short_month_label
from expense_dashboard.domain.models import (
    Bucket,
    FilterOptions,
    FilterSet,
    InsufficientData,
    SummaryStats,
    TrendEntry,
    TrendRankings,
)
from expense_dashboard.infrastructure.payload_repository import load_records
from expense_dashboard.infrastructure.report_exporter import save_output_workbook, save_summary_json, sheet_frame
from expense_dashboard.ingestion import as_frame
from expense_dashboard.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class DashboardResult:
    filters: FilterSet
    filtered: pl.DataFrame
    stats: SummaryStats
    top_categories: list[Bucket]
    monthly_trend: list[Bucket]
    trend_rankings: TrendRankings | InsufficientData
    options: FilterOptions


def build_dashboard(records: Records, filters: FilterSet | None = None) -> DashboardResult:
    """Recompute every aggregate from scratch for the given filter state."""
    active = filters or FilterSet()
    frame = as_frame(records)
    filtered = apply_filters(frame, active)
    return DashboardResult(
        filters=active,
        filtered=filtered,
        stats=compute_summary_stats(filtered),
        top_categories=compute_top_category_totals(filtered),
        monthly_trend=compute_monthly_trend(filtered),
        trend_rankings=compute_trend_rankings(apply_filters(frame, trend_scope(active))),
        options=filter_options(frame),
    )


def _bucket_rows(buckets: list[Bucket]) -> list[dict[str, Any]]:
    return [{"key": bucket.key, "total": bucket.total, "total_text": fmt_money(bucket.total)} for bucket in buckets]


def _drilldown_block(result: DashboardResult) -> dict[str, Any]:
    blocks: dict[str, Any] = {}
    for bucket in result.top_categories:
        breakdown = compute_drilldown(result.filtered, bucket.key)
        rows = breakdown.to_dict()
        for row in rows["buckets"]:
            row["share_text"] = fmt_share(row["share"])
        blocks[bucket.key] = rows
    return blocks


def _trend_rows(entries: tuple[TrendEntry, ...]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for entry in entries:
        row = entry.to_dict()
        row["change_text"] = fmt_change(entry.change_percent)
        row["previous_text"] = fmt_money(entry.previous_value)
        row["current_text"] = fmt_money(entry.current_value)
        rows.append(row)
    return rows


def dashboard_summary(result: DashboardResult) -> dict[str, Any]:
    """JSON-ready view of a dashboard result."""
    rankings = result.trend_rankings
    if isinstance(rankings, TrendRankings):
        trend_block: dict[str, Any] = {
            "insufficient_data": False,
            "period1_label": rankings.period1_label,
            "period2_label": rankings.period2_label,
            "growing": _trend_rows(rankings.growing),
            "declining": _trend_rows(rankings.declining),
        }
    else:
        trend_block = rankings.to_dict()

    monthly_rows = _bucket_rows(result.monthly_trend)
    for row in monthly_rows:
        row["label"] = short_month_label(row["key"])

    return {
        "filters": result.filters.to_dict(),
        "stats": {
            "total_value": result.stats.total_value,
            "total_value_text": fmt_money(result.stats.total_value),
            "total_records": result.stats.total_records,
            "unique_categories": result.stats.unique_categories,
        },
        "top_categories": _bucket_rows(result.top_categories),
        "monthly_trend": monthly_rows,
        "trend_rankings": trend_block,
        "drilldowns": _drilldown_block(result),
        "filter_options": {
            "categories": list(result.options.categories),
            "cities": list(result.options.cities),
            "years": list(result.options.years),
            "months": list(result.options.months),
        },
    }


def dashboard_sheets(result: DashboardResult, summary: dict[str, Any]) -> dict[str, pl.DataFrame]:
    trend_columns = ["name", "change_percent", "change_text", "previous_value", "current_value"]
    trend_block = summary["trend_rankings"]
    return {
        "records": result.filtered,
        "top_categories": sheet_frame(summary["top_categories"], ["key", "total"]),
        "monthly_trend": sheet_frame(summary["monthly_trend"], ["key", "label", "total"]),
        "growing": sheet_frame(trend_block.get("growing", []), trend_columns),
        "declining": sheet_frame(trend_block.get("declining", []), trend_columns),
    }


def run_dashboard_pipeline(
    input_path: Path,
    output_dir: Path,
    filters: FilterSet | None = None,
) -> dict[str, Any]:
    pipeline_start = perf_counter()
    stage_start = pipeline_start
    stage_timings: list[tuple[str, float]] = []

    def _mark(stage_name: str) -> None:
        nonlocal stage_start
        now = perf_counter()
        stage_timings.append((stage_name, now - stage_start))
        stage_start = now

    output_json_path = output_dir / "summary.json"
    output_excel_path = output_dir / "summary.xlsx"

    records = load_records(input_path)
    _mark("load_records")
    result = build_dashboard(records, filters)
    _mark("build_dashboard")
    summary = dashboard_summary(result)
    _mark("build_summary")

    save_summary_json(output_json_path, summary)
    _mark("save_json")
    excel_saved, excel_error_message = save_output_workbook(output_excel_path, dashboard_sheets(result, summary))
    _mark("save_excel")
    total_elapsed = perf_counter() - pipeline_start

    print(
        "Summary prepared: "
        f"records={result.stats.total_records}, "
        f"top_categories={len(result.top_categories)}, "
        f"insufficient_trend_data={result.trend_rankings.insufficient_data}"
    )
    stage_text = ", ".join([f"{name}={seconds:.3f}s" for name, seconds in stage_timings])
    print(f"Stage Timing: {stage_text}")
    print(f"Total Elapsed: {total_elapsed:.3f}s")
    print(f"Saved JSON: {output_json_path}")
    if excel_saved:
        print(f"Saved Excel: {output_excel_path}")
    else:
        print(f"Excel save skipped (file may be open/locked): {excel_error_message}")
    return summary
