"""Expense dashboard aggregation package."""

from .application import (
    apply_filters,
    build_dashboard,
    compute_drilldown,
    compute_monthly_trend,
    compute_reference_period_breakdown,
    compute_top_category_totals,
    compute_trend_rankings,
    group_sum,
    run_dashboard_pipeline,
)
from .domain import Bucket, FilterSet, Record, TrendEntry
from .ingestion import normalize_record, normalize_records, unwrap_payload

__all__ = [
    "Record",
    "FilterSet",
    "Bucket",
    "TrendEntry",
    "normalize_record",
    "normalize_records",
    "unwrap_payload",
    "group_sum",
    "compute_top_category_totals",
    "compute_monthly_trend",
    "compute_drilldown",
    "compute_reference_period_breakdown",
    "compute_trend_rankings",
    "apply_filters",
    "build_dashboard",
    "run_dashboard_pipeline",
]
