"""Application layer package."""

from .aggregation import compute_monthly_trend, compute_summary_stats, compute_top_category_totals, group_sum
from .dashboard_service import DashboardResult, build_dashboard, dashboard_summary, run_dashboard_pipeline
from .drilldown import (
    DrilldownSession,
    DrilldownState,
    DrilldownStateError,
    compute_drilldown,
    compute_reference_period_breakdown,
)
from .filters import apply_filters, filter_options, paginate, search_records, trend_scope
from .trends import compute_trend_rankings

__all__ = [
    "group_sum",
    "compute_top_category_totals",
    "compute_monthly_trend",
    "compute_summary_stats",
    "compute_drilldown",
    "compute_reference_period_breakdown",
    "DrilldownSession",
    "DrilldownState",
    "DrilldownStateError",
    "compute_trend_rankings",
    "apply_filters",
    "filter_options",
    "search_records",
    "paginate",
    "trend_scope",
    "DashboardResult",
    "build_dashboard",
    "dashboard_summary",
    "run_dashboard_pipeline",
]
