"""Domain layer package."""

from .calendar import MONTHS, month_index, month_label, period_label
from .models import (
    NOT_SPECIFIED,
    RECORD_SCHEMA,
    Bucket,
    DrilldownResult,
    FilterOptions,
    FilterSet,
    InsufficientData,
    Page,
    Record,
    SummaryStats,
    TrendEntry,
    TrendRankings,
)

__all__ = [
    "MONTHS",
    "month_index",
    "month_label",
    "period_label",
    "NOT_SPECIFIED",
    "RECORD_SCHEMA",
    "Bucket",
    "DrilldownResult",
    "FilterOptions",
    "FilterSet",
    "InsufficientData",
    "Page",
    "Record",
    "SummaryStats",
    "TrendEntry",
    "TrendRankings",
]
