"""Filter predicate engine plus the record-list helpers of the details view."""

from __future__ import annotations

import math

import polars as pl

from expense_dashboard.application.aggregation import Records
from expense_dashboard.domain.calendar import MONTHS, canonical_month, canonical_month_expr
from expense_dashboard.domain.models import FilterOptions, FilterSet, Page
from expense_dashboard.ingestion import as_frame
from expense_dashboard.logging_setup import get_logger

logger = get_logger(__name__)

ROWS_PER_PAGE = 10


def filter_expr(filters: FilterSet) -> pl.Expr:
    predicate = pl.lit(True)
    if filters.category is not None:
        predicate = predicate & (pl.col("category") == pl.lit(filters.category))
    if filters.city is not None:
        predicate = predicate & (pl.col("city") == pl.lit(filters.city))
    if filters.year is not None:
        predicate = predicate & (pl.col("year") == pl.lit(int(filters.year)))
    if filters.month is not None:
        predicate = predicate & (
            canonical_month_expr() == pl.lit(canonical_month(filters.month))
        )
    return predicate


def apply_filters(records: Records, filters: FilterSet) -> pl.DataFrame:
    """Order-preserving AND of the set filters; month matches case-insensitively."""
    frame = as_frame(records)
    if filters.is_empty():
        return frame
    filtered = frame.filter(filter_expr(filters))
    logger.info("Filters applied: filters=%s rows=%d/%d", filters.to_dict(), filtered.height, frame.height)
    return filtered


def trend_scope(filters: FilterSet) -> FilterSet:
    """Filters for the trend ranking, which always spans every month."""
    return filters.without_month()


def _distinct_text(frame: pl.DataFrame, column: str) -> tuple[str, ...]:
    values = frame.select(pl.col(column).drop_nulls().unique()).to_series(0).to_list()
    return tuple(sorted(str(value) for value in values if value != ""))


def filter_options(records: Records) -> FilterOptions:
    frame = as_frame(records)
    years = frame.select(pl.col("year").drop_nulls().unique()).to_series(0).to_list()
    return FilterOptions(
        categories=_distinct_text(frame, "category"),
        cities=_distinct_text(frame, "city"),
        years=tuple(sorted((int(year) for year in years), reverse=True)),
        months=MONTHS,
    )


def search_records(records: Records, term: str | None) -> pl.DataFrame:
    """Rows where any field, rendered as text, contains ``term`` (case-insensitive)."""
    frame = as_frame(records)
    if not term:
        return frame
    needle = term.lower()
    matches = [
        pl.col(column).cast(pl.Utf8, strict=False).fill_null("").str.to_lowercase().str.contains(needle, literal=True)
        for column in frame.columns
    ]
    if not matches:
        return frame
    return frame.filter(pl.any_horizontal(matches))


def paginate(records: Records, page: int = 1, rows_per_page: int = ROWS_PER_PAGE) -> Page:
    if rows_per_page <= 0:
        raise ValueError(f"rows_per_page must be positive, got {rows_per_page}")
    frame = as_frame(records)
    total_rows = int(frame.height)
    total_pages = math.ceil(total_rows / rows_per_page)
    current = min(max(page, 1), max(total_pages, 1))
    rows = frame.slice((current - 1) * rows_per_page, rows_per_page)
    return Page(rows=rows, page=current, total_pages=total_pages, total_rows=total_rows)
