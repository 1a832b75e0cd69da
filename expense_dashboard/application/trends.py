"""Month-over-month ranking of broad subcategories."""

from __future__ import annotations

import polars as pl

from expense_dashboard.application.aggregation import Records
from expense_dashboard.application.reporting.metrics import change_percent_expr
from expense_dashboard.domain.calendar import MONTH_INDEX, MONTHS, canonical_month_expr, period_label
from expense_dashboard.domain.models import InsufficientData, TrendEntry, TrendRankings
from expense_dashboard.ingestion import as_frame
from expense_dashboard.logging_setup import get_logger

logger = get_logger(__name__)

TREND_LIMIT = 5


def _month_index_expr() -> pl.Expr:
    return (
        canonical_month_expr()
        .replace_strict(MONTH_INDEX, default=None, return_dtype=pl.Int64)
    )


def _eligible_frame(frame: pl.DataFrame) -> pl.DataFrame:
    name = pl.col("broad_subcategory").cast(pl.Utf8, strict=False)
    return (
        frame.select(
            [
                name.alias("name"),
                pl.col("amount").cast(pl.Float64, strict=False).fill_null(0.0).alias("amount"),
                pl.col("year").cast(pl.Int64, strict=False).alias("year"),
                _month_index_expr().alias("month_index"),
            ]
        )
        .filter(
            pl.col("name").is_not_null()
            & (pl.col("name") != "")
            & (pl.col("amount") > 0)
            & pl.col("month_index").is_not_null()
            & pl.col("year").is_not_null()
            & (pl.col("year") != 0)
        )
    )


def _to_entries(frame: pl.DataFrame) -> tuple[TrendEntry, ...]:
    return tuple(
        TrendEntry(
            name=str(row["name"]),
            change_percent=float(row["change_percent"]),
            previous_value=float(row["previous_value"]),
            current_value=float(row["current_value"]),
        )
        for row in frame.iter_rows(named=True)
    )


def compute_trend_rankings(records: Records, limit: int = TREND_LIMIT) -> TrendRankings | InsufficientData:
    """Rank broad subcategories by change between the two latest (year, month) periods.

    Only positive amounts count. A subcategory absent from the previous period
    is new (+inf), one absent from the current period changed by -100, and an
    exact 0% change is left out of both lists. Growing is sorted descending,
    declining ascending, each truncated to ``limit``.
    """
    eligible = _eligible_frame(as_frame(records))
    periods = (
        eligible.select(["year", "month_index"])
        .unique()
        .sort(["year", "month_index"], descending=True)
        .head(2)
    )
    if periods.height < 2:
        logger.info("Trend ranking skipped: %d distinct period(s), need 2", periods.height)
        return InsufficientData()

    (curr_year, curr_month), (prev_year, prev_month) = periods.iter_rows()
    is_curr = (pl.col("year") == curr_year) & (pl.col("month_index") == curr_month)
    is_prev = (pl.col("year") == prev_year) & (pl.col("month_index") == prev_month)

    changes = (
        eligible.filter(is_curr | is_prev)
        .group_by("name", maintain_order=True)
        .agg(
            [
                pl.col("amount").filter(is_prev).sum().alias("previous_value"),
                pl.col("amount").filter(is_curr).sum().alias("current_value"),
            ]
        )
        .with_columns(
            change_percent_expr(pl.col("current_value"), pl.col("previous_value")).alias("change_percent")
        )
        .filter(pl.col("change_percent").is_not_null() & (pl.col("change_percent") != 0))
    )

    growing = (
        changes.filter(pl.col("change_percent") > 0)
        .sort("change_percent", descending=True, maintain_order=True)
        .head(limit)
    )
    declining = (
        changes.filter(pl.col("change_percent") < 0)
        .sort("change_percent", maintain_order=True)
        .head(limit)
    )
    return TrendRankings(
        growing=_to_entries(growing),
        declining=_to_entries(declining),
        period1_label=period_label(prev_year, MONTHS[prev_month]),
        period2_label=period_label(curr_year, MONTHS[curr_month]),
    )
