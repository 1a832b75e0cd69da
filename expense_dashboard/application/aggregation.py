"""Grouping/aggregation engine: one group-sum primitive and its chart instantiations."""

from __future__ import annotations

from typing import Iterable, Literal

import polars as pl

from expense_dashboard.domain.calendar import MONTHS, canonical_month_expr
from expense_dashboard.domain.models import Bucket, Record, SummaryStats
from expense_dashboard.ingestion import as_frame

TOP_CATEGORY_LIMIT = 10

Records = pl.DataFrame | Iterable[Record]
KeyLike = str | pl.Expr


def _as_expr(value: KeyLike) -> pl.Expr:
    if isinstance(value, str):
        return pl.col(value)
    return value


def group_sum(
    records: Records,
    key: KeyLike,
    value: KeyLike = "amount",
    *,
    positive_only: bool = False,
    order: Literal["total"] | None = None,
    limit: int | None = None,
) -> list[Bucket]:
    """Sum ``value`` grouped by ``key``.

    Rows with a null or empty key never form a bucket. ``positive_only`` drops
    contributions that are not > 0 and is decided per call site. With
    ``order="total"`` buckets are sorted by descending total, ties keeping the
    order in which each key was first encountered; otherwise encounter order
    is kept. ``limit`` truncates after ordering.
    """
    if order not in (None, "total"):
        raise ValueError(f"order must be None or 'total', got {order!r}")

    frame = as_frame(records)
    scoped = frame.select(
        [
            _as_expr(key).cast(pl.Utf8, strict=False).alias("key"),
            _as_expr(value).cast(pl.Float64, strict=False).fill_null(0.0).alias("value"),
        ]
    ).filter(pl.col("key").is_not_null() & (pl.col("key") != ""))
    if positive_only:
        scoped = scoped.filter(pl.col("value") > 0)
    if scoped.is_empty():
        return []

    grouped = scoped.group_by("key", maintain_order=True).agg(pl.col("value").sum().alias("total"))
    if order == "total":
        grouped = grouped.sort("total", descending=True, maintain_order=True)
    if limit is not None:
        grouped = grouped.head(max(limit, 0))
    return [Bucket(key=str(row["key"]), total=float(row["total"])) for row in grouped.iter_rows(named=True)]


def compute_top_category_totals(records: Records, n: int = TOP_CATEGORY_LIMIT) -> list[Bucket]:
    """Top-N broad subcategories by total; only positive amounts participate."""
    return group_sum(records, "broad_subcategory", positive_only=True, order="total", limit=n)


def compute_monthly_trend(records: Records) -> list[Bucket]:
    """Twelve calendar-ordered month buckets of positive amounts; absent months total 0."""
    totals = {
        bucket.key: bucket.total
        for bucket in group_sum(
            records,
            canonical_month_expr(),
            positive_only=True,
        )
    }
    return [Bucket(key=month, total=totals.get(month, 0.0)) for month in MONTHS]


def compute_summary_stats(records: Records) -> SummaryStats:
    # All amounts count here, negatives included.
    frame = as_frame(records)
    if frame.is_empty():
        return SummaryStats(total_value=0.0, total_records=0, unique_categories=0)
    return SummaryStats(
        total_value=float(frame.select(pl.col("amount").sum()).item() or 0.0),
        total_records=int(frame.height),
        unique_categories=int(frame.select(pl.col("category").n_unique()).item()),
    )
