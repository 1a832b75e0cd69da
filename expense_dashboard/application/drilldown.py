"""Two-level drill-down: broad -> specific subcategory -> reference period."""

from __future__ import annotations

from enum import Enum

import polars as pl

from expense_dashboard.application.aggregation import Records, group_sum
from expense_dashboard.domain.models import NOT_SPECIFIED, DrilldownResult
from expense_dashboard.ingestion import as_frame
from expense_dashboard.logging_setup import get_logger

logger = get_logger(__name__)


class DrilldownState(str, Enum):
    OVERVIEW = "OVERVIEW"
    DETAIL = "DETAIL"


class DrilldownStateError(RuntimeError):
    """Raised on a transition the drill-down session does not allow."""


def _label_expr(column: str) -> pl.Expr:
    text = pl.col(column).cast(pl.Utf8, strict=False)
    return pl.when(text.is_null() | (text == "")).then(pl.lit(NOT_SPECIFIED)).otherwise(text)


def _specific_match_expr(specific_subcategory: str) -> pl.Expr:
    column = pl.col("specific_subcategory")
    if specific_subcategory == NOT_SPECIFIED:
        return column.is_null() | (column == "") | (column == NOT_SPECIFIED)
    return column == pl.lit(specific_subcategory)


def _breakdown(frame: pl.DataFrame, column: str) -> DrilldownResult:
    buckets = group_sum(frame, _label_expr(column), positive_only=True, order="total")
    return DrilldownResult(buckets=tuple(buckets), total=sum(bucket.total for bucket in buckets))


def compute_drilldown(records: Records, broad_subcategory: str | None) -> DrilldownResult:
    """Specific-subcategory totals (positive amounts) within one broad subcategory."""
    if not broad_subcategory:
        return DrilldownResult()
    frame = as_frame(records)
    scoped = frame.filter(pl.col("broad_subcategory") == pl.lit(broad_subcategory))
    return _breakdown(scoped, "specific_subcategory")


def compute_reference_period_breakdown(
    records: Records,
    broad_subcategory: str | None,
    specific_subcategory: str | None,
) -> DrilldownResult:
    """Reference-period totals (positive amounts) within one (broad, specific) pair."""
    if not broad_subcategory or not specific_subcategory:
        return DrilldownResult()
    frame = as_frame(records)
    scoped = frame.filter(
        (pl.col("broad_subcategory") == pl.lit(broad_subcategory))
        & _specific_match_expr(specific_subcategory)
    )
    return _breakdown(scoped, "reference_period")


class DrilldownSession:
    """State of one drill-down dialog.

    OVERVIEW --select(specific)--> DETAIL --back--> OVERVIEW. Closing clears
    everything, so a reopened session always starts at OVERVIEW.
    """

    def __init__(self) -> None:
        self.broad_subcategory: str | None = None
        self.specific_subcategory: str | None = None
        self.state = DrilldownState.OVERVIEW

    @property
    def is_open(self) -> bool:
        return self.broad_subcategory is not None

    def open(self, broad_subcategory: str) -> None:
        self.close()
        self.broad_subcategory = broad_subcategory
        logger.debug("Drill-down opened: broad=%s", broad_subcategory)

    def select(self, specific_subcategory: str) -> None:
        if not self.is_open:
            raise DrilldownStateError("select() requires an open drill-down")
        if self.state is not DrilldownState.OVERVIEW:
            raise DrilldownStateError(f"select() is only valid in OVERVIEW, current state is {self.state.value}")
        self.specific_subcategory = specific_subcategory
        self.state = DrilldownState.DETAIL
        logger.debug("Drill-down detail: broad=%s specific=%s", self.broad_subcategory, specific_subcategory)

    def back(self) -> None:
        self.specific_subcategory = None
        self.state = DrilldownState.OVERVIEW

    def close(self) -> None:
        self.broad_subcategory = None
        self.specific_subcategory = None
        self.state = DrilldownState.OVERVIEW

    def view(self, records: Records) -> DrilldownResult:
        if not self.is_open:
            return DrilldownResult()
        if self.state is DrilldownState.DETAIL:
            return compute_reference_period_breakdown(records, self.broad_subcategory, self.specific_subcategory)
        return compute_drilldown(records, self.broad_subcategory)
