"""Domain models for the expense dashboard aggregation engine."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Mapping, Tuple

import polars as pl

NOT_SPECIFIED = "Not specified"
FILTER_FIELDS: Tuple[str, ...] = ("category", "city", "year", "month")


@dataclass(frozen=True)
class Record:
    """Canonical expense row; every aggregation reads this shape."""

    row_number: int
    category: str = ""
    broad_subcategory: str = ""
    specific_subcategory: str = ""
    responsible: str = ""
    reference_period: str = ""
    amount: float = 0.0
    indicator: str = ""
    city: str = ""
    year: int | None = None
    month: str = ""
    date: str = ""
    status: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Record":
        year = row.get("year")
        return cls(
            row_number=int(row["row_number"]),
            category=str(row.get("category") or ""),
            broad_subcategory=str(row.get("broad_subcategory") or ""),
            specific_subcategory=str(row.get("specific_subcategory") or ""),
            responsible=str(row.get("responsible") or ""),
            reference_period=str(row.get("reference_period") or ""),
            amount=float(row.get("amount") or 0.0),
            indicator=str(row.get("indicator") or ""),
            city=str(row.get("city") or ""),
            year=None if year is None else int(year),
            month=str(row.get("month") or ""),
            date=str(row.get("date") or ""),
            status=str(row.get("status") or ""),
        )


RECORD_SCHEMA: dict[str, Any] = {
    "row_number": pl.Int64,
    "category": pl.Utf8,
    "broad_subcategory": pl.Utf8,
    "specific_subcategory": pl.Utf8,
    "responsible": pl.Utf8,
    "reference_period": pl.Utf8,
    "amount": pl.Float64,
    "indicator": pl.Utf8,
    "city": pl.Utf8,
    "year": pl.Int64,
    "month": pl.Utf8,
    "date": pl.Utf8,
    "status": pl.Utf8,
}


@dataclass(frozen=True)
class FilterSet:
    """Four independent equality constraints; None means unconstrained."""

    category: str | None = None
    city: str | None = None
    year: int | None = None
    month: str | None = None

    def with_filter(self, name: str, value: Any) -> "FilterSet":
        if name not in FILTER_FIELDS:
            raise ValueError(f"Unknown filter: {name}")
        return replace(self, **{name: value})

    def without_month(self) -> "FilterSet":
        return replace(self, month=None)

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in FILTER_FIELDS)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Bucket:
    key: str
    total: float

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "total": self.total}


@dataclass(frozen=True)
class TrendEntry:
    name: str
    change_percent: float
    previous_value: float
    current_value: float

    @property
    def is_new(self) -> bool:
        return math.isinf(self.change_percent) and self.change_percent > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "change_percent": None if self.is_new else self.change_percent,
            "is_new": self.is_new,
            "previous_value": self.previous_value,
            "current_value": self.current_value,
        }


@dataclass(frozen=True)
class TrendRankings:
    growing: Tuple[TrendEntry, ...]
    declining: Tuple[TrendEntry, ...]
    period1_label: str
    period2_label: str
    insufficient_data: bool = field(default=False, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "insufficient_data": False,
            "period1_label": self.period1_label,
            "period2_label": self.period2_label,
            "growing": [entry.to_dict() for entry in self.growing],
            "declining": [entry.to_dict() for entry in self.declining],
        }


@dataclass(frozen=True)
class InsufficientData:
    """Fewer than two distinct (year, month) periods; no ranking is possible."""

    insufficient_data: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"insufficient_data": True}


@dataclass(frozen=True)
class DrilldownResult:
    buckets: Tuple[Bucket, ...] = ()
    total: float = 0.0

    @property
    def shares(self) -> Tuple[float, ...]:
        if self.total <= 0:
            return tuple(0.0 for _ in self.buckets)
        return tuple(bucket.total / self.total for bucket in self.buckets)

    def is_empty(self) -> bool:
        return not self.buckets

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "buckets": [
                {**bucket.to_dict(), "share": share} for bucket, share in zip(self.buckets, self.shares)
            ],
        }


@dataclass(frozen=True)
class SummaryStats:
    total_value: float
    total_records: int
    unique_categories: int


@dataclass(frozen=True)
class FilterOptions:
    categories: Tuple[str, ...]
    cities: Tuple[str, ...]
    years: Tuple[int, ...]
    months: Tuple[str, ...]


@dataclass(frozen=True, eq=False)
class Page:
    rows: pl.DataFrame
    page: int
    total_pages: int
    total_rows: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1
