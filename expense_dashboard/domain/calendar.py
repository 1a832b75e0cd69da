"""Fixed calendar vocabulary used for month ordering and period labels."""

from __future__ import annotations

from typing import Any, Dict, Tuple

import polars as pl

MONTHS: Tuple[str, ...] = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)
MONTH_INDEX: Dict[str, int] = {name: idx for idx, name in enumerate(MONTHS)}


def canonical_month(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip().lower()


def canonical_month_expr(column: str = "month") -> pl.Expr:
    """Same canonical form as canonical_month, for a frame column."""
    return pl.col(column).cast(pl.Utf8, strict=False).str.strip_chars().str.to_lowercase()


def month_index(value: Any) -> int | None:
    """Ordinal (0 = janeiro) of a month name, or None when it is not in the vocabulary."""
    return MONTH_INDEX.get(canonical_month(value))


def month_label(value: Any) -> str:
    month = canonical_month(value)
    return month[:1].upper() + month[1:]


def short_month_label(value: Any) -> str:
    return month_label(value)[:3]


def period_label(year: int, month: Any) -> str:
    return f"{month_label(month)}/{year}"
