"""Shared numeric/formatting utilities for dashboard aggregates."""

from __future__ import annotations

import math

import polars as pl

CURRENCY_SYMBOL = "R$"
NEW_LABEL = "new"


def change_percent_expr(curr: pl.Expr, prev: pl.Expr) -> pl.Expr:
    """Percent change with new (+inf) and discontinued (-100) edge cases; null when both are zero."""
    return (
        pl.when((prev <= 0) & (curr > 0))
        .then(pl.lit(math.inf))
        .when((prev > 0) & (curr <= 0))
        .then(pl.lit(-100.0))
        .when((prev > 0) & (curr > 0))
        .then((curr - prev) / prev * 100)
        .otherwise(None)
    )


def _group_thousands(value: float) -> str:
    # 1,234.56 -> 1.234,56
    return f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")


def fmt_money(value: float | None) -> str:
    if value is None:
        return f"{CURRENCY_SYMBOL} 0,00"
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL} {_group_thousands(abs(value))}"


def fmt_pct(value: float | None, signed: bool = True) -> str:
    if value is None:
        return "N/A"
    if signed:
        return f"{value:+.0f}%"
    return f"{value:.0f}%"


def fmt_change(value: float | None) -> str:
    if value is not None and math.isinf(value) and value > 0:
        return NEW_LABEL
    return fmt_pct(value)


def fmt_share(value: float | None) -> str:
    if value is None:
        return "0.0%"
    return f"{value * 100:.1f}%"
