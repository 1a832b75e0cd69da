"""Tests for numeric and formatting helpers."""

import math

import polars as pl
import pytest

from expense_dashboard.application.reporting.metrics import (
    change_percent_expr,
    fmt_change,
    fmt_money,
    fmt_pct,
    fmt_share,
)
from expense_dashboard.domain.calendar import month_index, month_label, period_label, short_month_label


class TestChangePercent:
    def test_change_percent_expr_edge_cases(self):
        frame = pl.DataFrame({"prev": [0.0, 100.0, 100.0, 0.0, 100.0], "curr": [50.0, 0.0, 150.0, 0.0, 100.0]})
        values = frame.select(change_percent_expr(pl.col("curr"), pl.col("prev")).alias("c")).to_series(0).to_list()
        assert math.isinf(values[0]) and values[0] > 0
        assert values[1] == -100.0
        assert values[2] == pytest.approx(50.0)
        assert values[3] is None
        assert values[4] == 0.0


class TestFormatting:
    def test_money_pt_br(self):
        assert fmt_money(1234.5) == "R$ 1.234,50"
        assert fmt_money(-10) == "-R$ 10,00"
        assert fmt_money(None) == "R$ 0,00"

    def test_pct_and_change(self):
        assert fmt_pct(50.0) == "+50%"
        assert fmt_pct(-33.3) == "-33%"
        assert fmt_pct(None) == "N/A"
        assert fmt_change(math.inf) == "new"
        assert fmt_change(-100.0) == "-100%"

    def test_share(self):
        assert fmt_share(0.1234) == "12.3%"


class TestCalendar:
    def test_month_index(self):
        assert month_index("janeiro") == 0
        assert month_index(" Dezembro ") == 11
        assert month_index("MARÇO") == 2
        assert month_index("january") is None
        assert month_index(None) is None

    def test_labels(self):
        assert month_label("fevereiro") == "Fevereiro"
        assert short_month_label("fevereiro") == "Fev"
        assert period_label(2024, "janeiro") == "Janeiro/2024"
