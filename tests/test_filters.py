"""Tests for filter composition and the details-view helpers."""

import pytest

from expense_dashboard.application.aggregation import compute_monthly_trend
from expense_dashboard.application.filters import (
    apply_filters,
    filter_options,
    paginate,
    search_records,
    trend_scope,
)
from expense_dashboard.domain.calendar import MONTHS
from expense_dashboard.domain.models import FilterSet
from expense_dashboard.ingestion import as_frame


@pytest.fixture
def filter_records(make_record):
    return [
        make_record(row_number=1, category="Despesas", city="Curitiba", year=2024, month="janeiro"),
        make_record(row_number=2, category="Despesas", city="Londrina", year=2024, month="Fevereiro"),
        make_record(row_number=3, category="Receitas", city="Curitiba", year=2023, month="fevereiro"),
        make_record(row_number=4, category="Despesas", city="Curitiba", year=2024, month="FEVEREIRO"),
        make_record(row_number=5, category="Despesas", city="Curitiba", year=None, month=""),
    ]


def _rows(frame):
    return frame.get_column("row_number").to_list()


class TestApplyFilters:
    def test_no_filters_returns_everything(self, filter_records):
        assert _rows(apply_filters(filter_records, FilterSet())) == [1, 2, 3, 4, 5]

    def test_conjunction_preserves_order(self, filter_records):
        filters = FilterSet(category="Despesas", city="Curitiba", year=2024)
        assert _rows(apply_filters(filter_records, filters)) == [1, 4]

    def test_month_case_insensitive(self, filter_records):
        assert _rows(apply_filters(filter_records, FilterSet(month="fevereiro"))) == [2, 3, 4]
        assert _rows(apply_filters(filter_records, FilterSet(month="FeVeReIrO"))) == [2, 3, 4]

    def test_padded_month_matches_chart_bucket(self, make_record):
        records = [
            make_record(row_number=1, month=" Janeiro ", amount=10.0),
            make_record(row_number=2, month="março", amount=5.0),
        ]
        chart = {bucket.key: bucket.total for bucket in compute_monthly_trend(records)}
        assert chart["janeiro"] == 10.0
        assert _rows(apply_filters(records, FilterSet(month="janeiro"))) == [1]
        assert _rows(apply_filters(records, FilterSet(month=" JANEIRO"))) == [1]

    def test_exact_match_only(self, filter_records):
        assert _rows(apply_filters(filter_records, FilterSet(city="curitiba"))) == []
        assert _rows(apply_filters(filter_records, FilterSet(category="Desp"))) == []

    def test_idempotent(self, filter_records):
        filters = FilterSet(category="Despesas", month="fevereiro")
        once = apply_filters(filter_records, filters)
        twice = apply_filters(once, filters)
        assert once.equals(twice)

    def test_input_untouched(self, filter_records):
        frame = as_frame(filter_records)
        before = frame.clone()
        apply_filters(frame, FilterSet(city="Londrina"))
        assert frame.equals(before)


class TestFilterSet:
    def test_with_filter(self):
        filters = FilterSet().with_filter("city", "Curitiba").with_filter("year", 2024)
        assert filters == FilterSet(city="Curitiba", year=2024)
        assert filters.with_filter("city", None) == FilterSet(year=2024)

    def test_unknown_filter(self):
        with pytest.raises(ValueError):
            FilterSet().with_filter("status", "pago")

    def test_trend_scope_drops_month(self):
        filters = FilterSet(category="Despesas", month="janeiro")
        assert trend_scope(filters) == FilterSet(category="Despesas")


class TestFilterOptions:
    def test_distinct_sorted_values(self, filter_records):
        options = filter_options(filter_records)
        assert options.categories == ("Despesas", "Receitas")
        assert options.cities == ("Curitiba", "Londrina")
        assert options.years == (2024, 2023)
        assert options.months == MONTHS


class TestSearchRecords:
    def test_matches_any_field_case_insensitive(self, filter_records):
        assert _rows(search_records(filter_records, "LONDRINA")) == [2]
        assert _rows(search_records(filter_records, "receit")) == [3]

    def test_matches_numbers_as_text(self, filter_records):
        assert _rows(search_records(filter_records, "2023")) == [3]

    def test_empty_term(self, filter_records):
        assert _rows(search_records(filter_records, "")) == [1, 2, 3, 4, 5]
        assert _rows(search_records(filter_records, None)) == [1, 2, 3, 4, 5]


class TestPaginate:
    def test_pages(self, make_record):
        records = [make_record(row_number=idx) for idx in range(1, 24)]
        page = paginate(records, page=3)
        assert page.total_pages == 3
        assert page.total_rows == 23
        assert _rows(page.rows) == [21, 22, 23]
        assert not page.has_next
        assert page.has_previous

    def test_clamps_page(self, make_record):
        records = [make_record(row_number=idx) for idx in range(1, 6)]
        assert paginate(records, page=9).page == 1
        assert paginate(records, page=-2).page == 1

    def test_empty(self):
        page = paginate([], page=4)
        assert page.page == 1
        assert page.total_pages == 0
        assert page.rows.is_empty()

    def test_rows_per_page_validation(self):
        with pytest.raises(ValueError):
            paginate([], rows_per_page=0)
