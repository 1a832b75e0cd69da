"""Shared fixtures: canonical records, a small multi-month dataset and a raw payload file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from expense_dashboard.domain.models import Record

_counter = {"row": 0}


def _make_record(**overrides: Any) -> Record:
    _counter["row"] += 1
    values: dict[str, Any] = {
        "row_number": _counter["row"],
        "category": "Despesas",
        "broad_subcategory": "Moradia",
        "specific_subcategory": "Aluguel",
        "responsible": "Ana",
        "reference_period": "Jan/24",
        "amount": 100.0,
        "indicator": "-",
        "city": "Curitiba",
        "year": 2024,
        "month": "janeiro",
        "date": "05/01/2024",
        "status": "pago",
    }
    values.update(overrides)
    return Record(**values)


@pytest.fixture
def make_record() -> Callable[..., Record]:
    return _make_record


@pytest.fixture
def sample_records(make_record: Callable[..., Record]) -> list[Record]:
    return [
        make_record(broad_subcategory="Moradia", specific_subcategory="Aluguel", amount=1000.0, month="janeiro"),
        make_record(broad_subcategory="Moradia", specific_subcategory="Condominio", amount=300.0, month="janeiro"),
        make_record(broad_subcategory="Transporte", specific_subcategory="", amount=200.0, month="janeiro", city="Londrina"),
        make_record(broad_subcategory="Moradia", specific_subcategory="Aluguel", amount=1000.0, month="Fevereiro",
                    reference_period="Fev/24"),
        make_record(broad_subcategory="Lazer", specific_subcategory="Cinema", amount=80.0, month="fevereiro",
                    category="Pessoal"),
        make_record(broad_subcategory="Transporte", specific_subcategory="Combustivel", amount=-50.0, month="fevereiro"),
        make_record(broad_subcategory="", specific_subcategory="", amount=40.0, month="fevereiro"),
    ]


def _raw_item(row_number, broad, amount, month, year="2024", city="Curitiba"):
    return {
        "row_number": row_number,
        "categoria": "Despesas",
        "subcategoria ampla": broad,
        "subcategoria especifica": "",
        "responsavel": "Ana",
        "competencia / referencia": "",
        "valor": amount,
        "indicador": "-",
        "cidade": city,
        "ano": year,
        "mes": month,
        "data": "",
        "status": "pago",
    }


@pytest.fixture
def payload_file(tmp_path: Path) -> Path:
    items = [
        _raw_item(1, "Moradia", "1.000,00", "janeiro"),
        _raw_item(2, "Moradia", "1.500,00", "fevereiro"),
        _raw_item(3, "Lazer", 80, "fevereiro", city="Londrina"),
        _raw_item("x", "Lazer", 10, "fevereiro"),
    ]
    path = tmp_path / "payload.json"
    path.write_text(json.dumps([{"data": items}]), encoding="utf-8")
    return path

