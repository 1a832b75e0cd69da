"""Summary export targets: a JSON document and a multi-sheet workbook."""

from __future__ import annotations

import json
import math
import re
from pathlib import Path
from typing import Any, Mapping, Sequence

import polars as pl
import xlsxwriter
from openpyxl import Workbook

from expense_dashboard.logging_setup import get_logger

logger = get_logger(__name__)

SHEET_NAME_LIMIT = 31
_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")


def save_summary_json(path: Path, summary: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summary, indent=2, ensure_ascii=False), encoding="utf-8")


def sheet_frame(rows: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> pl.DataFrame:
    """Frame with exactly `columns`, in order; keys missing from a row become nulls."""
    if not rows:
        return pl.DataFrame({column: [] for column in columns})
    return pl.DataFrame([{column: row.get(column) for column in columns} for row in rows])


def sheet_names(names: Sequence[Any]) -> list[str]:
    """Worksheet titles Excel accepts, unique in order of appearance.

    Forbidden characters are dropped, titles are cut to 31 characters and
    a numeric suffix separates titles that collide after cleaning.
    """
    seen: set[str] = set()
    titles: list[str] = []
    for position, name in enumerate(names, start=1):
        base = _INVALID_SHEET_CHARS.sub("", str(name)).strip("' ")[:SHEET_NAME_LIMIT]
        if not base:
            base = f"Sheet{position}"
        title = base
        suffix = 2
        while title.lower() in seen:
            tail = f"_{suffix}"
            title = base[: SHEET_NAME_LIMIT - len(tail)] + tail
            suffix += 1
        seen.add(title.lower())
        titles.append(title)
    return titles


def _excel_cell_value(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _write_with_polars(path: Path, sheets: dict[str, pl.DataFrame]) -> bool:
    try:
        with xlsxwriter.Workbook(str(path)) as workbook:
            for title, frame in zip(sheet_names(list(sheets)), sheets.values()):
                frame.write_excel(workbook=workbook, worksheet=title)
    except PermissionError:
        raise
    except Exception as exc:
        logger.warning("xlsxwriter export of %s failed (%s); retrying with openpyxl", path, exc)
        return False
    return True


def _write_with_openpyxl(path: Path, sheets: dict[str, pl.DataFrame]) -> None:
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, frame in zip(sheet_names(list(sheets)), sheets.values()):
        worksheet = workbook.create_sheet(title=title)
        worksheet.append(frame.columns)
        for row in frame.iter_rows():
            worksheet.append([_excel_cell_value(value) for value in row])
    workbook.save(path)


def write_workbook(path: str | Path, sheets: dict[str, pl.DataFrame]) -> None:
    if not sheets:
        raise ValueError("a workbook needs at least one sheet")
    excel_path = Path(path)
    excel_path.parent.mkdir(parents=True, exist_ok=True)
    if not _write_with_polars(excel_path, sheets):
        _write_with_openpyxl(excel_path, sheets)
    logger.info("Wrote %d sheet(s) to %s", len(sheets), excel_path)


def save_output_workbook(path: Path, sheets: dict[str, pl.DataFrame]) -> tuple[bool, str]:
    try:
        write_workbook(path, sheets)
    except PermissionError as exc:
        return False, str(exc)
    return True, ""
