"""Payload normalization into canonical records."""

from __future__ import annotations

import json
import math
import os
import re
from typing import Any, Iterable, Mapping

import polars as pl

from expense_dashboard.domain.models import RECORD_SCHEMA, Record
from expense_dashboard.logging_setup import get_logger

logger = get_logger(__name__)

RAW_FIELD_MAP: dict[str, str] = {
    "row_number": "row_number",
    "categoria": "category",
    "subcategoria ampla": "broad_subcategory",
    "subcategoria especifica": "specific_subcategory",
    "responsavel": "responsible",
    "competencia / referencia": "reference_period",
    "valor": "amount",
    "indicador": "indicator",
    "cidade": "city",
    "ano": "year",
    "mes": "month",
    "data": "date",
    "status": "status",
}
TEXT_FIELDS: tuple[str, ...] = tuple(
    name for name in RAW_FIELD_MAP.values() if name not in {"row_number", "amount", "year"}
)
AMOUNT_ERROR_THRESHOLD_ENV = "EXPENSE_DASHBOARD_AMOUNT_ERROR_THRESHOLD"

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")


def _amount_error_threshold() -> float:
    raw = os.getenv(AMOUNT_ERROR_THRESHOLD_ENV, "0.05")
    try:
        threshold = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid {AMOUNT_ERROR_THRESHOLD_ENV}: {raw}") from exc
    if threshold < 0 or threshold > 1:
        raise ValueError(f"{AMOUNT_ERROR_THRESHOLD_ENV} must be in [0, 1], got {threshold}")
    return threshold


AMOUNT_ERROR_THRESHOLD = _amount_error_threshold()


def _parse_amount(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if "," in text and "." in text:
        # Whichever separator comes last is the decimal one.
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "")
        else:
            text = text.replace(",", "")
    text = text.replace(",", ".", 1)
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return None
    number = float(match.group(0))
    return number if math.isfinite(number) else None


def to_amount(value: Any) -> float:
    """Coerce a raw amount (number or pt-BR numeric text) to a finite float, 0.0 on failure."""
    parsed = _parse_amount(value)
    return 0.0 if parsed is None else parsed


def to_int(value: Any) -> int | None:
    """Base-10 integer from the leading digits of ``value``; None when there are none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _INT_PREFIX.match(value.strip())
        return int(match.group(0)) if match else None
    return None


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def normalize_record(raw: Mapping[str, Any]) -> Record | None:
    """Map one raw API item to a Record; None when it has no usable row number."""
    if not isinstance(raw, Mapping):
        return None
    row_number = to_int(raw.get("row_number"))
    if row_number is None:
        return None

    text_values = {
        canonical: _to_text(raw.get(source))
        for source, canonical in RAW_FIELD_MAP.items()
        if canonical in TEXT_FIELDS
    }
    return Record(
        row_number=row_number,
        amount=to_amount(raw.get("valor")),
        year=to_int(raw.get("ano")),
        **text_values,
    )


def normalize_records(
    items: Iterable[Any],
    threshold: float = AMOUNT_ERROR_THRESHOLD,
) -> list[Record]:
    records: list[Record] = []
    initial_count = 0
    amount_errors = 0
    for item in items:
        initial_count += 1
        if item is None:
            continue
        record = normalize_record(item)
        if record is None:
            continue
        raw_amount = item.get("valor")
        if raw_amount not in (None, "") and _parse_amount(raw_amount) is None:
            amount_errors += 1
        records.append(record)

    logger.info(
        "Normalized records: initial=%d final=%d dropped=%d",
        initial_count,
        len(records),
        initial_count - len(records),
    )
    if records and threshold > 0:
        error_ratio = amount_errors / len(records)
        if error_ratio > threshold:
            logger.warning(
                "Amount coercion failures exceed %.2f%%: %.2f%% (%d/%d) defaulted to 0",
                threshold * 100,
                error_ratio * 100,
                amount_errors,
                len(records),
            )
    return records


def records_frame(records: Iterable[Record]) -> pl.DataFrame:
    return pl.DataFrame([record.to_dict() for record in records], schema=RECORD_SCHEMA)


def as_frame(records: pl.DataFrame | Iterable[Record]) -> pl.DataFrame:
    """Canonical frame for either an existing frame or a sequence of Records."""
    if isinstance(records, pl.DataFrame):
        return records
    return records_frame(records)


def frame_records(frame: pl.DataFrame) -> list[Record]:
    return [Record.from_row(row) for row in frame.iter_rows(named=True)]


def parse_payload_text(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Payload is not valid JSON: {exc.msg}") from exc


def unwrap_payload(payload: Any) -> list[Any]:
    """Extract the list of raw items from the shapes the data endpoint returns."""
    if isinstance(payload, dict) and isinstance(payload.get("body"), str):
        logger.warning("Payload looks enveloped; decoding its 'body' property")
        try:
            payload = json.loads(payload["body"])
        except json.JSONDecodeError:
            logger.error("Failed to decode the 'body' property; using the envelope as-is")

    if isinstance(payload, list):
        first = payload[0] if payload else None
        if isinstance(first, dict) and isinstance(first.get("data"), list):
            logger.info("Items extracted from nested [{data: [...]}] envelope: count=%d", len(first["data"]))
            return list(first["data"])
        logger.info("Payload is a list: count=%d", len(payload))
        return list(payload)

    if isinstance(payload, dict):
        nested = next((value for value in payload.values() if isinstance(value, list)), None)
        if nested is not None:
            logger.info("Items found in an object property: count=%d", len(nested))
            return list(nested)
        if "row_number" in payload:
            logger.warning("Payload is a single record; wrapping it in a list")
            return [payload]
        logger.warning("Payload object holds no list of items; treating as empty")
        return []

    logger.warning("Payload shape not recognized: %s", type(payload).__name__)
    return []
