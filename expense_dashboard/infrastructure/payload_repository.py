"""Infrastructure adapter for JSON payload files exported from the data endpoint."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from expense_dashboard.domain.models import Record
from expense_dashboard.ingestion import normalize_records, parse_payload_text, unwrap_payload
from expense_dashboard.logging_setup import get_logger

logger = get_logger(__name__)


def load_payload(path: str | Path) -> Any:
    payload_path = Path(path)
    if not payload_path.exists():
        raise FileNotFoundError(f"Payload file not found: {payload_path}")
    text = payload_path.read_text(encoding="utf-8")
    logger.info("Payload read: path=%s length=%d", payload_path, len(text))
    return parse_payload_text(text)


def load_records(path: str | Path) -> list[Record]:
    """Read, unwrap and normalize a payload file; replaces any previous record set."""
    return normalize_records(unwrap_payload(load_payload(path)))
