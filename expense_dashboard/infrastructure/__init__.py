"""Infrastructure layer package."""

from .payload_repository import load_payload, load_records
from .report_exporter import save_output_workbook, save_summary_json

__all__ = ["load_payload", "load_records", "save_output_workbook", "save_summary_json"]
