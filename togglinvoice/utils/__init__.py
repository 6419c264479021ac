"""Utility modules for togglInvoice."""

from .date_utils import parse_day, parse_instant, get_week_range, iso_saturday, day_str
from .format_utils import format_seconds, format_ms, ms_to_hours, format_amount
from .file_utils import write_text, write_report_json, read_report_json

__all__ = [
    'parse_day', 'parse_instant', 'get_week_range', 'iso_saturday', 'day_str',
    'format_seconds', 'format_ms', 'ms_to_hours', 'format_amount',
    'write_text', 'write_report_json', 'read_report_json'
]
