"""Billing and invoice modules for togglInvoice."""

from .time_entry import BillableEntry
from .billing import DayChunk, split_by_day, to_billable, expand_entries
from .weekly import WeekGroup, week_anchor, week_first_day, group_by_week, grand_total
from .invoice import Column, INVOICE_COLUMNS, InvoiceGenerator, to_csv_rows

__all__ = [
    'BillableEntry', 'DayChunk', 'split_by_day', 'to_billable', 'expand_entries',
    'WeekGroup', 'week_anchor', 'week_first_day', 'group_by_week', 'grand_total',
    'Column', 'INVOICE_COLUMNS', 'InvoiceGenerator', 'to_csv_rows'
]
