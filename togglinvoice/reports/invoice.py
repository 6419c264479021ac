"""InvoiceGenerator class for rendering weekly billable-time CSV invoices."""
import csv
import logging
import math
import os
from collections import namedtuple
from io import StringIO
from typing import Any, List, Optional

from tabulate import tabulate

from ..config import InvoiceConfig
from ..errors import SerializationError, WriteError
from ..utils.date_utils import day_str
from ..utils.file_utils import write_text
from ..utils.format_utils import format_amount, format_ms, ms_to_hours
from .time_entry import BillableEntry
from .weekly import WeekGroup, group_by_week, grand_total

log = logging.getLogger(__name__)

Column = namedtuple("Column", ["label", "value"])


def _date_cell(entry: BillableEntry, config: InvoiceConfig) -> str:
    if not entry.start_billable:
        return ""
    return entry.start_dt(config.date_format).strftime("%Y-%m-%d")


def _start_cell(entry: BillableEntry, config: InvoiceConfig) -> str:
    if not entry.start_billable:
        return ""
    return entry.start_dt(config.date_format).strftime("%H:%M:%S")


def _end_cell(entry: BillableEntry, config: InvoiceConfig) -> str:
    if not entry.end_billable:
        return ""
    return entry.end_dt(config.date_format).strftime("%H:%M:%S")


def _amount_cell(entry: BillableEntry, config: InvoiceConfig) -> Any:
    total = ms_to_hours(entry.dur_billable) * config.rate
    return math.floor(total) if entry.is_total_row else format_amount(total)


INVOICE_COLUMNS = [
    Column("Date", _date_cell),
    Column("Description", lambda entry, config: entry.description),
    Column("Start time", _start_cell),
    Column("End time", _end_cell),
    Column("Total time", lambda entry, config: format_ms(entry.dur_billable)),
    Column("Total", _amount_cell),
]


def to_csv_rows(rows: List[BillableEntry], config: InvoiceConfig,
                columns: Optional[List[Column]] = None) -> str:
    """Render rows as CSV text with a header line.

    Args:
        rows: Entries to render, total row included
        config: Invoice settings
        columns: Column descriptors (defaults to INVOICE_COLUMNS)

    Returns:
        CSV text

    Raises:
        SerializationError: If any cell cannot be rendered
    """
    columns = columns or INVOICE_COLUMNS
    output = StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    try:
        writer.writerow([c.label for c in columns])
        for row in rows:
            writer.writerow([c.value(row, config) for c in columns])
    except (csv.Error, AttributeError, TypeError, ValueError) as e:
        raise SerializationError(f"Cannot convert rows to CSV: {e}") from e
    return output.getvalue()


class InvoiceGenerator:
    """Class for generating weekly invoices from billable entries."""

    def __init__(self, entries: List[BillableEntry], config: InvoiceConfig):
        """Initialize an InvoiceGenerator.

        Args:
            entries: Billable entries in derivation order
            config: Invoice settings
        """
        self.entries = entries
        self.config = config
        self.week_groups = group_by_week(entries, config)
        self.grand_total = grand_total(entries, config)

    @property
    def total_ms(self) -> int:
        return self.grand_total.total_ms if self.grand_total else 0

    def render(self, group: WeekGroup) -> str:
        """Render a group and its total row as CSV.

        Args:
            group: Week group

        Returns:
            CSV text
        """
        return to_csv_rows(group.rows(), self.config)

    def groups(self) -> List[WeekGroup]:
        """Get every week group followed by the grand total group."""
        groups = list(self.week_groups.values())
        if self.grand_total is not None:
            groups.append(self.grand_total)
        return groups

    def generate_invoices(self, output_dir: Optional[str] = None) -> List[str]:
        """Write one CSV per week plus the consolidated CSV.

        A file that fails to render or write is logged and skipped; the
        remaining files are still produced.

        Args:
            output_dir: Target directory (defaults to the configured one)

        Returns:
            Paths of the files written
        """
        output_dir = output_dir or self.config.output_dir
        written = []
        for group in self.groups():
            path = os.path.join(output_dir, group.filename(self.config.file_postfix))
            try:
                content = self.render(group)
            except SerializationError as e:
                log.error("Skipping %s: %s", path, e)
                continue
            try:
                write_text(path, content)
            except WriteError as e:
                log.error("%s", e)
                continue
            print(f"{path} saved")
            written.append(path)
        return written

    def summary_table(self) -> str:
        """Get a table of billed time and amount per week and overall."""
        headers = ["Week", "Entries", "Total time", "Total"]
        rows = []
        for group in self.groups():
            label = f"{day_str(group.start_date)} to {day_str(group.end_date)}"
            if group is self.grand_total:
                label = f"All: {label}"
            total = math.floor(ms_to_hours(group.total_ms) * self.config.rate)
            rows.append([label, len(group), format_ms(group.total_ms), total])
        return tabulate(rows, headers=headers, tablefmt="github")
