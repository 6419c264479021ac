"""BillableEntry class for representing one billed day-chunk of a Toggl time entry."""
import copy
from datetime import datetime
from typing import Optional, Dict, Any


class BillableEntry:
    """A day-bounded, billable slice of a Toggl time entry, or a group's total row."""

    def __init__(self, entry_data: Optional[Dict[str, Any]], dur_billable: int,
                 start_billable: str = "", end_billable: str = "", is_total_row: bool = False):
        """Initialize a BillableEntry.

        Args:
            entry_data: Raw entry data from the Toggl API (copied, never mutated)
            dur_billable: Billed duration in milliseconds
            start_billable: Formatted billable start timestamp
            end_billable: Formatted billable end timestamp
            is_total_row: Whether this is a synthetic total row
        """
        self.raw_data = copy.deepcopy(entry_data) if entry_data else {}
        self.description = self.raw_data.get("description") or ""
        self.dur_billable = dur_billable
        self.start_billable = start_billable
        self.end_billable = end_billable
        self.is_total_row = is_total_row

    @classmethod
    def total_row(cls, dur_billable: int) -> "BillableEntry":
        """Create a total row carrying only a summed duration.

        Args:
            dur_billable: Summed billed duration in milliseconds

        Returns:
            BillableEntry flagged as a total row
        """
        return cls(None, dur_billable, is_total_row=True)

    def start_dt(self, date_format: str) -> Optional[datetime]:
        """Parse the billable start back into a datetime (None if empty)."""
        return self._parse(self.start_billable, date_format)

    def end_dt(self, date_format: str) -> Optional[datetime]:
        """Parse the billable end back into a datetime (None if empty)."""
        return self._parse(self.end_billable, date_format)

    @staticmethod
    def _parse(value: str, date_format: str) -> Optional[datetime]:
        if not value:
            return None
        return datetime.strptime(value, date_format)

    def __repr__(self) -> str:
        if self.is_total_row:
            return f"BillableEntry(total_row, dur_billable={self.dur_billable})"
        return (f"BillableEntry({self.description!r}, {self.start_billable}"
                f" -> {self.end_billable}, dur_billable={self.dur_billable})")
