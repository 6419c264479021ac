"""Weekly grouping of billable entries.

Weeks are keyed by a Saturday anchor: the start of the week containing the
entry's billable start (Monday by default), moved to the Saturday of that
day's ISO week. An invoice file is named after the week behind its anchor,
so the file name always covers the days it holds.
"""
from collections import OrderedDict
from datetime import date, timedelta
from typing import Iterable, List, Optional

from ..config import InvoiceConfig
from ..utils.date_utils import SATURDAY, get_week_range, iso_saturday
from .time_entry import BillableEntry


def week_anchor(day: date, week_start: int = 0) -> date:
    """Get the Saturday anchor of the week containing ``day``.

    Args:
        day: Calendar day of an entry's billable start
        week_start: Day of week to start on (0=Monday, 6=Sunday)

    Returns:
        Anchor date
    """
    week_first, _ = get_week_range(day, week_start)
    return iso_saturday(week_first)


def week_first_day(anchor: date, week_start: int = 0) -> date:
    """Get the first day of the week whose Saturday anchor is ``anchor``.

    Args:
        anchor: Saturday anchor
        week_start: Day of week to start on (0=Monday, 6=Sunday)

    Returns:
        First day of that week (a Sunday week starts the day after its anchor)
    """
    return anchor + timedelta(days=week_start - SATURDAY)


def entry_anchor(entry: BillableEntry, config: InvoiceConfig) -> date:
    return week_anchor(entry.start_dt(config.date_format).date(), config.week_start)


class WeekGroup:
    """Billable entries sharing a range of week anchors."""

    def __init__(self, anchor: date, entries: Optional[List[BillableEntry]] = None,
                 last_anchor: Optional[date] = None, week_start: int = 0):
        """Initialize a WeekGroup.

        Args:
            anchor: First (or only) week anchor of the group
            entries: Entries in derivation order (optional)
            last_anchor: Last week anchor when the group spans several weeks (optional)
            week_start: Day of week the weeks start on (0=Monday, 6=Sunday)
        """
        self.anchor = anchor
        self.last_anchor = last_anchor or anchor
        self.week_start = week_start
        self.entries = list(entries or [])

    @property
    def total_ms(self) -> int:
        """Summed billable duration in milliseconds."""
        return sum(e.dur_billable for e in self.entries)

    @property
    def start_date(self) -> date:
        return week_first_day(self.anchor, self.week_start)

    @property
    def end_date(self) -> date:
        _, last_day = get_week_range(week_first_day(self.last_anchor, self.week_start), self.week_start)
        return last_day

    def rows(self) -> List[BillableEntry]:
        """Get the entries followed by the group's total row."""
        return self.entries + [BillableEntry.total_row(self.total_ms)]

    def filename(self, postfix: str = "") -> str:
        """Get the CSV file name, e.g. ``20160704-20160710.csv``."""
        return f"{self.start_date:%Y%m%d}-{self.end_date:%Y%m%d}{postfix}.csv"

    def __len__(self) -> int:
        return len(self.entries)


def group_by_week(entries: Iterable[BillableEntry], config: InvoiceConfig) -> "OrderedDict[date, WeekGroup]":
    """Group billable entries by week anchor.

    Groups appear in the order their first entry was seen, and entries keep
    their order within a group.

    Args:
        entries: Billable entries (total rows are ignored)
        config: Invoice settings

    Returns:
        Mapping of anchor date to WeekGroup
    """
    groups = OrderedDict()
    for entry in entries:
        if entry.is_total_row:
            continue
        anchor = entry_anchor(entry, config)
        if anchor not in groups:
            groups[anchor] = WeekGroup(anchor, week_start=config.week_start)
        groups[anchor].entries.append(entry)
    return groups


def grand_total(entries: List[BillableEntry], config: InvoiceConfig) -> Optional[WeekGroup]:
    """Build the group covering all entries, from the earliest week to the latest one.

    Args:
        entries: Billable entries in derivation order
        config: Invoice settings

    Returns:
        WeekGroup spanning every week, or None if there are no entries
    """
    real = [e for e in entries if not e.is_total_row]
    if not real:
        return None
    anchors = [entry_anchor(e, config) for e in real]
    return WeekGroup(min(anchors), real, last_anchor=max(anchors), week_start=config.week_start)
