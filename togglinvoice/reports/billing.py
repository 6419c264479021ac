"""Splitting of time entries into per-day chunks and billable durations."""
import logging
from collections import namedtuple
from datetime import datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, Iterator, List, Optional

from ..config import InvoiceConfig
from ..errors import MalformedInputError
from ..utils.date_utils import diff_ms, parse_instant, start_of_day, to_local, truncate_to_minute
from .time_entry import BillableEntry

log = logging.getLogger(__name__)

DayChunk = namedtuple("DayChunk", ["start", "end", "duration"])


def split_by_day(start: datetime, end: datetime, tz: Optional[tzinfo] = None,
                 interval: int = 1) -> Iterator[DayChunk]:
    """Yield one chunk per calendar day covered by ``[start, end)``.

    Each chunk is clipped to the day boundaries of ``tz`` (the system zone
    when None). A range that starts at midnight has no empty leading chunk,
    and ``start == end`` yields a single zero-length chunk.

    Args:
        start: Start instant
        end: End instant
        tz: Zone whose midnights split the range
        interval: Number of days per chunk

    Yields:
        DayChunk(start, end, duration) with duration in milliseconds
    """
    current_start = to_local(start, tz)
    end = to_local(end, tz)
    while True:
        boundary = start_of_day(current_start.date() + timedelta(days=interval), tz)
        current_end = boundary if boundary.timestamp() < end.timestamp() else end
        yield DayChunk(current_start, current_end, diff_ms(current_start, current_end))
        if current_end.timestamp() >= end.timestamp():
            break
        current_start = boundary


def to_billable(entry: Dict[str, Any], chunk: DayChunk, min_duration_ms: int,
                date_format: str) -> BillableEntry:
    """Bill one day chunk of an entry.

    Start and end are truncated to the minute; the billed duration is the
    truncated span, but never less than ``min_duration_ms``. The floor applies
    to every chunk on its own.

    Args:
        entry: Raw Toggl entry the chunk belongs to
        chunk: Day chunk of that entry
        min_duration_ms: Minimum billable duration in milliseconds
        date_format: Format of the billable timestamps

    Returns:
        BillableEntry
    """
    start_billable = truncate_to_minute(chunk.start)
    end_billable = truncate_to_minute(chunk.end)
    dur_rounded = diff_ms(start_billable, end_billable)
    dur_billable = max(min_duration_ms, dur_rounded)
    log.debug("adding billable rounded=%d calc=%d, min=%d", dur_rounded, chunk.duration, min_duration_ms)
    return BillableEntry(
        entry,
        dur_billable,
        start_billable=start_billable.strftime(date_format),
        end_billable=end_billable.strftime(date_format),
    )


def expand_entries(entries: Iterable[Dict[str, Any]], config: InvoiceConfig) -> List[BillableEntry]:
    """Turn raw Toggl entries into billable day chunks, keeping their order.

    Entries without a start or end (running timers) are skipped.

    Args:
        entries: Raw entries from the aggregated report
        config: Invoice settings

    Returns:
        List of BillableEntry

    Raises:
        MalformedInputError: If an entry is not an object or has an unparseable timestamp
    """
    billable = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise MalformedInputError(f"Entry #{idx + 1} is not an object")
        if not entry.get("start") or not entry.get("end"):
            log.warning("Skipping entry #%d without start/end: %r", idx + 1, entry.get("description"))
            continue
        try:
            start = parse_instant(entry["start"])
            end = parse_instant(entry["end"])
        except (AttributeError, TypeError, ValueError) as e:
            raise MalformedInputError(f"Entry #{idx + 1} has an invalid timestamp: {e}") from e

        for chunk in split_by_day(start, end, config.tz):
            billable.append(to_billable(entry, chunk, config.min_duration_ms, config.date_format))
    return billable
