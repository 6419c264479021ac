"""Formatting utility functions for togglInvoice."""
from typing import Union

MS_PER_HOUR = 3600 * 1000


def format_seconds(seconds: int) -> str:
    """Format seconds as HH:MM:SS.

    Hours are not wrapped at 24, so long totals stay readable.

    Args:
        seconds: Number of seconds

    Returns:
        Formatted time string
    """
    h, m = divmod(seconds, 3600)
    m, s = divmod(m, 60)
    return f"{h:02}:{m:02}:{s:02}"


def format_ms(milliseconds: int) -> str:
    """Format a millisecond duration as HH:MM:SS, dropping the sub-second part."""
    return format_seconds(int(milliseconds) // 1000)


def ms_to_hours(milliseconds: int) -> float:
    """Convert milliseconds to fractional hours."""
    return milliseconds / MS_PER_HOUR


def format_amount(value: Union[int, float]) -> Union[int, float]:
    """Normalize a monetary cell so whole numbers render without ``.0``.

    Args:
        value: Amount as computed from hours and rate

    Returns:
        An int for whole values, the float unchanged otherwise
    """
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
