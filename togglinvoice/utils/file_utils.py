"""File I/O utility functions for togglInvoice."""
import json
import os
import sys
from typing import Any, Dict, Optional

from ..errors import MalformedInputError, WriteError


def write_text(path: str, content: str) -> None:
    """Write a text file, replacing any previous content.

    Args:
        path: Output file path
        content: Text to write

    Raises:
        WriteError: If the file cannot be written
    """
    try:
        with open(path, 'w', newline='', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        raise WriteError(f"Failed to write '{path}': {e}") from e


def write_report_json(report: Dict[str, Any], path: Optional[str] = None) -> None:
    """Write an aggregated report as JSON to a file or stdout.

    Args:
        report: Aggregated report
        path: Output file path, or None for stdout
    """
    content = json.dumps(report)
    if path:
        write_text(path, content)
    else:
        sys.stdout.write(content)
        sys.stdout.flush()


def read_report_json(path: Optional[str] = None) -> Dict[str, Any]:
    """Read an aggregated report document from a file or stdin.

    The whole document is read before parsing.

    Args:
        path: Input file path, or None for stdin

    Returns:
        Parsed report with a ``data`` list

    Raises:
        MalformedInputError: If the document is unreadable or not a report
    """
    try:
        if path:
            if not os.path.exists(path):
                raise MalformedInputError(f"Input file not found: {path}")
            with open(path, 'r', encoding='utf-8') as f:
                raw = f.read()
        else:
            raw = sys.stdin.read()
        report = json.loads(raw)
    except (OSError, ValueError) as e:
        raise MalformedInputError(f"Cannot parse report JSON: {e}") from e

    if not isinstance(report, dict) or not isinstance(report.get("data"), list):
        raise MalformedInputError("Report JSON must be an object with a 'data' list")
    return report
