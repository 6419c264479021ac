"""Main module for the togglinvoice package."""
import sys
import logging
import argparse
from datetime import date
from typing import Any, Dict, List, Optional

from .api.client import TogglClient
from .config import InvoiceConfig, load_environment, get_env_var
from .errors import TogglInvoiceError, ConfigError, FetchError, MalformedInputError
from .utils.date_utils import parse_day, day_str
from .utils.file_utils import read_report_json, write_report_json
from .reports.billing import expand_entries
from .reports.invoice import InvoiceGenerator

EXIT_CODES = {
    ConfigError: 1,
    FetchError: 1,
    MalformedInputError: 2,
}


# --- CLI Logic ---
def _add_fetch_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-w', '--workspace-id', help='Toggl workspace ID (default: $TOGGL_WORKSPACE_ID)')
    parser.add_argument('-s', '--start', help='Start date (YYYY-MM-DD, default: today)')
    parser.add_argument('-e', '--end', help='End date (YYYY-MM-DD, default: today)')
    parser.add_argument('-t', '--api-token', help='Toggl API token (default: $TOGGL_API_TOKEN)')


def _add_billing_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('-r', '--rate', type=float, help='Billing rate per hour (default: $BILLING_RATE or 125)')
    parser.add_argument('-m', '--min-duration', type=int,
                        help='Minimum billable duration per day chunk in ms (default: $MIN_BILLING_DURATION or 900000)')
    parser.add_argument('--date-format', help='strftime format of billable timestamps (default: $DATE_FORMAT or %%Y-%%m-%%dT%%H:%%M:%%S%%z)')
    parser.add_argument('-p', '--file-postfix', help='Text appended to CSV file names (default: $FILE_POSTFIX)')
    parser.add_argument('--timezone', help='IANA time zone for day boundaries (default: $TIMEZONE or system zone)')
    parser.add_argument('--weekstart', type=int, choices=range(0, 7),
                        help='Week start day: 0=Mon, 6=Sun (default: $WEEK_START or 0)')
    parser.add_argument('-o', '--output-dir', help='Directory for CSV files (default: current directory)')
    parser.add_argument('--summary', action='store_true', help='Print a per-week summary table after writing')


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Argument list (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Export Toggl time entries into weekly billable-time CSV invoices.",
        epilog="""
Examples:
    # Fetch the detailed report for a date range as JSON
  togglinvoice report -w 123456 -s 2016-07-01 -e 2016-07-31 > report.json
    ---
    # Produce weekly CSV invoices from that report at 150/hour
  togglinvoice output -r 150 < report.json
    ---
    # Both steps at once, with a summary table
  togglinvoice invoice -w 123456 -s 2016-07-01 -e 2016-07-31 --summary
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        prog="togglinvoice"
    )
    parser.add_argument('--env-file', help='Environment file to load (default: ./togglinvoice.env if present)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    commands = parser.add_subparsers(dest='command', metavar='command')
    commands.required = True

    list_parser = commands.add_parser('workspaces', help='List user and workspaces with their IDs')
    list_parser.add_argument('-t', '--api-token', help='Toggl API token (default: $TOGGL_API_TOKEN)')

    report_parser = commands.add_parser('report', help='Export the detailed report as JSON')
    _add_fetch_args(report_parser)
    report_parser.add_argument('-f', '--output', help='Write the JSON to this file instead of stdout')

    output_parser = commands.add_parser('output', help='Produce CSV invoices from a report JSON document')
    output_parser.add_argument('-i', '--input', help='Read the JSON from this file instead of stdin')
    _add_billing_args(output_parser)

    invoice_parser = commands.add_parser('invoice', help='Fetch the report and produce CSV invoices')
    _add_fetch_args(invoice_parser)
    _add_billing_args(invoice_parser)

    return parser.parse_args(argv)


def make_client(args: argparse.Namespace) -> TogglClient:
    """Create an API client from CLI options or the environment."""
    api_token = getattr(args, 'api_token', None) or get_env_var("TOGGL_API_TOKEN")
    return TogglClient(api_token)


def fetch_report(args: argparse.Namespace) -> Dict[str, Any]:
    """Fetch the aggregated detailed report for the requested range.

    Args:
        args: Parsed arguments

    Returns:
        Aggregated report
    """
    workspace_id = args.workspace_id or get_env_var("TOGGL_WORKSPACE_ID")
    today = date.today().isoformat()
    try:
        start_date = parse_day(args.start or today)
        end_date = parse_day(args.end or today)
    except ValueError as e:
        raise ConfigError(f"Invalid date: {e}") from e
    if start_date > end_date:
        raise ConfigError(f"Start date {start_date} is after end date {end_date}")

    client = make_client(args)
    print(f"📅 Range: {day_str(start_date)} → {day_str(end_date)}", file=sys.stderr)
    report = client.get_detailed_report(workspace_id, start_date.isoformat(), end_date.isoformat())
    print(f"📊 Found {len(report['data'])} time entries", file=sys.stderr)
    return report


def produce_invoices(report: Dict[str, Any], config: InvoiceConfig, summary: bool = False) -> List[str]:
    """Turn an aggregated report into CSV invoice files.

    Args:
        report: Aggregated report with a ``data`` list
        config: Invoice settings
        summary: Whether to print the summary table

    Returns:
        Paths of the files written
    """
    entries = expand_entries(report.get("data") or [], config)
    if not entries:
        print("\n⚠️  No billable time entries found")
        return []

    generator = InvoiceGenerator(entries, config)
    written = generator.generate_invoices()
    if summary:
        print()
        print(generator.summary_table())
    return written


def list_user_and_workspaces(args: argparse.Namespace) -> None:
    """List user information and workspaces."""
    client = make_client(args)
    user, workspaces = client.get_user_and_workspaces()

    print("\nUser Info:")
    print(f"  Name: {user.get('fullname')}")
    print(f"  Email: {user.get('email')}")
    print(f"  ID: {user.get('id')}")

    print("\nWorkspaces:")
    for ws in workspaces:
        print(f"  Name: {ws.get('name')}, ID: {ws.get('id')}")


def run(args: argparse.Namespace) -> None:
    """Dispatch a parsed command."""
    if args.command == 'workspaces':
        list_user_and_workspaces(args)
    elif args.command == 'report':
        report = fetch_report(args)
        write_report_json(report, args.output)
        if args.output:
            print(f"{args.output} saved", file=sys.stderr)
    elif args.command == 'output':
        config = InvoiceConfig.from_args(args)
        report = read_report_json(args.input)
        produce_invoices(report, config, args.summary)
    elif args.command == 'invoice':
        config = InvoiceConfig.from_args(args)
        report = fetch_report(args)
        produce_invoices(report, config, args.summary)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
    )

    try:
        load_environment(args.env_file)
        run(args)
    except TogglInvoiceError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(EXIT_CODES.get(type(e), 1))


if __name__ == "__main__":
    main()
