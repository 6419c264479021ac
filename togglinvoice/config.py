"""Configuration for togglInvoice.

Values come from ``togglinvoice.env`` (via python-dotenv), then the process
environment, then command line options. The resulting ``InvoiceConfig`` is
built once and handed to every component; pipeline code never reads the
environment itself.
"""
import os
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Callable, Optional

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_ENV_FILE = "togglinvoice.env"
DEFAULT_RATE = 125
DEFAULT_MIN_DURATION_MS = 15 * 60 * 1000
DEFAULT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_ROUND_TRIP_PROBE = datetime(2016, 7, 4, 23, 30, tzinfo=timezone(timedelta(hours=2)))


def load_environment(env_file: Optional[str] = None) -> bool:
    """Load environment variables from an env file if it exists.

    Args:
        env_file: Path to the env file (defaults to togglinvoice.env in the cwd)

    Returns:
        True if a file was loaded
    """
    path = env_file or os.path.join(os.getcwd(), DEFAULT_ENV_FILE)
    if not os.path.exists(path):
        if env_file:
            raise ConfigError(f"Missing environment file: {env_file}")
        return False
    return load_dotenv(path)


def get_env_var(key: str, required: bool = True) -> Optional[str]:
    """Get an environment variable.

    Args:
        key: Environment variable name
        required: Raise if the variable is missing

    Returns:
        Environment variable value, or None if optional and unset

    Raises:
        ConfigError: If a required variable is not set
    """
    value = os.getenv(key)
    if not value:
        if required:
            raise ConfigError(f"Set {key} in your environment or {DEFAULT_ENV_FILE}.")
        return None
    return value


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Turn an IANA zone name into a tzinfo; None means the system zone."""
    if not name:
        return None
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown time zone: {name}") from e


def _pick(cli_value: Any, env_key: str, default: Any, cast: Callable[[str], Any] = str) -> Any:
    if cli_value is not None:
        return cli_value
    raw = os.getenv(env_key)
    if raw in (None, ""):
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {env_key}: {raw!r}") from e


class InvoiceConfig:
    """Settings consumed by the billing pipeline and the invoice writer."""

    def __init__(self, rate: float = DEFAULT_RATE, min_duration_ms: int = DEFAULT_MIN_DURATION_MS,
                 date_format: str = DEFAULT_DATE_FORMAT, file_postfix: str = "",
                 tz: Optional[tzinfo] = None, week_start: int = 0, output_dir: str = "."):
        """Initialize an InvoiceConfig.

        Args:
            rate: Currency units per billed hour
            min_duration_ms: Minimum billable duration of a day chunk in milliseconds
            date_format: strftime/strptime format of billable timestamps
            file_postfix: Text appended to every CSV file name before the extension
            tz: Zone used for day boundaries (None for the system zone)
            week_start: Day the week starts on (0=Monday, 6=Sunday)
            output_dir: Directory the CSV files are written to

        Raises:
            ConfigError: If a value is out of range
        """
        if rate <= 0:
            raise ConfigError(f"Rate must be positive, got {rate}")
        if min_duration_ms < 0:
            raise ConfigError(f"Minimum billing duration must not be negative, got {min_duration_ms}")
        if week_start not in range(7):
            raise ConfigError(f"Week start must be between 0 and 6, got {week_start}")
        try:
            round_trip = datetime.strptime(_ROUND_TRIP_PROBE.strftime(date_format), date_format)
        except ValueError as e:
            raise ConfigError(f"Date format {date_format!r} cannot be parsed back: {e}") from e
        if round_trip != _ROUND_TRIP_PROBE:
            raise ConfigError(f"Date format {date_format!r} must keep date, time and UTC offset")

        self.rate = rate
        self.min_duration_ms = int(min_duration_ms)
        self.date_format = date_format
        self.file_postfix = file_postfix
        self.tz = tz
        self.week_start = week_start
        self.output_dir = output_dir

    @classmethod
    def from_args(cls, args: Any) -> "InvoiceConfig":
        """Build a config from parsed CLI options, falling back to the environment.

        Args:
            args: argparse namespace (missing attributes count as unset)

        Returns:
            InvoiceConfig
        """
        return cls(
            rate=_pick(getattr(args, 'rate', None), "BILLING_RATE", DEFAULT_RATE, float),
            min_duration_ms=_pick(getattr(args, 'min_duration', None), "MIN_BILLING_DURATION",
                                  DEFAULT_MIN_DURATION_MS, int),
            date_format=_pick(getattr(args, 'date_format', None), "DATE_FORMAT", DEFAULT_DATE_FORMAT),
            file_postfix=_pick(getattr(args, 'file_postfix', None), "FILE_POSTFIX", ""),
            tz=resolve_timezone(_pick(getattr(args, 'timezone', None), "TIMEZONE", None)),
            week_start=_pick(getattr(args, 'weekstart', None), "WEEK_START", 0, int),
            output_dir=getattr(args, 'output_dir', None) or ".",
        )
