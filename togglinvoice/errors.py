"""Exception types raised by togglInvoice."""


class TogglInvoiceError(Exception):
    """Base class for all togglInvoice errors."""


class ConfigError(TogglInvoiceError):
    """A configuration value is missing or invalid."""


class FetchError(TogglInvoiceError):
    """The Toggl API could not be reached or returned an unusable response."""


class MalformedInputError(TogglInvoiceError):
    """The report document handed to the invoice stage cannot be processed."""


class SerializationError(TogglInvoiceError):
    """Rows of one invoice could not be converted to CSV."""


class WriteError(TogglInvoiceError):
    """An invoice file could not be written."""
