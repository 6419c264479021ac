"""
togglInvoice: A CLI tool for turning Toggl time entries into weekly billable-time CSV invoices.

- Fetches the detailed report from the Toggl API, following pagination
- Splits entries at day boundaries and applies a minimum billable duration
- Groups billable time by week and writes one CSV invoice per week plus a consolidated one
- Can be used as a CLI (via `python -m togglinvoice` or `togglinvoice` if installed as a package)
"""

__version__ = "0.1.0"
