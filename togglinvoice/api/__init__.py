"""Toggl API access for togglInvoice."""

from .client import TogglClient

__all__ = ['TogglClient']
