"""Bulk-update npm dependencies across frontend project checkouts."""

__version__ = "0.1.0"
