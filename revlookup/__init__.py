# file: revlookup/__init__.py
"""
revlookup - reverse phone number lookup.

This package resolves a phone number to contact data through pluggable lookup
providers (a local area-code store, scraped directory pages, CNAM APIs) and
normalizes whatever they find into a single immutable contact record.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
