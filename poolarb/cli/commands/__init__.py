"""Grouped Typer command modules for the poolarb CLI."""

from __future__ import annotations

from . import notify, quote, scan

__all__ = ["notify", "quote", "scan"]
