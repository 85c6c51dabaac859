"""Quotation and optimization helpers for venue/pool arbitrage."""

from __future__ import annotations

from .amm import swap_out
from .book import consume_by_budget, consume_by_quantity, ladder_from_levels, top
from .evaluator import (
    evaluate_tick,
    evaluate_window,
    format_alert,
    format_report,
    validate_market_data,
)
from .optimizer import pick_best, sweep, sweep_forward, sweep_reverse

__all__ = [
    "consume_by_budget",
    "consume_by_quantity",
    "evaluate_tick",
    "evaluate_window",
    "format_alert",
    "format_report",
    "ladder_from_levels",
    "pick_best",
    "swap_out",
    "sweep",
    "sweep_forward",
    "sweep_reverse",
    "top",
    "validate_market_data",
]
