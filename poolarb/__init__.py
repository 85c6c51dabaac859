"""Core package for venue/pool arbitrage quotation."""

from __future__ import annotations

from .engine import (
    consume_by_budget,
    consume_by_quantity,
    evaluate_tick,
    pick_best,
    swap_out,
    sweep_forward,
    sweep_reverse,
)
from .errors import InvalidInput, MissingMarketData
from .models import (
    Direction,
    FillResult,
    Ladder,
    OrderBookSnapshot,
    PoolReserves,
    PriceLevel,
    ScenarioWindow,
    VenueId,
)

__all__ = [
    "Direction",
    "FillResult",
    "InvalidInput",
    "Ladder",
    "MissingMarketData",
    "OrderBookSnapshot",
    "PoolReserves",
    "PriceLevel",
    "ScenarioWindow",
    "VenueId",
    "consume_by_budget",
    "consume_by_quantity",
    "evaluate_tick",
    "pick_best",
    "swap_out",
    "sweep_forward",
    "sweep_reverse",
]
