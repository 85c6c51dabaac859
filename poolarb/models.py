"""Shared data models for venue/pool arbitrage quotation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Iterator

from .errors import InvalidInput

ZERO = Decimal("0")


class VenueId(str, Enum):
    """Centralized venues quoted against the pool (values are ccxt ids)."""

    GATE = "gateio"
    BYBIT = "bybit"

    @property
    def label(self) -> str:
        """Display name used in alert text."""
        return _VENUE_LABELS[self]

_VENUE_LABELS = {VenueId.GATE: "Gate", VenueId.BYBIT: "Bybit"}


class Direction(str, Enum):
    """Round-trip direction of an arbitrage route."""

    FORWARD = "forward"  # buy on venue, sell into pool
    REVERSE = "reverse"  # buy from pool, sell on venue


@dataclass(frozen=True)
class PriceLevel:
    """One rung of order-book depth."""

    price: Decimal
    size: Decimal

    def __post_init__(self) -> None:
        if not (self.price.is_finite() and self.size.is_finite()):
            raise InvalidInput(f"level must be finite, got {self.price} x {self.size}")
        if self.price <= 0:
            raise InvalidInput(f"price must be positive, got {self.price}")
        if self.size < 0:
            raise InvalidInput(f"size must be non-negative, got {self.size}")

    @property
    def notional(self) -> Decimal:
        """Currency cost of taking the full level."""
        return self.price * self.size


@dataclass(frozen=True)
class Ladder:
    """Immutable price ladder for one side of a book.

    Asks are expected in ascending price order and bids in descending order;
    the first rung is always the best price.
    """

    levels: tuple[PriceLevel, ...] = ()

    def __iter__(self) -> Iterator[PriceLevel]:
        return iter(self.levels)

    def __len__(self) -> int:
        return len(self.levels)

    def __bool__(self) -> bool:
        return bool(self.levels)


@dataclass(frozen=True)
class OrderBookSnapshot:
    """Order book of one venue for one pair at tick time."""

    venue_id: VenueId
    pair_id: str
    asks: Ladder
    bids: Ladder
    fee_rate: Decimal = ZERO
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class PoolReserves:
    """Constant-product pool state (base is the traded asset, quote is USDT)."""

    reserve_base: Decimal
    reserve_quote: Decimal
    fee_rate: Decimal = Decimal("0.003")


@dataclass(frozen=True)
class FillResult:
    """Outcome of walking a ladder.

    ``amount_consumed`` is in input units (currency for budget walks, asset for
    quantity walks) and ``amount_produced`` in output units after fees.
    ``residual_unfilled`` is input that found no depth. ``unspent_budget`` is
    currency left over once a budget walk ran out of asks.
    """

    amount_consumed: Decimal
    amount_produced: Decimal
    residual_unfilled: Decimal = ZERO
    unspent_budget: Decimal = ZERO

    @property
    def insufficient_depth(self) -> bool:
        return self.residual_unfilled > 0 or self.unspent_budget > 0


@dataclass(frozen=True)
class VenueQuote:
    """A :class:`FillResult` tagged with the venue that produced it."""

    venue_id: VenueId
    fill: FillResult

    @property
    def amount_consumed(self) -> Decimal:
        return self.fill.amount_consumed

    @property
    def amount_produced(self) -> Decimal:
        return self.fill.amount_produced

    @property
    def residual_unfilled(self) -> Decimal:
        return self.fill.residual_unfilled


@dataclass(frozen=True)
class Breakdown:
    """Per-leg amounts behind a profit figure.

    Forward: ``spent`` USDT on the venue buys ``tokens``, sold into the pool
    for ``proceeds`` USDT. Reverse: ``spent`` USDT into the pool returns
    ``tokens``, sold on the venue for ``proceeds`` USDT.
    """

    spent: Decimal
    tokens: Decimal
    proceeds: Decimal
    residual_unfilled: Decimal = ZERO
    unspent_budget: Decimal = ZERO


@dataclass(frozen=True)
class OptimalPoint:
    """Profit of a route at one integer trade size."""

    amount: int
    direction: Direction
    venue_id: VenueId
    profit: Decimal
    breakdown: Breakdown


@dataclass(frozen=True)
class SweepResult:
    """Full profit curve of a sweep and its best point."""

    curve: tuple[OptimalPoint, ...]
    best: OptimalPoint


@dataclass(frozen=True)
class ScenarioWindow:
    """Configured integer amount range with its own alert threshold."""

    name: str
    min_amount: int
    max_amount: int
    profit_threshold: Decimal

    def __post_init__(self) -> None:
        if self.min_amount <= 0:
            raise InvalidInput(f"{self.name}: min_amount must be positive")
        if self.max_amount < self.min_amount:
            raise InvalidInput(f"{self.name}: max_amount below min_amount")

    def amounts(self) -> range:
        """Every integer amount in the window, inclusive."""
        return range(self.min_amount, self.max_amount + 1)


@dataclass(frozen=True)
class WindowResult:
    """Evaluation of one scenario window."""

    window_name: str
    forward_best: OptimalPoint
    reverse_best: OptimalPoint
    chosen_direction: Direction
    profit: Decimal
    narrative: str
    should_alert: bool
    threshold: Decimal

    @property
    def chosen(self) -> OptimalPoint:
        if self.chosen_direction is Direction.FORWARD:
            return self.forward_best
        return self.reverse_best


@dataclass(frozen=True)
class TickReport:
    """All window results computed from one market snapshot."""

    results: tuple[WindowResult, ...]
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def alerts(self) -> tuple[WindowResult, ...]:
        return tuple(r for r in self.results if r.should_alert)

    @property
    def best(self) -> WindowResult | None:
        if not self.results:
            return None
        best = self.results[0]
        for r in self.results[1:]:
            if r.profit > best.profit:
                best = r
        return best
