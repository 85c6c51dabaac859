"""Integer sweeps that find the most profitable trade size per direction."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Iterable, Sequence

from poolarb.engine.amm import swap_out
from poolarb.engine.book import consume_by_budget, consume_by_quantity
from poolarb.errors import InvalidInput
from poolarb.models import (
    Breakdown,
    Direction,
    OptimalPoint,
    OrderBookSnapshot,
    PoolReserves,
    ScenarioWindow,
    SweepResult,
    VenueQuote,
)

log = logging.getLogger(__name__)

DEFAULT_EXIT_MULTIPLIER = Decimal("0.99")


def pick_best(quotes: Sequence[VenueQuote]) -> VenueQuote:
    """Return the quote with the largest ``amount_produced``.

    Ties keep the first-listed quote so the choice is stable across runs.
    """

    if not quotes:
        raise InvalidInput("pick_best needs at least one quote")
    best = quotes[0]
    for quote in quotes[1:]:
        if quote.amount_produced > best.amount_produced:
            best = quote
    return best


def sweep(
    amounts: Iterable[int], price_point: Callable[[int], OptimalPoint]
) -> SweepResult:
    """Evaluate *price_point* at every amount and keep the best one.

    Every amount is scored; profit is not unimodal over the grid because
    depth changes at level boundaries. A later point replaces the best only
    when its profit is strictly greater, so ties resolve to the lowest amount.
    """

    curve: list[OptimalPoint] = []
    best: OptimalPoint | None = None
    for amount in amounts:
        point = price_point(amount)
        curve.append(point)
        if best is None or point.profit > best.profit:
            best = point
    if best is None:
        raise InvalidInput("sweep over an empty amount range")
    return SweepResult(curve=tuple(curve), best=best)


def forward_point(
    amount: int,
    snapshots: Sequence[OrderBookSnapshot],
    pool: PoolReserves,
    exit_multiplier: Decimal = DEFAULT_EXIT_MULTIPLIER,
) -> OptimalPoint:
    """Buy on the best venue for *amount* USDT, then sell the tokens into the pool."""

    budget = Decimal(amount)
    quotes = [
        VenueQuote(snap.venue_id, consume_by_budget(snap.asks, budget, snap.fee_rate))
        for snap in snapshots
    ]
    best = pick_best(quotes)
    tokens = best.amount_produced
    proceeds = (
        swap_out(tokens, pool.reserve_base, pool.reserve_quote, pool.fee_rate)
        * exit_multiplier
    )
    return OptimalPoint(
        amount=amount,
        direction=Direction.FORWARD,
        venue_id=best.venue_id,
        profit=proceeds - budget,
        breakdown=Breakdown(
            spent=best.amount_consumed,
            tokens=best.amount_produced,
            proceeds=proceeds,
            residual_unfilled=best.residual_unfilled,
            unspent_budget=best.fill.unspent_budget,
        ),
    )


def reverse_point(
    amount: int,
    snapshots: Sequence[OrderBookSnapshot],
    pool: PoolReserves,
) -> OptimalPoint:
    """Buy from the pool for *amount* USDT, then sell the tokens on the best venue.

    No exit multiplier is applied on this leg.
    """

    spent = Decimal(amount)
    tokens = swap_out(spent, pool.reserve_quote, pool.reserve_base, pool.fee_rate)
    quotes = [
        VenueQuote(snap.venue_id, consume_by_quantity(snap.bids, tokens, snap.fee_rate))
        for snap in snapshots
    ]
    best = pick_best(quotes)
    return OptimalPoint(
        amount=amount,
        direction=Direction.REVERSE,
        venue_id=best.venue_id,
        profit=best.amount_produced - spent,
        breakdown=Breakdown(
            spent=spent,
            tokens=tokens,
            proceeds=best.amount_produced,
            residual_unfilled=best.residual_unfilled,
        ),
    )


def sweep_forward(
    window: ScenarioWindow,
    snapshots: Sequence[OrderBookSnapshot],
    pool: PoolReserves,
    exit_multiplier: Decimal = DEFAULT_EXIT_MULTIPLIER,
) -> SweepResult:
    """Scan *window* for the best buy-on-venue / sell-into-pool size."""

    result = sweep(
        window.amounts(),
        lambda amount: forward_point(amount, snapshots, pool, exit_multiplier),
    )
    log.debug(
        "sweep_forward %s best amount=%s venue=%s profit=%.4f",
        window.name,
        result.best.amount,
        result.best.venue_id.value,
        result.best.profit,
    )
    return result


def sweep_reverse(
    window: ScenarioWindow,
    snapshots: Sequence[OrderBookSnapshot],
    pool: PoolReserves,
) -> SweepResult:
    """Scan *window* for the best buy-from-pool / sell-on-venue size."""

    result = sweep(
        window.amounts(), lambda amount: reverse_point(amount, snapshots, pool)
    )
    log.debug(
        "sweep_reverse %s best amount=%s venue=%s profit=%.4f",
        window.name,
        result.best.amount,
        result.best.venue_id.value,
        result.best.profit,
    )
    return result


__all__ = [
    "DEFAULT_EXIT_MULTIPLIER",
    "forward_point",
    "pick_best",
    "reverse_point",
    "sweep",
    "sweep_forward",
    "sweep_reverse",
]
