"""Scenario evaluation: run both sweeps per window and decide what to alert."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Sequence

from poolarb.engine.optimizer import (
    DEFAULT_EXIT_MULTIPLIER,
    sweep_forward,
    sweep_reverse,
)
from poolarb.errors import MissingMarketData
from poolarb.models import (
    Direction,
    OptimalPoint,
    OrderBookSnapshot,
    PoolReserves,
    ScenarioWindow,
    TickReport,
    VenueId,
    WindowResult,
)

log = logging.getLogger(__name__)


def _fmt(value: Decimal) -> str:
    return f"{value:.2f}"


def narrative_for(point: OptimalPoint, asset: str = "VENOM") -> str:
    """Describe the route behind *point* in one human-readable block."""

    b = point.breakdown
    head = f"Profit = {_fmt(point.profit)} USDT\n"
    if point.direction is Direction.FORWARD:
        route = (
            f"{point.venue_id.label} buy for {_fmt(Decimal(point.amount))} USDT => "
            f"{_fmt(b.tokens)} {asset} => "
            f"Dex sell for {_fmt(b.proceeds)} USDT"
        )
    else:
        route = (
            f"Dex buy for {_fmt(Decimal(point.amount))} USDT => "
            f"{_fmt(b.tokens)} {asset} => "
            f"{point.venue_id.label} sell for {_fmt(b.proceeds)} USDT"
        )
    return head + route


def validate_market_data(
    snapshots: Sequence[OrderBookSnapshot | None] | None,
    pool: PoolReserves | None,
    expected_venues: Iterable[VenueId] | None = None,
) -> tuple[list[OrderBookSnapshot], PoolReserves]:
    """Return the usable ``(books, pool)`` pair for one tick.

    An empty ladder is a thin market, not missing data: it reaches the
    walker and simply loses the venue selection. :class:`MissingMarketData`
    is raised when a snapshot or the pool is absent, a reserve is
    non-positive, one of *expected_venues* has no snapshot, or no venue has
    any asks (or any bids) to price a direction against.
    """

    if not snapshots:
        raise MissingMarketData("no venue order books")
    books: list[OrderBookSnapshot] = []
    for snap in snapshots:
        if snap is None:
            raise MissingMarketData("venue order book missing")
        books.append(snap)
    if expected_venues is not None:
        seen = {snap.venue_id for snap in books}
        for venue in expected_venues:
            if venue not in seen:
                raise MissingMarketData(
                    f"{venue.value} order book missing", venue=venue.value
                )
    if not any(snap.asks for snap in books):
        raise MissingMarketData("no venue has asks")
    if not any(snap.bids for snap in books):
        raise MissingMarketData("no venue has bids")
    if pool is None:
        raise MissingMarketData("pool reserves missing")
    if pool.reserve_base <= 0 or pool.reserve_quote <= 0:
        raise MissingMarketData(
            f"pool reserves not positive (base={pool.reserve_base}, "
            f"quote={pool.reserve_quote})"
        )
    return books, pool


def evaluate_window(
    window: ScenarioWindow,
    snapshots: Sequence[OrderBookSnapshot],
    pool: PoolReserves,
    exit_multiplier: Decimal = DEFAULT_EXIT_MULTIPLIER,
    asset: str = "VENOM",
) -> WindowResult:
    """Run both sweeps over *window* and pick the better direction.

    Forward is chosen only when its best profit is strictly greater than the
    reverse one; ties go to reverse.
    """

    forward = sweep_forward(window, snapshots, pool, exit_multiplier).best
    reverse = sweep_reverse(window, snapshots, pool).best

    if forward.profit > reverse.profit:
        chosen = forward
    else:
        chosen = reverse

    return WindowResult(
        window_name=window.name,
        forward_best=forward,
        reverse_best=reverse,
        chosen_direction=chosen.direction,
        profit=chosen.profit,
        narrative=narrative_for(chosen, asset),
        should_alert=chosen.profit >= window.profit_threshold,
        threshold=window.profit_threshold,
    )


def evaluate_tick(
    windows: Iterable[ScenarioWindow],
    snapshots: Sequence[OrderBookSnapshot | None] | None,
    pool: PoolReserves | None,
    exit_multiplier: Decimal = DEFAULT_EXIT_MULTIPLIER,
    *,
    asset: str = "VENOM",
    expected_venues: Iterable[VenueId] | None = None,
) -> TickReport:
    """Evaluate every configured window against one market snapshot.

    Market data is validated up front so a tick either scores every window or
    raises :class:`MissingMarketData` without emitting anything.
    """

    books, pool = validate_market_data(snapshots, pool, expected_venues)
    results = tuple(
        evaluate_window(window, books, pool, exit_multiplier, asset)
        for window in windows
    )
    for r in results:
        log.info(
            "window %s: %s profit=%s alert=%s",
            r.window_name,
            r.chosen_direction.value,
            _fmt(r.profit),
            r.should_alert,
        )
    return TickReport(results=results)


def format_alert(result: WindowResult, asset: str = "VENOM") -> str:
    """Return the main-chat alert text for *result*."""

    return f"{asset} - ALERT\n{result.narrative}"


def format_report(report: TickReport) -> str:
    """Render every window, alerting or not, as the log-chat report."""

    lines = ["=== Simulation report (by scenario) ===", ""]
    for r in report.results:
        fwd, rev = r.forward_best, r.reverse_best
        lines.append(f"Scenario: {r.window_name}")
        lines.append(
            f" - Forward: profit = {_fmt(fwd.profit)} USDT, amount = {fwd.amount}"
            f" ({fwd.venue_id.label})"
        )
        lines.append(
            f" - Reverse: profit = {_fmt(rev.profit)} USDT, amount = {rev.amount}"
            f" ({rev.venue_id.label})"
        )
        chosen = r.chosen.breakdown
        if chosen.residual_unfilled > 0:
            lines.append(
                f" - Depth: {chosen.residual_unfilled:.4f} tokens unfilled on venue"
            )
        if chosen.unspent_budget > 0:
            lines.append(
                f" - Depth: {_fmt(chosen.unspent_budget)} USDT unspent on venue"
            )
        lines.append(
            f" - Best: {r.chosen_direction.value}, threshold = {_fmt(r.threshold)},"
            f" alert = {'yes' if r.should_alert else 'no'}"
        )
        lines.append("")
    return "\n".join(lines)


__all__ = [
    "evaluate_tick",
    "evaluate_window",
    "format_alert",
    "format_report",
    "narrative_for",
    "validate_market_data",
]
