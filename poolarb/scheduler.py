"""Evaluation loop: fetch one snapshot set per tick, score it, send alerts."""

from __future__ import annotations

import asyncio
import logging
import time
from decimal import Decimal
from typing import Any, Awaitable, Callable, Sequence

from poolarb.adapters.base import PoolSource, VenueAdapter
from poolarb.config import scenario_windows, settings, venue_ids
from poolarb.engine.evaluator import evaluate_tick, format_alert, format_report
from poolarb.errors import MissingMarketData
from poolarb.metrics.exporter import (
    ALERTS_TOTAL,
    BEST_PROFIT,
    ERRORS_TOTAL,
    TICK_LATENCY,
    TICKS_TOTAL,
)
from poolarb.models import OrderBookSnapshot, PoolReserves, ScenarioWindow, TickReport
from poolarb.notify import send_log, send_main_message

log = logging.getLogger("poolarb")


def build_sources(_settings=settings) -> tuple[list[VenueAdapter], PoolSource]:
    """Construct the configured venue adapters and the pool source."""

    from poolarb.adapters.ccxt_adapter import CCXTAdapter
    from poolarb.adapters.dexscreener import DexScreenerPool

    venues: list[VenueAdapter] = [CCXTAdapter(v) for v in venue_ids(_settings)]
    return venues, DexScreenerPool.from_settings(_settings)


async def fetch_market_data(
    venues: Sequence[VenueAdapter],
    pool_source: PoolSource,
    symbol: str,
    depth: int = 50,
) -> tuple[list[OrderBookSnapshot], PoolReserves]:
    """Fetch every venue book and the pool reserves concurrently.

    Each blocking client call runs in a worker thread. The first failure
    propagates, so callers get either a complete snapshot set or an error.
    """

    book_tasks = [asyncio.to_thread(v.fetch_snapshot, symbol, depth) for v in venues]
    *books, pool = await asyncio.gather(
        *book_tasks, asyncio.to_thread(pool_source.fetch_reserves)
    )
    return list(books), pool


def _record_metrics(report: TickReport) -> None:
    for r in report.results:
        BEST_PROFIT.labels(r.window_name, "forward").set(float(r.forward_best.profit))
        BEST_PROFIT.labels(r.window_name, "reverse").set(float(r.reverse_best.profit))
        if r.should_alert:
            ALERTS_TOTAL.labels(r.window_name).inc()


def _deliver(report: TickReport, asset: str) -> None:
    for result in report.alerts:
        send_main_message(format_alert(result, asset))
    send_log(format_report(report))


async def run_tick(
    venues: Sequence[VenueAdapter],
    pool_source: PoolSource,
    windows: Sequence[ScenarioWindow] | None = None,
    *,
    notify: bool = True,
    _settings=settings,
) -> TickReport | None:
    """Run one evaluation tick end to end.

    Returns the :class:`TickReport`, or ``None`` when market data was missing.
    A missing-data tick is logged, counted and reported to the log chat; it
    never produces partial scenario results.
    """

    started = time.perf_counter()
    symbol = f"{_settings.asset}/{_settings.quote}"
    if windows is None:
        windows = scenario_windows(_settings)
    try:
        books, pool = await fetch_market_data(
            venues, pool_source, symbol, int(_settings.book_depth)
        )
        report = await asyncio.to_thread(
            evaluate_tick,
            windows,
            books,
            pool,
            Decimal(str(_settings.exit_multiplier)),
            asset=_settings.asset,
            expected_venues=[v.venue_id for v in venues],
        )
    except MissingMarketData as e:
        log.error("tick aborted: %s", e.reason)
        ERRORS_TOTAL.labels(e.venue or "unknown", "market_data").inc()
        TICKS_TOTAL.labels("missing_data").inc()
        if notify:
            await asyncio.to_thread(send_log, f"Market data error: {e.reason}")
        return None

    _record_metrics(report)
    if notify:
        await asyncio.to_thread(_deliver, report, _settings.asset)
    TICK_LATENCY.observe(time.perf_counter() - started)
    TICKS_TOTAL.labels("ok").inc()
    log.info(
        "tick done windows=%d alerts=%d", len(report.results), len(report.alerts)
    )
    return report


class PeriodicRunner:
    """Repeat an async *tick* with a fixed delay until stopped.

    The delay starts after each tick completes. ``stop()`` wakes the runner
    out of its sleep immediately; cancelling the task running :meth:`run`
    also ends the loop. Exceptions from a tick are logged and the next tick
    proceeds as normal.
    """

    def __init__(
        self,
        tick: Callable[[], Awaitable[Any]],
        interval: float,
        max_ticks: int | None = None,
    ) -> None:
        self.tick = tick
        self.interval = float(interval)
        self.max_ticks = max_ticks
        self.ticks = 0
        self._stop = asyncio.Event()

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    async def run(self) -> int:
        """Run until stopped, cancelled, or ``max_ticks`` is reached."""

        while not self._stop.is_set():
            try:
                await self.tick()
            except Exception as e:
                log.exception("tick failed: %s", e)
                TICKS_TOTAL.labels("error").inc()
            self.ticks += 1
            if self.max_ticks is not None and self.ticks >= self.max_ticks:
                break
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        return self.ticks


__all__ = ["PeriodicRunner", "build_sources", "fetch_market_data", "run_tick"]
