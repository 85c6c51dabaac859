"""Ccxt-based adapter implementing the :class:`VenueAdapter` interface.

Order books are fetched over the public REST API, so no credentials are
needed. Raw depth is converted into immutable :class:`Ladder` objects here;
anything malformed is rejected as :class:`MissingMarketData` before it can
reach the quotation engine.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

import ccxt

from poolarb.adapters.base import VenueAdapter
from poolarb.config import settings, venue_fee_rate
from poolarb.engine.book import ladder_from_levels
from poolarb.errors import InvalidInput, MissingMarketData
from poolarb.metrics.exporter import ERRORS_TOTAL
from poolarb.models import OrderBookSnapshot, VenueId

log = logging.getLogger("poolarb")


class CCXTAdapter(VenueAdapter):
    """Order-book source backed by the ``ccxt`` library."""

    def __init__(
        self,
        venue: VenueId | str,
        fee_rate: Decimal | None = None,
        client: Any | None = None,
    ):
        """Initialise the underlying ccxt client for *venue*.

        Parameters
        ----------
        venue:
            :class:`VenueId` or its ccxt exchange id (``"gateio"``, ``"bybit"``).
        fee_rate:
            Taker fee attached to snapshots. Defaults to the configured
            per-venue fee table.
        client:
            Pre-built ccxt exchange instance, mainly for tests.
        """
        if not isinstance(venue, VenueId):
            # Normalize exchange id from env/user input (strip quotes/whitespace)
            venue = VenueId((venue or "").strip().strip("'\"").lower())
        self._venue = venue
        self.fee_rate = fee_rate if fee_rate is not None else venue_fee_rate(venue)
        if client is None:
            cls = getattr(ccxt, venue.value)
            client = cls(
                {
                    "enableRateLimit": True,
                    "timeout": int(float(settings.http_timeout_secs) * 1000),
                }
            )
        self.ex = client

    def name(self) -> str:
        """Return the exchange identifier."""
        return self._venue.value

    @property
    def venue_id(self) -> VenueId:
        return self._venue

    def fetch_orderbook(self, symbol: str, depth: int = 50) -> Dict[str, Any]:
        """Return the raw ccxt order book for *symbol* limited to *depth* levels."""
        return self.ex.fetch_order_book(symbol, depth)

    def fetch_snapshot(self, symbol: str, depth: int = 50) -> OrderBookSnapshot:
        """Return an immutable snapshot of *symbol*'s asks and bids.

        Network and exchange errors, as well as unparseable depth, are logged,
        counted under ``errors_total{stage="orderbook"}`` and re-raised as
        :class:`MissingMarketData`.
        """

        venue = self.name()
        try:
            ob = self.fetch_orderbook(symbol, depth)
        except ccxt.BaseError as e:
            log.error("%s fetch_order_book %s failed: %s", venue, symbol, e)
            ERRORS_TOTAL.labels(venue, "orderbook").inc()
            raise MissingMarketData(
                f"{venue} order book unavailable: {e}", venue
            ) from e

        if not isinstance(ob, dict):
            ERRORS_TOTAL.labels(venue, "orderbook").inc()
            raise MissingMarketData(f"{venue} returned no order book", venue)
        try:
            asks = ladder_from_levels(ob.get("asks"))
            bids = ladder_from_levels(ob.get("bids"))
        except InvalidInput as e:
            log.error("%s malformed order book %s: %s", venue, symbol, e)
            ERRORS_TOTAL.labels(venue, "orderbook").inc()
            raise MissingMarketData(f"{venue} malformed order book: {e}", venue) from e

        ts = ob.get("timestamp")
        fetched_at = (
            datetime.fromtimestamp(ts / 1000.0, tz=timezone.utc)
            if isinstance(ts, (int, float))
            else datetime.now(timezone.utc)
        )
        log.debug(
            "%s %s snapshot asks=%d bids=%d", venue, symbol, len(asks), len(bids)
        )
        return OrderBookSnapshot(
            venue_id=self._venue,
            pair_id=symbol,
            asks=asks,
            bids=bids,
            fee_rate=self.fee_rate,
            fetched_at=fetched_at,
        )

    def close(self) -> None:
        """Close underlying exchange resources."""
        if hasattr(self.ex, "close"):
            try:
                self.ex.close()
            except Exception as e:  # pragma: no cover - best effort on shutdown
                log.debug("%s close failed: %s", self.name(), e)


__all__ = ["CCXTAdapter"]
