"""DexScreener-backed source of constant-product pool reserves."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from decimal import Decimal, InvalidOperation
from typing import Any

from poolarb.adapters.base import PoolSource
from poolarb.errors import MissingMarketData
from poolarb.metrics.exporter import ERRORS_TOTAL
from poolarb.models import PoolReserves

log = logging.getLogger("poolarb")


class DexScreenerPool(PoolSource):
    """Read ``liquidity.base``/``liquidity.quote`` of one DexScreener pair.

    The reserves DexScreener reports are token amounts, which is exactly what
    the constant-product formula needs; the swap fee is not published and is
    taken from configuration.
    """

    def __init__(
        self,
        chain: str,
        pair_address: str,
        fee_rate: Decimal = Decimal("0.003"),
        base_url: str = "https://api.dexscreener.com/latest/dex/pairs",
        timeout: float = 5.0,
    ) -> None:
        self.chain = chain
        self.pair_address = pair_address
        self.fee_rate = fee_rate
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, s) -> "DexScreenerPool":
        """Construct from :class:`poolarb.config.Settings`."""

        return cls(
            chain=s.pool_chain,
            pair_address=s.pool_pair_address,
            fee_rate=Decimal(str(s.pool_fee_rate)),
            base_url=s.pool_api_url,
            timeout=float(s.http_timeout_secs),
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.chain}/{self.pair_address}"

    def fetch_pair(self) -> dict[str, Any]:
        """Return the decoded JSON document for the configured pair."""

        req = urllib.request.Request(
            self.url,
            headers={
                "Accept": "application/json",
                "User-Agent": "poolarb/1.0",
            },
            method="GET",
        )
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            return json.loads(resp.read().decode("utf-8"))

    def fetch_reserves(self) -> PoolReserves:
        """Return the pool reserves, or raise :class:`MissingMarketData`."""

        try:
            data = self.fetch_pair()
        except (urllib.error.URLError, OSError, ValueError) as e:
            log.error("dexscreener fetch failed: %s", e)
            ERRORS_TOTAL.labels("dex", "pool").inc()
            raise MissingMarketData(f"pool data unavailable: {e}", "dex") from e
        return self.parse_reserves(data)

    def parse_reserves(self, data: Any) -> PoolReserves:
        """Extract reserves from a DexScreener ``pairs`` response."""

        pair = data.get("pair") if isinstance(data, dict) else None
        if not pair and isinstance(data, dict) and data.get("pairs"):
            pair = data["pairs"][0]
        liquidity = pair.get("liquidity") if isinstance(pair, dict) else None
        if not isinstance(liquidity, dict):
            ERRORS_TOTAL.labels("dex", "pool").inc()
            raise MissingMarketData("pool response has no liquidity", "dex")
        try:
            base = Decimal(str(liquidity["base"]))
            quote = Decimal(str(liquidity["quote"]))
        except (KeyError, InvalidOperation) as e:
            ERRORS_TOTAL.labels("dex", "pool").inc()
            raise MissingMarketData(f"pool liquidity malformed: {e}", "dex") from e
        if not (base.is_finite() and quote.is_finite()):
            ERRORS_TOTAL.labels("dex", "pool").inc()
            raise MissingMarketData(
                f"pool reserves not finite (base={base}, quote={quote})", "dex"
            )
        if base <= 0 or quote <= 0:
            ERRORS_TOTAL.labels("dex", "pool").inc()
            raise MissingMarketData(
                f"pool reserves not positive (base={base}, quote={quote})", "dex"
            )
        log.debug("pool reserves base=%s quote=%s", base, quote)
        return PoolReserves(
            reserve_base=base, reserve_quote=quote, fee_rate=self.fee_rate
        )


__all__ = ["DexScreenerPool"]
