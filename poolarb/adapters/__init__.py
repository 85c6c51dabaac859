"""Market data source interfaces and implementations."""

from .base import PoolSource, VenueAdapter
from .ccxt_adapter import CCXTAdapter
from .dexscreener import DexScreenerPool

__all__ = ["VenueAdapter", "PoolSource", "CCXTAdapter", "DexScreenerPool"]
