"""Abstract interfaces for market data sources."""

from abc import ABC, abstractmethod

from poolarb.models import OrderBookSnapshot, PoolReserves, VenueId


class VenueAdapter(ABC):
    """Interface that every order-book venue source must implement."""

    @abstractmethod
    def name(self) -> str:
        """Return the venue identifier used by this adapter."""

    @property
    @abstractmethod
    def venue_id(self) -> VenueId:
        """Tag carried on every snapshot this adapter produces."""

    @abstractmethod
    def fetch_snapshot(self, symbol: str, depth: int = 50) -> OrderBookSnapshot:
        """Fetch both ladders for *symbol* up to *depth* levels."""


class PoolSource(ABC):
    """Interface for sources of constant-product pool state."""

    @abstractmethod
    def fetch_reserves(self) -> PoolReserves:
        """Return current pool reserves and swap fee."""
