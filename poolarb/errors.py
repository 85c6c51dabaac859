"""Error conditions raised by the quotation engine and its collaborators."""

from __future__ import annotations


class InvalidInput(ValueError):
    """A pure pricing function received a non-positive or malformed argument."""


class MissingMarketData(RuntimeError):
    """A required order book or pool snapshot is absent or structurally invalid.

    Raised before any scenario is scored so that a tick never emits partial
    results. ``reason`` is a short human-readable string suitable for logs and
    the log chat.
    """

    def __init__(self, reason: str, venue: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.venue = venue


__all__ = ["InvalidInput", "MissingMarketData"]
