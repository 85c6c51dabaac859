"""Configuration management.

This module loads environment variables from a local ``.env`` file if one is
present so that tokens such as the Telegram bot key are available without
manual exports. Values in the real environment take precedence over those in
the file.
"""

from __future__ import annotations

import json
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated, Any, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .models import ScenarioWindow, VenueId

VenuesFieldType = Annotated[List[str], NoDecode]


def _load_env_file(path: str = ".env") -> None:
    """Populate :mod:`os.environ` with key/value pairs from *path*.

    Lines starting with ``#`` or lacking an ``=`` separator are ignored.
    Existing keys are not overwritten. Values wrapped in single or double
    quotes are unquoted to match typical ``.env`` file behavior.
    """

    try:
        for line in Path(path).read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            value = value.strip()
            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            os.environ.setdefault(key.strip(), value)
    except FileNotFoundError:
        pass


_load_env_file()


def _coerce_fee_value(value: Any, *, assume_bps: bool) -> Decimal | None:
    """Return a decimal fee rate parsed from *value*.

    Parameters
    ----------
    value:
        Raw value provided by the environment or settings initialiser.
    assume_bps:
        When ``True`` the number is interpreted as basis points and scaled by
        ``1/10_000``. When ``False`` it is a decimal rate (``0.001`` is 10 bps).

    Returns
    -------
    Decimal | None
        Parsed fee rate clamped at zero, or ``None`` if parsing fails.
    """

    if value is None:
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if assume_bps:
        number /= Decimal(10_000)
    return max(number, Decimal("0"))


def _normalize_venue_fees(data: Any) -> dict[str, Decimal]:
    """Return a ``{venue: taker_rate}`` mapping derived from *data*.

    Accepts a mapping or JSON string. Each value is either a plain decimal
    rate or a mapping with ``taker_bps`` or ``taker``. Venue keys are
    lower-cased; unparseable entries are dropped.
    """

    if data is None:
        return {}
    if isinstance(data, str):
        raw = data.strip()
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            return {}
    if not isinstance(data, dict):
        return {}

    fees: dict[str, Decimal] = {}
    for venue_key, entry in data.items():
        venue = str(venue_key).strip().lower()
        if not venue:
            continue
        if isinstance(entry, dict):
            rate = _coerce_fee_value(entry.get("taker_bps"), assume_bps=True)
            if rate is None:
                rate = _coerce_fee_value(entry.get("taker"), assume_bps=False)
        else:
            rate = _coerce_fee_value(entry, assume_bps=False)
        if rate is not None:
            fees[venue] = rate
    return fees


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    env: str = "dev"
    log_level: str = "INFO"
    # Optional log file path; when set, logs also write to this file.
    log_file: str | None = "data/poolarb.log"
    log_max_bytes: int = 1_000_000
    log_backup_count: int = 3

    # Market being quoted
    asset: str = "VENOM"
    quote: str = "USDT"
    venues: VenuesFieldType = ["gateio", "bybit"]
    book_depth: int = 50
    # Taker fee per venue (decimal rate, or {"taker_bps": n})
    venue_fees: dict[str, Any] = {
        "gateio": Decimal("0.0001"),
        "bybit": Decimal("0.0018"),
    }
    http_timeout_secs: float = 5.0

    # Liquidity pool (DexScreener pair)
    pool_api_url: str = "https://api.dexscreener.com/latest/dex/pairs"
    pool_chain: str = "venom"
    pool_pair_address: str = (
        "0:56a3f53b5d07da8266c38eb7b4fe1b0e3f3dac6b88ef23a1634d4b9bd4eb2bbe"
    )
    pool_fee_rate: Decimal = Decimal("0.003")
    # Pool-exit friction applied to forward-leg pool proceeds
    exit_multiplier: Decimal = Decimal("0.99")

    # Amount windows, each with its own alert threshold (USDT)
    scenarios: list[dict[str, Any]] = [
        {"name": "100-500", "min": 100, "max": 500, "profit_threshold": 4},
        {"name": "501-1000", "min": 501, "max": 1000, "profit_threshold": 7},
        {"name": "1001-1500", "min": 1001, "max": 1500, "profit_threshold": 10},
        {"name": "1501-2000", "min": 1501, "max": 2000, "profit_threshold": 20},
    ]

    poll_interval_secs: float = 15.0

    # Telegram alerting
    telegram_token: str | None = None
    telegram_chat_id: str | None = None
    telegram_log_chat_id: str | None = None
    telegram_max_message_len: int = 4000

    prom_port: int = 9110

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", extra="ignore")

    @staticmethod
    def _normalise_venues_value(value: Any) -> list[str]:
        """Return a cleaned, lower-cased list of venue ids derived from *value*."""

        if value is None:
            return []

        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return []
            try:
                parsed = json.loads(raw)
            except ValueError:
                items = [item.strip() for item in raw.split(",") if item.strip()]
            else:
                if isinstance(parsed, str):
                    items = [part.strip() for part in parsed.split(",") if part.strip()]
                elif isinstance(parsed, (list, tuple)):
                    items = list(parsed)
                elif parsed is None:
                    items = []
                else:
                    items = [parsed]
        elif isinstance(value, (list, tuple)):
            items = list(value)
        else:
            items = [value]

        cleaned: list[str] = []
        for entry in items:
            if entry is None:
                continue
            s = str(entry).strip().strip("\"'").lower()
            if s:
                cleaned.append(s)
        return cleaned

    @field_validator("venues", mode="before")
    @classmethod
    def _validate_venues(cls, value: Any) -> list[str]:
        return cls._normalise_venues_value(value)

    @field_validator("venue_fees", mode="before")
    @classmethod
    def _validate_venue_fees(cls, value: Any) -> dict[str, Decimal]:
        return _normalize_venue_fees(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> str:
        return str(value or "INFO").strip().upper()


# Singleton settings instance populated on import.
settings = Settings()


def venue_ids(_settings: Settings | None = None) -> list[VenueId]:
    """Return configured venues as :class:`VenueId` tags, in configured order."""

    s = _settings or settings
    return [VenueId(v) for v in s.venues]


def venue_fee_rate(venue: VenueId, _settings: Settings | None = None) -> Decimal:
    """Return the taker fee for *venue* from the configured lookup table."""

    s = _settings or settings
    fees = _normalize_venue_fees(s.venue_fees)
    try:
        return fees[venue.value]
    except KeyError:
        raise KeyError(f"no fee configured for venue {venue.value!r}") from None


def scenario_windows(_settings: Settings | None = None) -> list[ScenarioWindow]:
    """Build validated :class:`ScenarioWindow` objects from configuration."""

    s = _settings or settings
    windows: list[ScenarioWindow] = []
    for raw in s.scenarios:
        min_amount = int(raw.get("min", raw.get("min_amount")))
        max_amount = int(raw.get("max", raw.get("max_amount")))
        windows.append(
            ScenarioWindow(
                name=str(raw.get("name") or f"{min_amount}-{max_amount}"),
                min_amount=min_amount,
                max_amount=max_amount,
                profit_threshold=Decimal(str(raw.get("profit_threshold", 0))),
            )
        )
    return windows


__all__ = ["Settings", "settings", "scenario_windows", "venue_fee_rate", "venue_ids"]
