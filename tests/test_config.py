"""Configuration model tests."""

from __future__ import annotations

import importlib
import os
import sys
from decimal import Decimal

import pytest

from poolarb.config import Settings, scenario_windows, venue_fee_rate, venue_ids
from poolarb.models import VenueId


def test_defaults() -> None:
    s = Settings()
    assert s.venues == ["gateio", "bybit"]
    assert s.exit_multiplier == Decimal("0.99")
    assert venue_fee_rate(VenueId.GATE, s) == Decimal("0.0001")
    assert venue_fee_rate(VenueId.BYBIT, s) == Decimal("0.0018")


def test_venues_json(monkeypatch) -> None:
    monkeypatch.setenv("VENUES", '["bybit", "gateio"]')
    assert Settings().venues == ["bybit", "gateio"]


def test_venues_csv(monkeypatch) -> None:
    monkeypatch.setenv("VENUES", "GateIO, bybit")
    s = Settings()
    assert s.venues == ["gateio", "bybit"]
    assert venue_ids(s) == [VenueId.GATE, VenueId.BYBIT]


def test_venue_fees_parse_from_env(monkeypatch) -> None:
    """Fee JSON accepts plain rates and basis points."""

    monkeypatch.setenv("VENUE_FEES", '{"GateIO": {"taker_bps": 10}, "bybit": 0.002}')
    s = Settings()
    assert venue_fee_rate(VenueId.GATE, s) == Decimal("0.001")
    assert venue_fee_rate(VenueId.BYBIT, s) == Decimal("0.002")


def test_missing_venue_fee_raises(monkeypatch) -> None:
    monkeypatch.setenv("VENUE_FEES", '{"gateio": 0.001}')
    with pytest.raises(KeyError):
        venue_fee_rate(VenueId.BYBIT, Settings())


def test_default_scenarios() -> None:
    windows = scenario_windows(Settings())
    assert [w.name for w in windows] == ["100-500", "501-1000", "1001-1500", "1501-2000"]
    assert [w.profit_threshold for w in windows] == [
        Decimal("4"),
        Decimal("7"),
        Decimal("10"),
        Decimal("20"),
    ]
    assert windows[-1].max_amount == 2000


def test_scenarios_from_env(monkeypatch) -> None:
    monkeypatch.setenv(
        "SCENARIOS", '[{"min": 10, "max": 20, "profit_threshold": "0.5"}]'
    )
    (window,) = scenario_windows(Settings())
    assert window.name == "10-20"
    assert window.profit_threshold == Decimal("0.5")


def test_load_env_file_strips_quotes(monkeypatch, tmp_path) -> None:
    env_path = tmp_path / ".env"
    env_path.write_text('POOLARB_TEST_FOO="bar"\n# comment\nnot a pair\n')
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("POOLARB_TEST_FOO", raising=False)
    saved = sys.modules.get("poolarb.config")
    sys.modules.pop("poolarb.config", None)
    try:
        importlib.import_module("poolarb.config")
        assert os.environ["POOLARB_TEST_FOO"] == "bar"
    finally:
        if saved is not None:
            sys.modules["poolarb.config"] = saved
            setattr(sys.modules["poolarb"], "config", saved)
        monkeypatch.delenv("POOLARB_TEST_FOO", raising=False)
