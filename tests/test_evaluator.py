"""Tests for scenario evaluation and report rendering."""

from decimal import Decimal

import pytest

from poolarb.engine import evaluator
from poolarb.engine.evaluator import (
    evaluate_tick,
    evaluate_window,
    format_alert,
    format_report,
)
from poolarb.errors import MissingMarketData
from poolarb.models import (
    Breakdown,
    Direction,
    OptimalPoint,
    PoolReserves,
    ScenarioWindow,
    SweepResult,
    VenueId,
)
from tests.market_fixtures import (
    D,
    flat_books,
    flat_pool,
    profitable_forward_books,
    rich_pool,
    snapshot,
)


def test_below_threshold_window_does_not_alert() -> None:
    window = ScenarioWindow("10-12", 10, 12, D(4))
    report = evaluate_tick([window], flat_books(), flat_pool(), D("0.99"))

    (result,) = report.results
    assert result.should_alert is False
    assert result.profit < 0
    assert report.alerts == ()
    assert "Scenario: 10-12" in format_report(report)


def test_profitable_forward_window_alerts() -> None:
    window = ScenarioWindow("100-102", 100, 102, D(1))
    result = evaluate_window(window, profitable_forward_books(), rich_pool(), D("0.99"))

    assert result.chosen_direction is Direction.FORWARD
    assert result.should_alert is True
    assert result.profit == result.forward_best.profit
    assert result.forward_best.amount == 102
    assert "Gate buy for 102.00 USDT" in result.narrative
    assert "Dex sell for" in result.narrative
    assert format_alert(result).startswith("VENOM - ALERT\n")


def test_threshold_is_inclusive() -> None:
    window = ScenarioWindow("w", 100, 100, D(1))
    probe = evaluate_window(window, profitable_forward_books(), rich_pool(), D("0.99"))
    exact = ScenarioWindow("w", 100, 100, probe.profit)
    result = evaluate_window(exact, profitable_forward_books(), rich_pool(), D("0.99"))
    assert result.should_alert is True


def _fixed(direction: Direction, profit: str) -> SweepResult:
    point = OptimalPoint(
        amount=100,
        direction=direction,
        venue_id=VenueId.BYBIT,
        profit=D(profit),
        breakdown=Breakdown(spent=D(100), tokens=D(50), proceeds=D(100) + D(profit)),
    )
    return SweepResult(curve=(point,), best=point)


def test_equal_profits_choose_reverse(monkeypatch) -> None:
    monkeypatch.setattr(
        evaluator, "sweep_forward", lambda *a, **k: _fixed(Direction.FORWARD, "3")
    )
    monkeypatch.setattr(
        evaluator, "sweep_reverse", lambda *a, **k: _fixed(Direction.REVERSE, "3")
    )
    result = evaluate_window(
        ScenarioWindow("w", 100, 100, D(5)), flat_books(), flat_pool()
    )
    assert result.chosen_direction is Direction.REVERSE
    assert result.narrative.startswith("Profit = 3.00 USDT\nDex buy for 100.00 USDT")
    assert "Bybit sell for 103.00 USDT" in result.narrative


def test_missing_snapshot_aborts_tick() -> None:
    books = [flat_books()[0], None]
    with pytest.raises(MissingMarketData):
        evaluate_tick([ScenarioWindow("w", 1, 2, D(1))], books, flat_pool())


def test_missing_pool_aborts_tick() -> None:
    with pytest.raises(MissingMarketData, match="pool reserves missing"):
        evaluate_tick([ScenarioWindow("w", 1, 2, D(1))], flat_books(), None)


def test_non_positive_pool_aborts_tick() -> None:
    pool = PoolReserves(reserve_base=Decimal("0"), reserve_quote=D(10))
    with pytest.raises(MissingMarketData):
        evaluate_tick([ScenarioWindow("w", 1, 2, D(1))], flat_books(), pool)


def test_empty_book_side_loses_venue_selection() -> None:
    books = [
        snapshot(VenueId.GATE, asks=[(1, 1000)], bids=[]),
        snapshot(VenueId.BYBIT, asks=[(2, 1000)], bids=[(1.9, 1000)]),
    ]
    report = evaluate_tick([ScenarioWindow("w", 100, 102, D(1))], books, rich_pool())

    (result,) = report.results
    assert result.forward_best.venue_id is VenueId.GATE
    assert result.reverse_best.venue_id is VenueId.BYBIT
    assert result.reverse_best.breakdown.residual_unfilled == 0


def test_no_bids_on_any_venue_aborts_tick() -> None:
    books = [
        snapshot(VenueId.GATE, asks=[(1, 1000)], bids=[]),
        snapshot(VenueId.BYBIT, asks=[(2, 1000)], bids=[]),
    ]
    with pytest.raises(MissingMarketData, match="no venue has bids"):
        evaluate_tick([ScenarioWindow("w", 1, 2, D(1))], books, flat_pool())


def test_expected_venue_absent_aborts_tick() -> None:
    books = [flat_books()[0]]
    with pytest.raises(MissingMarketData, match="bybit"):
        evaluate_tick(
            [ScenarioWindow("w", 1, 2, D(1))],
            books,
            flat_pool(),
            expected_venues=[VenueId.GATE, VenueId.BYBIT],
        )


def test_report_lists_every_window() -> None:
    windows = [ScenarioWindow("a", 10, 11, D(100)), ScenarioWindow("b", 20, 21, D(100))]
    report = evaluate_tick(windows, flat_books(), flat_pool())
    text = format_report(report)

    assert text.startswith("=== Simulation report (by scenario) ===")
    assert "Scenario: a" in text and "Scenario: b" in text
    assert text.count(" - Forward: profit = ") == 2
    assert text.count(" - Reverse: profit = ") == 2
    assert "alert = no" in text
    assert report.best is not None


def test_validate_market_data_returns_books_and_pool() -> None:
    books = flat_books()
    pool = flat_pool()
    checked_books, checked_pool = evaluator.validate_market_data(books, pool)
    assert checked_books == books
    assert checked_pool is pool
    with pytest.raises(MissingMarketData, match="pool reserves missing"):
        evaluator.validate_market_data(books, None)
