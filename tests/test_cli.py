"""CLI command tests for the pool arbitrage scanner."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from typer.testing import CliRunner

from poolarb import cli
from poolarb.cli.commands import notify as notify_cmd
from poolarb.cli.commands import scan as scan_cmd
from tests.market_fixtures import FakePool, FakeVenue, profitable_forward_books, rich_pool


def _fake_sources(books=None):
    snaps = books if books is not None else profitable_forward_books()

    def build(_settings=None):
        return [FakeVenue(s) for s in snaps], FakePool(rich_pool())

    return build


def test_quote_prints_amount_out() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.app,
        ["quote", "--amount-in", "50", "--reserve-in", "10000", "--reserve-out", "10000"],
    )
    assert result.exit_code == 0
    assert "amount_out=49.3579" in result.output


def test_quote_rejects_bad_reserves() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli.app,
        ["quote", "--amount-in", "50", "--reserve-in", "0", "--reserve-out", "10"],
    )
    assert result.exit_code == 2
    assert "invalid input" in result.output


@pytest.mark.parametrize("flag", ["--amount-in", "--reserve-in", "--fee"])
def test_quote_rejects_unparseable_numbers(flag) -> None:
    args = {"--amount-in": "50", "--reserve-in": "10000", "--reserve-out": "10000"}
    args[flag] = "abc"
    runner = CliRunner()
    result = runner.invoke(cli.app, ["quote", *[t for kv in args.items() for t in kv]])
    assert result.exit_code == 2
    assert "invalid input" in result.output


def test_scan_prints_report(monkeypatch) -> None:
    monkeypatch.setattr(scan_cmd, "build_sources", _fake_sources())
    runner = CliRunner()
    result = runner.invoke(cli.app, ["scan"])
    assert result.exit_code == 0
    assert "=== Simulation report (by scenario) ===" in result.output
    assert "Scenario: 100-500" in result.output
    assert "Scenario: 1501-2000" in result.output


def test_scan_missing_data_exits_nonzero(monkeypatch) -> None:
    monkeypatch.setattr(scan_cmd, "build_sources", _fake_sources(books=[]))
    runner = CliRunner()
    result = runner.invoke(cli.app, ["scan"])
    assert result.exit_code == 1
    assert "market data missing" in result.output


def test_watch_runs_bounded_ticks(monkeypatch) -> None:
    monkeypatch.setattr(scan_cmd, "build_sources", _fake_sources())
    ticks: list[bool] = []

    async def fake_run_tick(venues, pool_source, windows=None, *, notify=True):
        ticks.append(notify)

    monkeypatch.setattr(scan_cmd, "run_tick", fake_run_tick)
    runner = CliRunner()
    result = runner.invoke(
        cli.app,
        ["watch", "--interval", "0", "--max-ticks", "2", "--no-notify", "--no-metrics"],
    )
    assert result.exit_code == 0
    assert ticks == [False, False]


def test_notify_test_sends_to_log_chat(monkeypatch) -> None:
    sent: list[tuple[str, str]] = []
    monkeypatch.setattr(
        notify_cmd,
        "settings",
        SimpleNamespace(
            telegram_token="TOKEN", telegram_chat_id="main", telegram_log_chat_id="logs"
        ),
    )
    monkeypatch.setattr(
        notify_cmd, "notify_telegram", lambda chat, msg: sent.append((chat, msg))
    )
    runner = CliRunner()
    result = runner.invoke(cli.app, ["notify:test", "--message", "ping", "--log-chat"])
    assert result.exit_code == 0
    assert sent == [("logs", "ping")]


def test_bogus_command_shows_usage() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.app, ["bogus"])
    assert result.exit_code != 0
    assert "Usage" in result.output


def test_main_without_args_prints_usage(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.app.main([])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "Usage: poolarb [COMMAND]" in out
    assert "notify:test" in out


def test_main_unknown_command_exits_one(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.app.main(["bogus"])
    assert exc.value.code == 1


def test_main_help_verbose_for_command(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.app.main(["quote", "--help-verbose"])
    assert exc.value.code == 0
    assert "amount_out=49.3579" in capsys.readouterr().out
