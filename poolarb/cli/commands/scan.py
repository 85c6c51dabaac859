"""One-shot and periodic scan CLI commands."""

from __future__ import annotations

import asyncio

import typer

from poolarb.config import settings
from poolarb.engine.evaluator import format_report
from poolarb.metrics.exporter import start_metrics_server
from poolarb.scheduler import PeriodicRunner, build_sources, run_tick

from ..core import app, log


@app.command("scan")
def scan(
    notify: bool = typer.Option(
        False, "--notify/--no-notify", help="Send alerts and the report to Telegram."
    ),
) -> None:
    """Evaluate every scenario window once and print the report."""

    venues, pool_source = build_sources(settings)
    report = asyncio.run(run_tick(venues, pool_source, notify=notify))
    if report is None:
        typer.echo("market data missing; see log for details")
        raise typer.Exit(code=1)
    typer.echo(format_report(report))


@app.command("watch")
def watch(
    interval: float | None = typer.Option(
        None, "--interval", help="Seconds between ticks."
    ),
    max_ticks: int = typer.Option(
        0, "--max-ticks", help="Stop after this many ticks (0 = unbounded)."
    ),
    notify: bool = typer.Option(True, "--notify/--no-notify"),
    metrics: bool = typer.Option(True, "--metrics/--no-metrics"),
) -> None:
    """Continuously re-evaluate scenarios and send alerts."""

    if metrics:
        try:
            start_metrics_server(settings.prom_port)
        except OSError as exc:
            log.warning("metrics server not started: %s", exc)

    venues, pool_source = build_sources(settings)
    delay = float(interval if interval is not None else settings.poll_interval_secs)

    async def _tick() -> None:
        await run_tick(venues, pool_source, notify=notify)

    runner = PeriodicRunner(_tick, delay, max_ticks or None)
    log.info(
        "watch start venues=%s interval=%.1fs",
        ",".join(v.name() for v in venues),
        delay,
    )
    try:
        asyncio.run(runner.run())
    except KeyboardInterrupt:
        runner.stop()
    log.info("watch stop after %d ticks", runner.ticks)


__all__ = ["scan", "watch"]
