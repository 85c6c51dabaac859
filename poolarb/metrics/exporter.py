"""Prometheus metrics collectors and helpers.

This module exposes counters and gauges for tracking evaluation ticks, alerts
and best profits, as well as a helper for starting the metrics HTTP server.
"""

from prometheus_client import Counter, Gauge, Histogram, start_http_server

# Metric collectors
TICKS_TOTAL = Counter("ticks_total", "Evaluation ticks processed", ["result"])
ERRORS_TOTAL = Counter("errors_total", "Total errors encountered", ["venue", "stage"])
ALERTS_TOTAL = Counter("alerts_total", "Alerts sent to the main chat", ["window"])
BEST_PROFIT = Gauge(
    "best_profit_usdt",
    "Best simulated profit of the latest tick in USDT",
    ["window", "direction"],
)
TICK_LATENCY = Histogram(
    "tick_latency_seconds",
    "Fetch plus evaluation latency per tick in seconds",
)


def start_metrics_server(port: int) -> None:
    """Start the Prometheus metrics server on the provided ``port``.

    Parameters
    ----------
    port:
        TCP port to bind the HTTP server to.
    """

    # Be tolerant of env-sourced strings like "9110".
    start_http_server(int(port))
