"""Verbose help content for the poolarb CLI package."""

from __future__ import annotations

from textwrap import dedent

VERBOSE_GLOBAL_OVERVIEW = dedent(
    """\
    Command reference

    Use ``--help`` for a compact summary of commands.
    Use ``--help-verbose`` either globally for the full catalog or after a command
    to drill into that command's flags, typical output, and operational tips.

    Venues: gateio and bybit order books (via CCXT); pool reserves from DexScreener.
    """
)


VERBOSE_COMMAND_HELP: dict[str, str] = {
    "scan": dedent(
        """\
        scan
          Purpose:
            Fetch one snapshot of both order books and the pool, sweep every
            configured scenario window in both directions and print the report.
          Key flags:
            --notify/--no-notify   Also send alerts and the report to Telegram (default: no).
          Usage tips:
            - Windows and thresholds come from SCENARIOS (JSON list of
              {"name", "min", "max", "profit_threshold"}).
            - Exit code 1 means market data was missing; nothing was scored.
          Sample output:
            Scenario: 100-500
             - Forward: profit = -3.12 USDT, amount = 100 (Gate)
             - Reverse: profit = 1.45 USDT, amount = 212 (Bybit)
        """
    ),
    "watch": dedent(
        """\
        watch
          Purpose:
            Re-run the scan on a fixed delay, sending alerts for windows whose best
            profit reaches the threshold and the full report to the log chat.
          Key flags:
            --interval FLOAT          Seconds between ticks (default: POLL_INTERVAL_SECS).
            --max-ticks INTEGER       Stop after N ticks (0 runs until interrupted).
            --notify/--no-notify      Send Telegram messages (default: yes).
            --metrics/--no-metrics    Serve Prometheus metrics on PROM_PORT.
          Usage tips:
            - A tick with missing market data is reported and skipped; the next
              tick runs normally.
        """
    ),
    "quote": dedent(
        """\
        quote
          Purpose:
            Offline constant-product quote: how much comes out of the pool for a
            given input and reserve pair.
          Key flags:
            --amount-in, --reserve-in, --reserve-out, --fee (default: POOL_FEE_RATE)
          Sample output:
            amount_out=49.3579
        """
    ),
    "notify:test": dedent(
        """\
        notify:test
          Purpose:
            Send a test message to the configured Telegram chat.
          Key flags:
            --message TEXT   Text to send.
            --log-chat       Target TELEGRAM_LOG_CHAT_ID instead of TELEGRAM_CHAT_ID.
        """
    ),
}
