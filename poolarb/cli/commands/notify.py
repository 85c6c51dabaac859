"""Notification utility CLI commands."""

from __future__ import annotations

from poolarb.config import settings
from poolarb.notify import notify_telegram

from ..core import app, log


@app.command("notify:test")
@app.command("notify_test")
def notify_test(
    message: str = "[notify] test message from poolarb", log_chat: bool = False
) -> None:
    """Send a test message to the configured Telegram chat."""

    chat_id = settings.telegram_log_chat_id if log_chat else settings.telegram_chat_id
    if not settings.telegram_token or not chat_id:
        log.error(
            "notify:test no bot configured (set TELEGRAM_TOKEN and TELEGRAM_CHAT_ID)"
        )
        return
    notify_telegram(chat_id, message)


__all__ = ["notify_test"]
