"""Notification helpers for external services.

Sends plain-text messages through the Telegram Bot API: alerts go to the main
chat and the full scenario report goes to a separate log chat. The helpers are
intentionally lightweight so that the scheduler and CLI can share them.
"""

from __future__ import annotations

import json
import logging
import urllib.request
from typing import Optional

from .config import settings
from .metrics.exporter import ERRORS_TOTAL

log = logging.getLogger("poolarb")

TELEGRAM_API = "https://api.telegram.org"


def split_message(message: str, max_length: int = 4000) -> list[str]:
    """Split *message* into chunks of at most *max_length* characters."""

    if max_length <= 0:
        raise ValueError("max_length must be positive")
    return [message[i : i + max_length] for i in range(0, len(message), max_length)]


def notify_telegram(
    chat_id: Optional[str],
    message: str,
    token: Optional[str] = None,
    *,
    severity: str | None = None,
) -> bool:
    """Send *message* to a Telegram chat.

    Parameters
    ----------
    chat_id:
        Target chat. When missing the call only logs locally.
    message:
        Text content to send.
    token:
        Optional bot token override. Defaults to ``settings.telegram_token``.
    severity:
        Optional hint for console logging level: one of ``"info"``,
        ``"warning"``, or ``"error"``. Defaults to ``"info"``.

    Returns
    -------
    bool
        ``True`` when Telegram accepted the message.

    Notes
    -----
    Network and configuration errors are logged and swallowed so that
    notification failures never interrupt an evaluation tick. When an error
    occurs, the ``errors_total`` metric is incremented with stage
    ``telegram_send``.
    """

    # Always mirror to console for local visibility
    sev = (severity or "info").lower()
    if sev == "error":
        log.error("[telegram] %s", message)
    elif sev in ("warn", "warning"):
        log.warning("[telegram] %s", message)
    else:
        log.info("[telegram] %s", message)

    bot_token = token or getattr(settings, "telegram_token", None)
    if not bot_token or not chat_id:
        log.debug("notify_telegram: token or chat not configured; skipping send")
        return False

    payload = json.dumps({"chat_id": chat_id, "text": message}).encode("utf-8")
    req = urllib.request.Request(
        f"{TELEGRAM_API}/bot{bot_token}/sendMessage",
        data=payload,
        headers={
            "Content-Type": "application/json",
            "User-Agent": "poolarb/1.0",
        },
        method="POST",
    )
    try:
        with urllib.request.urlopen(req, timeout=5):
            log.debug("notify_telegram: sent message (%d chars)", len(message or ""))
            return True
    except Exception as e:
        detail = None
        try:  # include response body when available (e.g., HTTPError)
            detail = getattr(e, "read", lambda: b"")()  # type: ignore[attr-defined]
            if detail:
                detail = detail.decode("utf-8", errors="ignore")
        except Exception:
            detail = None
        if hasattr(e, "code"):
            code = getattr(e, "code")
            if int(code) in (401, 403):
                log.error(
                    "notify_telegram: %s. Check bot token and chat access. (%s)",
                    code,
                    detail or e,
                )
            else:
                log.error("notify_telegram: HTTP %s error: %s", code, detail or e)
        else:
            log.error("notify_telegram: send failed: %s", e)
        ERRORS_TOTAL.labels("telegram", "telegram_send").inc()
        return False


def send_main_message(message: str) -> bool:
    """Send an alert to the main chat."""

    return notify_telegram(getattr(settings, "telegram_chat_id", None), message)


def send_log(message: str) -> bool:
    """Send *message* to the log chat, split into Telegram-sized chunks."""

    chat_id = getattr(settings, "telegram_log_chat_id", None)
    max_len = int(getattr(settings, "telegram_max_message_len", 4000) or 4000)
    ok = True
    for chunk in split_message(message, max_len):
        ok = notify_telegram(chat_id, chunk) and ok
    return ok


__all__ = ["notify_telegram", "send_log", "send_main_message", "split_message"]
