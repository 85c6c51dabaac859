"""poolarb CLI package that exposes the Typer application and commands."""

from __future__ import annotations

from .core import CLIApp, app, log

# Import command modules for side-effect registration
from . import commands
from .commands.notify import notify_test
from .commands.quote import quote
from .commands.scan import scan, watch

__all__ = ["CLIApp", "app", "commands", "log", "notify_test", "quote", "scan", "watch"]
