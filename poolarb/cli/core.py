"""Core Typer application and logging bootstrap for the poolarb CLI package."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import typer

from poolarb.config import settings

from .help_text import VERBOSE_COMMAND_HELP, VERBOSE_GLOBAL_OVERVIEW


class CLIApp(typer.Typer):
    """Custom Typer application that prints usage on bad invocation."""

    # ------------------------------------------------------------------
    def _unique_commands(self) -> dict[str, dict[str, Any]]:
        """Return mapping of canonical command names to command/aliases."""

        mapping: dict[str, dict[str, Any]] = {}
        for cmd in self.registered_commands:
            name = cmd.name or cmd.callback.__name__
            canonical = name.replace("_", ":")
            info = mapping.setdefault(canonical, {"command": cmd, "aliases": []})
            info["aliases"].append(name)
        return mapping

    def _command_names(self) -> set[str]:
        names: set[str] = set()
        for info in self._unique_commands().values():
            names.update(info["aliases"])
        return names

    def main(self, args: list[str] | None = None):  # type: ignore[override]
        """Run the CLI with *args*, handling help flags and bad input."""

        if args is None:
            args = sys.argv[1:]

        if args and "--help-verbose" in args:
            idx = args.index("--help-verbose")
            if idx == 0:
                self._print_verbose_help()
            else:
                target = args[0]
                canonical = None
                for cname, info in self._unique_commands().items():
                    if target == cname or target in info["aliases"]:
                        canonical = cname
                        break
                self._print_verbose_help(canonical or target)
            raise SystemExit(0)

        if args and args[0] == "--help":
            self._print_basic_help()
            raise SystemExit(0)

        if not args or args[0] not in self._command_names():
            typer.echo("Usage: poolarb [COMMAND]")
            typer.echo("Commands:")
            for cname in sorted(self._unique_commands()):
                typer.echo(f"  {cname}")
            raise SystemExit(0 if not args else 1)
        return typer.main.get_command(self)(args=args)

    # ------------------------------------------------------------------
    def _print_basic_help(self) -> None:
        """Print a short summary of available commands."""

        typer.echo("Usage: poolarb [--help | --help-verbose] COMMAND [ARGS]")
        typer.echo("\nAvailable commands:")
        for cname, info in sorted(self._unique_commands().items()):
            doc = info["command"].callback.__doc__ or ""
            desc = (doc.strip().splitlines() or [""])[0]
            aliases = [a for a in info["aliases"] if a != cname]
            alias_str = f" (aliases: {', '.join(sorted(aliases))})" if aliases else ""
            typer.echo(f"  {cname:<12} {desc}{alias_str}")
        typer.echo(
            f"\nMarket: {settings.asset}/{settings.quote} on "
            f"{', '.join(settings.venues)} vs pool {settings.pool_chain}."
        )

    # ------------------------------------------------------------------
    def _print_verbose_help(self, command: str | None = None) -> None:
        """Print detailed command reference with optional command filtering."""

        typer.echo(VERBOSE_GLOBAL_OVERVIEW.strip())
        typer.echo()

        if command:
            text = VERBOSE_COMMAND_HELP.get(command)
            if text:
                typer.echo(text.rstrip())
            else:
                typer.echo(f"No verbose help available for '{command}'.")
            return

        for cname in sorted(self._unique_commands()):
            text = VERBOSE_COMMAND_HELP.get(cname)
            if text:
                typer.echo(text.rstrip())
                typer.echo()


app = CLIApp()
log = logging.getLogger("poolarb")

# Configure logging once with console + optional rotating file handler
if not getattr(log, "_configured", False):
    log.setLevel(getattr(logging, str(settings.log_level).upper(), logging.INFO))
    log.propagate = False
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    ch = logging.StreamHandler()
    ch.setLevel(log.level)
    ch.setFormatter(formatter)
    log.addHandler(ch)
    log_path = getattr(settings, "log_file", None)
    if log_path:
        try:
            log_dir = os.path.dirname(log_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            fh = RotatingFileHandler(
                log_path,
                maxBytes=int(settings.log_max_bytes),
                backupCount=int(settings.log_backup_count),
            )
        except OSError as exc:
            log.warning("file logging disabled (%s): %s", log_path, exc)
        else:
            fh.setLevel(log.level)
            fh.setFormatter(formatter)
            log.addHandler(fh)
    setattr(log, "_configured", True)

__all__ = ["CLIApp", "app", "log"]
