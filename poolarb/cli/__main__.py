"""Module entry point so `python -m poolarb.cli` executes the Typer app."""

from __future__ import annotations

from . import app


def main() -> None:
    """Invoke the CLI application."""

    app.main()


if __name__ == "__main__":  # pragma: no cover - module execution
    main()
