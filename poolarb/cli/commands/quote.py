"""Offline pricing CLI commands."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import typer

from poolarb.config import settings
from poolarb.engine.amm import swap_out
from poolarb.errors import InvalidInput

from ..core import app


@app.command("quote")
def quote(
    amount_in: str = typer.Option(..., "--amount-in"),
    reserve_in: str = typer.Option(..., "--reserve-in"),
    reserve_out: str = typer.Option(..., "--reserve-out"),
    fee: str | None = typer.Option(None, "--fee", help="Pool fee rate."),
) -> None:
    """Quote a constant-product swap from explicit reserves."""

    try:
        fee_rate = Decimal(fee if fee is not None else str(settings.pool_fee_rate))
        out = swap_out(
            Decimal(amount_in), Decimal(reserve_in), Decimal(reserve_out), fee_rate
        )
    except (InvalidInput, InvalidOperation) as exc:
        typer.echo(f"invalid input: {exc}")
        raise typer.Exit(code=2)
    typer.echo(f"amount_out={out:.4f}")


__all__ = ["quote"]
