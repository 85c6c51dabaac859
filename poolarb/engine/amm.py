"""Constant-product AMM pricing."""

from decimal import Decimal

from poolarb.errors import InvalidInput


def swap_out(
    amount_in: Decimal, reserve_in: Decimal, reserve_out: Decimal, fee_rate: Decimal
) -> Decimal:
    """Return the output of swapping *amount_in* through a ``x * y = k`` pool.

    Args:
        amount_in: Units of the input token; zero yields zero.
        reserve_in: Pool reserve of the input token.
        reserve_out: Pool reserve of the output token.
        fee_rate: Pool swap fee taken from the input (e.g. ``0.003``).

    Returns:
        ``amount_in * (1 - fee) * reserve_out / (reserve_in + amount_in * (1 - fee))``.
    """

    if reserve_in <= 0 or reserve_out <= 0:
        raise InvalidInput(
            f"reserves must be positive, got in={reserve_in} out={reserve_out}"
        )
    if amount_in < 0:
        raise InvalidInput(f"amount_in must be non-negative, got {amount_in}")
    if fee_rate < 0 or fee_rate >= 1:
        raise InvalidInput(f"fee_rate must be in [0, 1), got {fee_rate}")

    effective_in = amount_in * (Decimal("1") - fee_rate)
    return effective_in * reserve_out / (reserve_in + effective_in)
