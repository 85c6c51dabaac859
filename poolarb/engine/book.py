"""Order-book walking: simulate fills against literal ladder depth."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from poolarb.errors import InvalidInput
from poolarb.models import ZERO, FillResult, Ladder, PriceLevel

ONE = Decimal("1")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise InvalidInput(f"not a number: {value!r}") from exc
    if not d.is_finite():
        raise InvalidInput(f"not a finite number: {value!r}")
    return d


def _check_fee(fee_rate: Decimal) -> None:
    if fee_rate < 0 or fee_rate >= 1:
        raise InvalidInput(f"fee_rate must be in [0, 1), got {fee_rate}")


def ladder_from_levels(levels: Iterable[Any] | None) -> Ladder:
    """Build a :class:`Ladder` from raw exchange depth.

    Accepts the level formats exchange clients commonly return:
    - ``(price, amount)`` tuples or lists (extra fields are ignored)
    - dicts with ``price``/``amount`` keys

    Values go through ``str`` before :class:`~decimal.Decimal` so that float
    inputs keep their printed precision. Rungs that cannot be parsed raise
    :class:`InvalidInput`; callers at the data boundary turn that into a
    missing-data condition.
    """

    if not levels:
        return Ladder()

    out: list[PriceLevel] = []
    for lvl in levels:
        if isinstance(lvl, (list, tuple)) and len(lvl) >= 2:
            price, size = lvl[0], lvl[1]
        elif isinstance(lvl, Mapping):
            price, size = lvl.get("price"), lvl.get("amount", lvl.get("size"))
        else:
            raise InvalidInput(f"unrecognised depth level: {lvl!r}")
        out.append(PriceLevel(_to_decimal(price), _to_decimal(size)))
    return Ladder(tuple(out))


def top(ladder: Ladder) -> Decimal | None:
    """Return the best price of *ladder*, or ``None`` when it is empty."""

    for level in ladder:
        return level.price
    return None


def consume_by_budget(ladder: Ladder, budget: Decimal, fee_rate: Decimal) -> FillResult:
    """Spend *budget* currency against *ladder* (asks), best rung first.

    Args:
        ladder: Ask side, ascending by price.
        budget: Currency to spend; must be positive.
        fee_rate: Taker fee deducted from the tokens received.

    Returns:
        A :class:`FillResult` where ``amount_consumed`` is the currency spent
        and ``amount_produced`` the tokens received net of fees. A level is
        taken whole when its notional fits in the remaining budget, otherwise
        the affordable fraction is bought and the walk ends with nothing left.
        Budget still left once the ladder is exhausted is reported as
        ``unspent_budget``.
    """

    if budget <= 0:
        raise InvalidInput(f"budget must be positive, got {budget}")
    _check_fee(fee_rate)

    if not ladder:
        return FillResult(ZERO, ZERO, residual_unfilled=budget, unspent_budget=budget)

    keep = ONE - fee_rate
    remaining = budget
    tokens = ZERO
    for level in ladder:
        if remaining <= 0:
            break
        cost = level.notional
        if cost <= remaining:
            tokens += level.size * keep
            remaining -= cost
        else:
            tokens += remaining / level.price * keep
            remaining = ZERO
            break

    return FillResult(
        amount_consumed=budget - remaining,
        amount_produced=tokens,
        residual_unfilled=ZERO,
        unspent_budget=remaining,
    )


def consume_by_quantity(
    ladder: Ladder, quantity: Decimal, fee_rate: Decimal
) -> FillResult:
    """Sell *quantity* asset units into *ladder* (bids), best rung first.

    Proceeds are ``sold * price * (1 - fee_rate)`` per rung. When the bids run
    out first, the unsold remainder is returned as ``residual_unfilled``.
    """

    if quantity <= 0:
        raise InvalidInput(f"quantity must be positive, got {quantity}")
    _check_fee(fee_rate)

    keep = ONE - fee_rate
    remaining = quantity
    proceeds = ZERO
    for level in ladder:
        if remaining <= 0:
            break
        if remaining > level.size:
            proceeds += level.size * level.price * keep
            remaining -= level.size
        else:
            proceeds += remaining * level.price * keep
            remaining = ZERO
            break

    return FillResult(
        amount_consumed=quantity - remaining,
        amount_produced=proceeds,
        residual_unfilled=remaining,
    )


__all__ = ["consume_by_budget", "consume_by_quantity", "ladder_from_levels", "top"]
