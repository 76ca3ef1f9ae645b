"""
Liquidity math kernel.

Pure functions with explicit rounding rules for minting and burning pool
shares. Consumed deposit amounts are derived from the same liquidity value
that gets minted, so recorded reserves and outstanding shares never drift out
of proportion.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _ceil_div_nonneg(numerator: int, denominator: int) -> int:
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    if numerator < 0:
        raise ValueError("numerator must be non-negative")
    return (numerator + denominator - 1) // denominator


@dataclass(frozen=True)
class MintLiquidityResult:
    liquidity: int
    amount_a_used: int
    amount_b_used: int
    amount_a_refund: int
    amount_b_refund: int


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount_a_out: int
    amount_b_out: int


def mint_liquidity_initial(*, amount_a: int, amount_b: int) -> int:
    """
    First deposit: liquidity = floor(sqrt(amount_a * amount_b)).

    Uses integer isqrt; float sqrt loses precision on large products.
    """
    _require_int("amount_a", amount_a)
    _require_int("amount_b", amount_b)
    if amount_a <= 0 or amount_b <= 0:
        raise ValueError("initial amounts must be positive")
    return math.isqrt(amount_a * amount_b)


def mint_liquidity(
    *,
    reserve_a: int,
    reserve_b: int,
    total_supply: int,
    amount_a_desired: int,
    amount_b_desired: int,
) -> MintLiquidityResult:
    """
    Shares to mint for a deposit, with the amounts actually consumed.

    For an empty supply everything is consumed. Otherwise:
        liquidity = min(floor(a * T / rA), floor(b * T / rB))
        a_used    = ceil(liquidity * rA / T)
        b_used    = ceil(liquidity * rB / T)
    Ceil keeps the value backing each new share at or above the existing
    share value. `a_used <= a` always holds because liquidity <= a * T / rA.

    A zero `liquidity` is returned as-is; the caller decides how to treat it.
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_supply", total_supply),
        ("amount_a_desired", amount_a_desired),
        ("amount_b_desired", amount_b_desired),
    ):
        _require_int(name, v)

    if reserve_a < 0 or reserve_b < 0:
        raise ValueError("reserves must be non-negative")
    if total_supply < 0:
        raise ValueError("total_supply must be non-negative")
    if amount_a_desired <= 0 or amount_b_desired <= 0:
        raise ValueError("desired amounts must be positive")

    if total_supply == 0:
        return MintLiquidityResult(
            liquidity=mint_liquidity_initial(amount_a=amount_a_desired, amount_b=amount_b_desired),
            amount_a_used=amount_a_desired,
            amount_b_used=amount_b_desired,
            amount_a_refund=0,
            amount_b_refund=0,
        )

    if reserve_a == 0 or reserve_b == 0:
        raise ValueError("cannot mint against an empty reserve when total_supply > 0")

    liquidity_a = (amount_a_desired * total_supply) // reserve_a
    liquidity_b = (amount_b_desired * total_supply) // reserve_b
    liquidity = min(liquidity_a, liquidity_b)

    amount_a_used = _ceil_div_nonneg(liquidity * reserve_a, total_supply)
    amount_b_used = _ceil_div_nonneg(liquidity * reserve_b, total_supply)
    if amount_a_used > amount_a_desired or amount_b_used > amount_b_desired:
        raise AssertionError("used amounts exceed desired amounts")

    return MintLiquidityResult(
        liquidity=liquidity,
        amount_a_used=amount_a_used,
        amount_b_used=amount_b_used,
        amount_a_refund=amount_a_desired - amount_a_used,
        amount_b_refund=amount_b_desired - amount_b_used,
    )


def burn_liquidity(*, liquidity: int, reserve_a: int, reserve_b: int, total_supply: int) -> BurnLiquidityResult:
    """
    Assets returned for burning shares (floor rounding).

    The rounding residual stays in the pool and accrues to remaining holders.
    """
    for name, v in (
        ("liquidity", liquidity),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_supply", total_supply),
    ):
        _require_int(name, v)

    if liquidity <= 0:
        raise ValueError("liquidity must be positive")
    if reserve_a < 0 or reserve_b < 0:
        raise ValueError("reserves must be non-negative")
    if total_supply <= 0:
        raise ValueError("total_supply must be positive")
    if liquidity > total_supply:
        raise ValueError("cannot burn more than total_supply")

    return BurnLiquidityResult(
        amount_a_out=(liquidity * reserve_a) // total_supply,
        amount_b_out=(liquidity * reserve_b) // total_supply,
    )
