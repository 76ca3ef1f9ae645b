"""
Constant-product swap kernel (fee-free).

Pricing:
    amount_out = floor(reserve_out * amount_in / (reserve_in + amount_in))

Floor division rounds in the pool's favor: the trader is never over-paid.
The whole input stays in the pool, so k never decreases.

This kernel is integer-only. It reports a zero
output instead of raising; the caller decides how to treat it.
"""

from __future__ import annotations

from dataclasses import dataclass


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


@dataclass(frozen=True)
class SwapExactInResult:
    amount_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def get_amount_out(*, reserve_in: int, reserve_out: int, amount_in: int) -> int:
    """Output for an exact input against the given reserves (floor rounding)."""
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
    ):
        _require_int(name, v)

    if reserve_in < 0 or reserve_out < 0:
        raise ValueError("reserves must be non-negative")
    if amount_in <= 0:
        raise ValueError("amount_in must be positive")

    return (reserve_out * amount_in) // (reserve_in + amount_in)


def swap_exact_in(*, reserve_in: int, reserve_out: int, amount_in: int) -> SwapExactInResult:
    """
    Exact-in swap quote + hypothetical post-state.

    Raises ValueError on invalid inputs. A zero `amount_out` is returned as-is.
    """
    amount_out = get_amount_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    if amount_out > reserve_out:
        raise ValueError("amount_out exceeds reserve_out")

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out

    return SwapExactInResult(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=reserve_in * reserve_out,
        k_after=new_reserve_in * new_reserve_out,
    )
