"""Invariant checkers for the pool.

`check_constant_product()` is the swap-time admission test: it compares the
pre-swap product with the hypothetical post-swap product.

The registry below holds per-pool post-state invariants. Each function returns
True when the invariant holds, and `check_all()` returns the list of violated
invariant IDs (empty = all pass).
"""

from __future__ import annotations

from typing import Callable

from .context import PoolContext
from .errors import InvariantViolationError
from .reserves import custody


def constant_product_holds(
    reserve_in_before: int,
    reserve_out_before: int,
    reserve_in_after: int,
    reserve_out_after: int,
) -> bool:
    if reserve_in_after < 0 or reserve_out_after < 0:
        return False
    return reserve_in_after * reserve_out_after >= reserve_in_before * reserve_out_before


def check_constant_product(
    reserve_in_before: int,
    reserve_out_before: int,
    reserve_in_after: int,
    reserve_out_after: int,
) -> None:
    if not constant_product_holds(reserve_in_before, reserve_out_before, reserve_in_after, reserve_out_after):
        raise InvariantViolationError(["inv_constant_product"])


def inv_distinct_assets(ctx: PoolContext) -> bool:
    return ctx.state.asset_a != ctx.state.asset_b


def inv_canonical_order(ctx: PoolContext) -> bool:
    return ctx.state.asset_a < ctx.state.asset_b


def inv_reserves_non_negative(ctx: PoolContext) -> bool:
    return ctx.state.reserve_a >= 0 and ctx.state.reserve_b >= 0


def inv_reserves_match_custody(ctx: PoolContext) -> bool:
    return (ctx.state.reserve_a, ctx.state.reserve_b) == custody(ctx)


def inv_share_sum_matches_supply(ctx: PoolContext) -> bool:
    return ctx.shares.verify_supply()


def inv_shares_imply_reserves(ctx: PoolContext) -> bool:
    if ctx.shares.total_supply() == 0:
        return True
    return ctx.state.reserve_a > 0 and ctx.state.reserve_b > 0


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[PoolContext], bool]] = {
    "inv_distinct_assets": inv_distinct_assets,
    "inv_canonical_order": inv_canonical_order,
    "inv_reserves_non_negative": inv_reserves_non_negative,
    "inv_reserves_match_custody": inv_reserves_match_custody,
    "inv_share_sum_matches_supply": inv_share_sum_matches_supply,
    "inv_shares_imply_reserves": inv_shares_imply_reserves,
}


def check_all(ctx: PoolContext) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(ctx)
    ]
