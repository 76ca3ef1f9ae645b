"""
Reserve ledger: the pool's recorded holdings and their refresh from custody.

`refresh()` is the last step of every mutating operation. It overwrites both
reserves with the pool's actual external balances, so a direct transfer into
the pool is absorbed instead of leaving the record out of sync.
"""

from __future__ import annotations

from typing import Tuple

from ..state.balances import Amount, AssetId
from ..state.pools import PoolState
from .context import PoolContext


def get_reserves(state: PoolState) -> Tuple[Amount, Amount]:
    return state.reserve_a, state.reserve_b


def reserves_for(state: PoolState, asset_in: AssetId, asset_out: AssetId) -> Tuple[Amount, Amount]:
    """(reserve_in, reserve_out) for a swap direction; assets must already be validated."""
    return state.get_reserve(asset_in), state.get_reserve(asset_out)


def custody(ctx: PoolContext) -> Tuple[Amount, Amount]:
    """The pool's actual external balances of (asset_a, asset_b)."""
    return ctx.ledger_a.balance_of(ctx.address), ctx.ledger_b.balance_of(ctx.address)


def refresh(ctx: PoolContext) -> Tuple[Amount, Amount]:
    ctx.state.reserve_a, ctx.state.reserve_b = custody(ctx)
    return ctx.state.reserve_a, ctx.state.reserve_b
