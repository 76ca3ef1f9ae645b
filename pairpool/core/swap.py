"""
Swap engine: exact-in trades against the pool's recorded reserves.

Ordering is fixed: validate -> pull -> price -> invariant -> push -> refresh
-> notify. The push never moves ahead of the invariant check.
"""

from __future__ import annotations

import logging

from ..state.balances import Address, Amount, AssetId
from .context import PoolContext
from .cpmm import quote_swap
from .errors import CustodyMismatchError, SlippageError
from .events import SwapEvent
from .invariants import check_constant_product
from .reserves import refresh, reserves_for
from .transfers import pull, push
from .validation import require_amount, require_swap_pair

logger = logging.getLogger(__name__)


def swap(
    ctx: PoolContext,
    caller: Address,
    asset_in: AssetId,
    asset_out: AssetId,
    amount_in: Amount,
    *,
    min_amount_out: Amount = 0,
) -> Amount:
    """
    Trade exactly `amount_in` of `asset_in` for `asset_out`.

    The reserves used for pricing are the recorded pre-pull snapshot. The
    caller must have approved the pool for `amount_in` on `asset_in`.
    Custody of `asset_in` is measured around the pull, so an asset that
    delivers less than declared cannot shrink the product.

    Returns:
        amount_out delivered to the caller

    Raises:
        InvalidAssetError / IdenticalAssetsError: Bad asset selection
        InvalidAmountError / AmountOverflowError: Bad `amount_in` or `min_amount_out`
        InsufficientOutputError: Output rounds to zero
        InvariantViolationError: Post-swap product below pre-swap product, measured
            on the amount the pool actually received
        SlippageError: Output below `min_amount_out`
        CustodyMismatchError: Pool received less than `amount_in` (strict custody)
        TransferFailedError: Pull or push rejected by the asset ledger
    """
    asset_in, asset_out = require_swap_pair(ctx.state, asset_in, asset_out)
    amount_in = require_amount("amount_in", amount_in, ctx.config)
    min_amount_out = require_amount("min_amount_out", min_amount_out, ctx.config, allow_zero=True)

    reserve_in, reserve_out = reserves_for(ctx.state, asset_in, asset_out)
    ledger_in = ctx.ledger_for(asset_in)
    ledger_out = ctx.ledger_for(asset_out)

    balance_before = ledger_in.balance_of(ctx.address)
    pull(ctx, ledger_in, caller, amount_in)
    received = ledger_in.balance_of(ctx.address) - balance_before
    if ctx.config.strict_custody and received != amount_in:
        raise CustodyMismatchError(f"declared amount_in={amount_in} but pool received {received}")

    quote = quote_swap(reserve_in, reserve_out, amount_in)
    # Priced on the declared amount, but k is judged on what actually arrived.
    check_constant_product(reserve_in, reserve_out, reserve_in + received, quote.new_reserve_out)
    if quote.amount_out < min_amount_out:
        raise SlippageError(f"amount_out ({quote.amount_out}) < min_amount_out ({min_amount_out})")

    push(ctx, ledger_out, caller, quote.amount_out)
    refresh(ctx)

    ctx.events.emit(
        SwapEvent(
            caller=caller,
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=quote.amount_out,
        )
    )
    logger.debug(
        "swap caller=%s in=%s:%d out=%s:%d reserves=(%d, %d)",
        caller, asset_in, amount_in, asset_out, quote.amount_out,
        ctx.state.reserve_a, ctx.state.reserve_b,
    )
    return quote.amount_out
