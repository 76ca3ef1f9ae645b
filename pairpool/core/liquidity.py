"""
Liquidity engine: deposits (share minting) and withdrawals (share burning).
"""

from __future__ import annotations

import logging
from typing import Tuple

from ..state.balances import Address, Amount
from .context import PoolContext
from .cpmm import compute_lp_burn, compute_lp_mint
from .errors import InsufficientSharesError, SlippageError
from .events import DepositEvent, WithdrawalEvent
from .reserves import refresh
from .transfers import pull, push
from .validation import require_amount

logger = logging.getLogger(__name__)


def add_liquidity(
    ctx: PoolContext,
    caller: Address,
    amount_a_in: Amount,
    amount_b_in: Amount,
    *,
    amount_a_min: Amount = 0,
    amount_b_min: Amount = 0,
) -> Tuple[Amount, Amount, Amount]:
    """
    Deposit up to (amount_a_in, amount_b_in) and mint shares to the caller.

    Both declared amounts are pulled first. On the first deposit everything is
    consumed and liquidity = floor(sqrt(a * b)); afterwards the consumed amounts
    follow the current reserve ratio and the excess is refunded before minting.

    Returns:
        Tuple of (amount_a_used, amount_b_used, liquidity)

    Raises:
        InvalidAmountError / AmountOverflowError: Bad inputs (before any transfer)
        EmptyReservesError: Shares outstanding against an empty reserve
        InsufficientLiquidityMintedError: Deposit too small to mint a share
        SlippageError: A consumed amount is below its minimum
        TransferFailedError: Pull or refund rejected by an asset ledger
    """
    amount_a_in = require_amount("amount_a_in", amount_a_in, ctx.config)
    amount_b_in = require_amount("amount_b_in", amount_b_in, ctx.config)
    amount_a_min = require_amount("amount_a_min", amount_a_min, ctx.config, allow_zero=True)
    amount_b_min = require_amount("amount_b_min", amount_b_min, ctx.config, allow_zero=True)

    pull(ctx, ctx.ledger_a, caller, amount_a_in)
    pull(ctx, ctx.ledger_b, caller, amount_b_in)

    mint = compute_lp_mint(
        ctx.state.reserve_a,
        ctx.state.reserve_b,
        ctx.shares.total_supply(),
        amount_a_in,
        amount_b_in,
    )
    if mint.amount_a_used < amount_a_min:
        raise SlippageError(f"amount_a_used ({mint.amount_a_used}) < amount_a_min ({amount_a_min})")
    if mint.amount_b_used < amount_b_min:
        raise SlippageError(f"amount_b_used ({mint.amount_b_used}) < amount_b_min ({amount_b_min})")

    if mint.amount_a_refund > 0:
        push(ctx, ctx.ledger_a, caller, mint.amount_a_refund)
    if mint.amount_b_refund > 0:
        push(ctx, ctx.ledger_b, caller, mint.amount_b_refund)

    ctx.shares.mint(caller, mint.liquidity)
    refresh(ctx)

    ctx.events.emit(
        DepositEvent(
            caller=caller,
            amount_a=mint.amount_a_used,
            amount_b=mint.amount_b_used,
            liquidity=mint.liquidity,
        )
    )
    logger.debug(
        "add_liquidity caller=%s used=(%d, %d) refund=(%d, %d) minted=%d",
        caller, mint.amount_a_used, mint.amount_b_used,
        mint.amount_a_refund, mint.amount_b_refund, mint.liquidity,
    )
    return mint.amount_a_used, mint.amount_b_used, mint.liquidity


def remove_liquidity(
    ctx: PoolContext,
    caller: Address,
    liquidity: Amount,
    *,
    amount_a_min: Amount = 0,
    amount_b_min: Amount = 0,
) -> Tuple[Amount, Amount]:
    """
    Burn `liquidity` of the caller's shares for a proportional cut of reserves.

    Outputs use floor rounding; the residual stays in the pool for the
    remaining holders.

    Returns:
        Tuple of (amount_a_out, amount_b_out)

    Raises:
        InvalidAmountError / AmountOverflowError: Bad `liquidity`
        InsufficientSharesError: Caller holds fewer than `liquidity` shares
        SlippageError: An output is below its minimum
        TransferFailedError: Push rejected by an asset ledger
    """
    liquidity = require_amount("liquidity", liquidity, ctx.config)
    amount_a_min = require_amount("amount_a_min", amount_a_min, ctx.config, allow_zero=True)
    amount_b_min = require_amount("amount_b_min", amount_b_min, ctx.config, allow_zero=True)

    held = ctx.shares.balance_of(caller)
    if held < liquidity:
        raise InsufficientSharesError(f"caller holds {held} shares, cannot burn {liquidity}")

    ctx.shares.transfer(caller, ctx.address, liquidity)
    burn = compute_lp_burn(
        liquidity,
        ctx.state.reserve_a,
        ctx.state.reserve_b,
        ctx.shares.total_supply(),
    )
    if burn.amount_a_out < amount_a_min:
        raise SlippageError(f"amount_a_out ({burn.amount_a_out}) < amount_a_min ({amount_a_min})")
    if burn.amount_b_out < amount_b_min:
        raise SlippageError(f"amount_b_out ({burn.amount_b_out}) < amount_b_min ({amount_b_min})")

    ctx.shares.burn(ctx.address, liquidity)
    push(ctx, ctx.ledger_a, caller, burn.amount_a_out)
    push(ctx, ctx.ledger_b, caller, burn.amount_b_out)
    refresh(ctx)

    ctx.events.emit(
        WithdrawalEvent(
            caller=caller,
            amount_a=burn.amount_a_out,
            amount_b=burn.amount_b_out,
            liquidity=liquidity,
        )
    )
    logger.debug(
        "remove_liquidity caller=%s burned=%d out=(%d, %d)",
        caller, liquidity, burn.amount_a_out, burn.amount_b_out,
    )
    return burn.amount_a_out, burn.amount_b_out
