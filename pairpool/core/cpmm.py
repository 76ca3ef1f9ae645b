"""
Constant Product Market Maker (CPMM) pricing and share math.

This module wraps the integer kernels with the pool's error taxonomy. Rounding
always favors the pool.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per operation
- Space Complexity: O(1) auxiliary
- Invariant: After each swap, x' * y' >= x * y
"""

from __future__ import annotations

from ..kernels.cpmm_swap import SwapExactInResult
from ..kernels.cpmm_swap import swap_exact_in as _kernel_swap_exact_in
from ..kernels.lp_math import BurnLiquidityResult, MintLiquidityResult
from ..kernels.lp_math import burn_liquidity as _kernel_burn_liquidity
from ..kernels.lp_math import mint_liquidity as _kernel_mint_liquidity
from ..state.balances import Amount
from .errors import (
    EmptyReservesError,
    InsufficientLiquidityMintedError,
    InsufficientOutputError,
)
from .invariants import check_constant_product


def quote_swap(reserve_in: Amount, reserve_out: Amount, amount_in: Amount) -> SwapExactInResult:
    """
    Compute the exact-in swap result and re-validate the constant product.

        amount_out = floor(reserve_out * amount_in / (reserve_in + amount_in))
        new_reserve_in = reserve_in + amount_in
        new_reserve_out = reserve_out - amount_out

    Raises:
        InsufficientOutputError: If the computed output is zero
        InvariantViolationError: If new_reserve_in * new_reserve_out < reserve_in * reserve_out
    """
    res = _kernel_swap_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    if res.amount_out == 0:
        raise InsufficientOutputError(
            f"amount_out is zero for amount_in={amount_in} against reserves ({reserve_in}, {reserve_out})"
        )
    check_constant_product(reserve_in, reserve_out, res.new_reserve_in, res.new_reserve_out)
    return res


def compute_lp_mint(
    reserve_a: Amount,
    reserve_b: Amount,
    total_shares: Amount,
    amount_a: Amount,
    amount_b: Amount,
) -> MintLiquidityResult:
    """
    Compute shares to mint and the amounts consumed for a deposit.

    For first deposit (total_shares == 0):
        liquidity = floor(sqrt(amount_a * amount_b)), everything consumed

    For subsequent deposits:
        liquidity = min(floor(amount_a * T / reserve_a), floor(amount_b * T / reserve_b))
        consumed amounts derived from `liquidity`, the excess refunded

    Raises:
        EmptyReservesError: If shares are outstanding but a reserve is zero
        InsufficientLiquidityMintedError: If the deposit would mint zero shares
    """
    if total_shares > 0 and (reserve_a == 0 or reserve_b == 0):
        raise EmptyReservesError(
            f"cannot add liquidity with shares outstanding and reserves ({reserve_a}, {reserve_b})"
        )

    res = _kernel_mint_liquidity(
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_supply=total_shares,
        amount_a_desired=amount_a,
        amount_b_desired=amount_b,
    )
    if res.liquidity <= 0:
        raise InsufficientLiquidityMintedError(
            f"deposit ({amount_a}, {amount_b}) mints zero shares against reserves ({reserve_a}, {reserve_b})"
        )
    return res


def compute_lp_burn(
    liquidity: Amount,
    reserve_a: Amount,
    reserve_b: Amount,
    total_shares: Amount,
) -> BurnLiquidityResult:
    """
    Compute asset amounts returned for burning shares.

        amount_a = floor(liquidity * reserve_a / total_shares)
        amount_b = floor(liquidity * reserve_b / total_shares)
    """
    return _kernel_burn_liquidity(
        liquidity=liquidity,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_supply=total_shares,
    )
