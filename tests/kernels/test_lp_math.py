# [TESTER] v1

from __future__ import annotations

import pytest

from pairpool.kernels.lp_math import burn_liquidity, mint_liquidity, mint_liquidity_initial


def test_mint_liquidity_initial_uses_integer_isqrt() -> None:
    # Pick values where float sqrt would be wrong due to precision loss.
    n = (1 << 70) + 12345
    assert mint_liquidity_initial(amount_a=n, amount_b=n) == n
    assert mint_liquidity_initial(amount_a=100, amount_b=400) == 200
    assert mint_liquidity_initial(amount_a=2, amount_b=3) == 2


def test_mint_liquidity_first_deposit_consumes_everything() -> None:
    res = mint_liquidity(reserve_a=0, reserve_b=0, total_supply=0, amount_a_desired=100, amount_b_desired=400)
    assert res.liquidity == 200
    assert (res.amount_a_used, res.amount_b_used) == (100, 400)
    assert (res.amount_a_refund, res.amount_b_refund) == (0, 0)


def test_mint_liquidity_refunds_excess_of_second_asset() -> None:
    res = mint_liquidity(reserve_a=100, reserve_b=400, total_supply=200, amount_a_desired=10, amount_b_desired=50)
    assert res.liquidity == 20
    assert (res.amount_a_used, res.amount_b_used) == (10, 40)
    assert (res.amount_a_refund, res.amount_b_refund) == (0, 10)


def test_mint_liquidity_used_amounts_round_up() -> None:
    # liquidity = min(5*3//7, 5*3//7) = 2, used = ceil(2*7/3) = 5
    res = mint_liquidity(reserve_a=7, reserve_b=7, total_supply=3, amount_a_desired=5, amount_b_desired=5)
    assert res.liquidity == 2
    assert res.amount_a_used == 5
    assert res.amount_a_used * 3 >= res.liquidity * 7


def test_mint_liquidity_used_never_exceeds_desired() -> None:
    for ra, rb, t, a, b in [(101, 37, 13, 9, 1000), (3, 5, 7, 11, 13), (10**20, 1, 10**10, 10**15, 5)]:
        res = mint_liquidity(reserve_a=ra, reserve_b=rb, total_supply=t, amount_a_desired=a, amount_b_desired=b)
        assert res.amount_a_used <= a
        assert res.amount_b_used <= b
        assert res.amount_a_used + res.amount_a_refund == a
        assert res.amount_b_used + res.amount_b_refund == b


def test_mint_liquidity_reports_zero_liquidity_without_raising() -> None:
    res = mint_liquidity(reserve_a=1000, reserve_b=1000, total_supply=1, amount_a_desired=1, amount_b_desired=1)
    assert res.liquidity == 0
    assert (res.amount_a_used, res.amount_b_used) == (0, 0)


def test_mint_liquidity_rejects_empty_reserve_with_outstanding_supply() -> None:
    with pytest.raises(ValueError, match="empty reserve"):
        mint_liquidity(reserve_a=0, reserve_b=10, total_supply=5, amount_a_desired=1, amount_b_desired=1)


def test_mint_liquidity_rejects_non_positive_amounts() -> None:
    with pytest.raises(ValueError, match="desired amounts must be positive"):
        mint_liquidity(reserve_a=1, reserve_b=1, total_supply=1, amount_a_desired=0, amount_b_desired=1)


def test_burn_liquidity_rounds_down() -> None:
    res = burn_liquidity(liquidity=3, reserve_a=101, reserve_b=100, total_supply=100)
    assert res.amount_a_out == 3
    assert res.amount_b_out == 3


def test_burn_liquidity_full_supply_drains_reserves() -> None:
    res = burn_liquidity(liquidity=200, reserve_a=100, reserve_b=400, total_supply=200)
    assert (res.amount_a_out, res.amount_b_out) == (100, 400)


def test_burn_liquidity_rejects_more_than_supply() -> None:
    with pytest.raises(ValueError, match="cannot burn more than total_supply"):
        burn_liquidity(liquidity=201, reserve_a=100, reserve_b=400, total_supply=200)


def test_burn_liquidity_matches_floor_for_large_values() -> None:
    ra, rb, t = 10**40 + 7, 3 * 10**39 + 1, 10**35 + 3
    res = burn_liquidity(liquidity=12345, reserve_a=ra, reserve_b=rb, total_supply=t)
    assert res.amount_a_out == (12345 * ra) // t
    assert res.amount_b_out == (12345 * rb) // t
