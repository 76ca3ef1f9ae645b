"""Property tests for the pool: fuzz operation sequences with Hypothesis.

Checks product monotonicity across swaps, per-asset conservation across every
operation, and proportional redemption of liquidity shares.
"""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from pairpool.core.config import MAX_UINT256
from pairpool.core.errors import PoolError
from pairpool.core.pool import Pool
from pairpool.state.balances import TokenLedger

A = "0x" + "aa" * 20
B = "0x" + "bb" * 20
HOLDERS = ("alice", "bob", "carol")
FUND = 10**12


def _pool() -> tuple[Pool, TokenLedger, TokenLedger]:
    la, lb = TokenLedger(A, symbol="TKA"), TokenLedger(B, symbol="TKB")
    pool = Pool(la, lb)
    for ledger in (la, lb):
        for holder in HOLDERS:
            ledger.mint(holder, FUND)
            ledger.approve(holder, pool.address, MAX_UINT256)
    return pool, la, lb


def _holdings(pool: Pool, la: TokenLedger, lb: TokenLedger) -> dict:
    return {
        who: (la.balance_of(who), lb.balance_of(who), pool.shares_of(who))
        for who in HOLDERS + (pool.address,)
    }


amounts = st.integers(min_value=1, max_value=10**9)
holders = st.sampled_from(HOLDERS)

add_ops = st.tuples(st.just("add"), holders, amounts, amounts)
# remove: percentage of the holder's current shares
remove_ops = st.tuples(st.just("remove"), holders, st.integers(min_value=1, max_value=100), st.just(0))
swap_ops = st.tuples(st.just("swap"), holders, st.booleans(), amounts)


def _apply(pool: Pool, op: tuple) -> None:
    kind, who, x, y = op
    if kind == "swap":
        asset_in, asset_out = (A, B) if x else (B, A)
        pool.swap(who, asset_in, asset_out, y)
    elif kind == "add":
        pool.add_liquidity(who, x, y)
    else:
        pool.remove_liquidity(who, max(1, pool.shares_of(who) * x // 100))


class TestProductMonotonicity:
    @given(
        seed=st.tuples(amounts, amounts),
        swaps=st.lists(st.tuples(st.booleans(), amounts), min_size=1, max_size=25),
    )
    @settings(max_examples=200, deadline=5000)
    def test_swaps_never_decrease_product(self, seed, swaps):
        pool, _, _ = _pool()
        pool.add_liquidity("alice", *seed)

        for a_to_b, amount in swaps:
            ra, rb = pool.get_reserves()
            asset_in, asset_out = (A, B) if a_to_b else (B, A)
            try:
                pool.swap("bob", asset_in, asset_out, amount)
            except PoolError:
                assert pool.get_reserves() == (ra, rb)
                continue
            na, nb = pool.get_reserves()
            assert na * nb >= ra * rb


class TestConservation:
    @given(ops=st.lists(st.one_of(swap_ops, add_ops, remove_ops), min_size=1, max_size=30))
    @settings(max_examples=200, deadline=5000)
    def test_only_caller_and_pool_move(self, ops):
        pool, la, lb = _pool()
        pool.add_liquidity("alice", 10**6, 10**6)

        for op in ops:
            who = op[1]
            before = _holdings(pool, la, lb)
            try:
                _apply(pool, op)
            except PoolError:
                assert _holdings(pool, la, lb) == before
                continue
            after = _holdings(pool, la, lb)

            for other in HOLDERS:
                if other != who:
                    assert after[other] == before[other]
            for i in (0, 1):
                moved = (after[who][i] - before[who][i]) + (after[pool.address][i] - before[pool.address][i])
                assert moved == 0
            assert la.total_supply() == sum(la.get_all_balances().values())
            assert lb.total_supply() == sum(lb.get_all_balances().values())
            assert pool.invariant_violations() == []


class TestShareProportionality:
    @given(ops=st.lists(st.one_of(add_ops, remove_ops), min_size=1, max_size=20))
    @settings(max_examples=200, deadline=5000)
    def test_withdrawals_pay_floor_proportional_amounts(self, ops):
        pool, la, lb = _pool()
        for op in ops:
            try:
                _apply(pool, op)
            except PoolError:
                pass

        for who in HOLDERS:
            held = pool.shares_of(who)
            if held == 0:
                continue
            total = pool.total_shares()
            custody_a, custody_b = la.balance_of(pool.address), lb.balance_of(pool.address)
            wallet_a, wallet_b = la.balance_of(who), lb.balance_of(who)

            pool.remove_liquidity(who, held)

            assert la.balance_of(who) - wallet_a == held * custody_a // total
            assert lb.balance_of(who) - wallet_b == held * custody_b // total
            assert pool.shares_of(who) == 0

        assert pool.total_shares() == 0
        assert pool.get_reserves() == (la.balance_of(pool.address), lb.balance_of(pool.address))
