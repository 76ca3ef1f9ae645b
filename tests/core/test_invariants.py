"""Tests for pairpool/core/invariants.py: post-state registry and constant-product check."""

import pytest

from pairpool.core.config import PoolConfig
from pairpool.core.context import PoolContext
from pairpool.core.errors import InvariantViolationError
from pairpool.core.events import EventLog
from pairpool.core.invariants import (
    INVARIANT_REGISTRY,
    check_all,
    check_constant_product,
    constant_product_holds,
)
from pairpool.state.balances import TokenLedger
from pairpool.state.lp import ShareLedger
from pairpool.state.pools import PoolState, compute_pool_id

A = "0x" + "aa" * 20
B = "0x" + "bb" * 20


def make_ctx(reserve_a=0, reserve_b=0, custody_a=None, custody_b=None, shares=None):
    state = PoolState(pool_id=compute_pool_id(A, B), address="pool", asset_a=A, asset_b=B,
                      reserve_a=reserve_a, reserve_b=reserve_b)
    la, lb = TokenLedger(A), TokenLedger(B)
    la.mint("pool", reserve_a if custody_a is None else custody_a)
    lb.mint("pool", reserve_b if custody_b is None else custody_b)
    ledger = ShareLedger()
    for holder, amount in (shares or {}).items():
        ledger.mint(holder, amount)
    return PoolContext(state=state, ledger_a=la, ledger_b=lb, shares=ledger,
                       config=PoolConfig(), events=EventLog())


class TestRegistry:
    def test_empty_pool_passes_all(self):
        assert check_all(make_ctx()) == []

    def test_registry_has_6_invariants(self):
        assert len(INVARIANT_REGISTRY) == 6

    def test_funded_pool_passes_all(self):
        assert check_all(make_ctx(100, 400, shares={"alice": 200})) == []


class TestReservesMatchCustody:
    def test_fail_on_unsynced_donation(self):
        ctx = make_ctx(100, 400, custody_a=101, shares={"alice": 200})
        assert check_all(ctx) == ["inv_reserves_match_custody"]


class TestSharesImplyReserves:
    def test_fail_when_shares_outstanding_against_empty_reserve(self):
        ctx = make_ctx(0, 400, shares={"alice": 1})
        assert "inv_shares_imply_reserves" in check_all(ctx)

    def test_pass_with_no_shares(self):
        ctx = make_ctx(0, 400)
        assert "inv_shares_imply_reserves" not in check_all(ctx)


class TestShareSum:
    def test_fail_on_corrupt_supply(self):
        ctx = make_ctx(10, 10, shares={"alice": 10})
        ctx.shares._total_supply = 11
        assert "inv_share_sum_matches_supply" in check_all(ctx)


class TestPairShape:
    def test_fail_on_reordered_assets(self):
        ctx = make_ctx()
        ctx.state.asset_a, ctx.state.asset_b = B, A
        violations = check_all(ctx)
        assert "inv_canonical_order" in violations
        assert "inv_distinct_assets" not in violations

    def test_fail_on_negative_reserve(self):
        ctx = make_ctx()
        ctx.state.reserve_b = -1
        assert "inv_reserves_non_negative" in check_all(ctx)


class TestConstantProduct:
    def test_holds_when_product_grows(self):
        assert constant_product_holds(1000, 1000, 1100, 910)
        check_constant_product(1000, 1000, 1100, 910)

    def test_equal_product_holds(self):
        assert constant_product_holds(2, 8, 4, 4)

    def test_violation_raises(self):
        with pytest.raises(InvariantViolationError) as ei:
            check_constant_product(1000, 1000, 1100, 900)
        assert ei.value.violations == ["inv_constant_product"]
        assert ei.value.code == "INVARIANT_VIOLATION"

    def test_negative_post_state_fails(self):
        assert not constant_product_holds(0, 0, 1, -1)
