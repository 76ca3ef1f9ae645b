"""Tests for the in-memory asset ledger and the share ledger."""

from __future__ import annotations

import pytest

from pairpool.state.balances import (
    AssetLedger,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    LedgerError,
    Revertible,
    TokenLedger,
)
from pairpool.state.lp import ShareLedger

TKA = "0x" + "11" * 20


class TestTokenLedger:
    def test_satisfies_protocols(self) -> None:
        ledger = TokenLedger(TKA, symbol="TKA")
        assert isinstance(ledger, AssetLedger)
        assert isinstance(ledger, Revertible)

    def test_mint_and_transfer(self) -> None:
        ledger = TokenLedger(TKA)
        ledger.mint("alice", 100)
        assert ledger.transfer("alice", "bob", 40) is True
        assert ledger.balance_of("alice") == 60
        assert ledger.balance_of("bob") == 40
        assert ledger.total_supply() == 100

    def test_transfer_rejects_overdraft(self) -> None:
        ledger = TokenLedger(TKA, symbol="TKA")
        ledger.mint("alice", 5)
        with pytest.raises(InsufficientBalanceError, match="Insufficient TKA balance"):
            ledger.transfer("alice", "bob", 6)
        assert ledger.balance_of("alice") == 5

    def test_transfer_from_consumes_allowance(self) -> None:
        ledger = TokenLedger(TKA)
        ledger.mint("alice", 100)
        ledger.approve("alice", "pool", 30)
        ledger.transfer_from("pool", "alice", "pool", 20)
        assert ledger.allowance("alice", "pool") == 10
        assert ledger.balance_of("pool") == 20

    def test_transfer_from_requires_allowance(self) -> None:
        ledger = TokenLedger(TKA)
        ledger.mint("alice", 100)
        with pytest.raises(InsufficientAllowanceError):
            ledger.transfer_from("pool", "alice", "pool", 1)

    def test_ledger_errors_are_value_errors(self) -> None:
        assert issubclass(LedgerError, ValueError)
        assert issubclass(InsufficientBalanceError, LedgerError)

    def test_zero_balances_are_dropped(self) -> None:
        ledger = TokenLedger(TKA)
        ledger.mint("alice", 10)
        ledger.transfer("alice", "bob", 10)
        assert ledger.get_all_balances() == {"bob": 10}

    def test_revert_transfer_undoes_one_movement_only(self) -> None:
        ledger = TokenLedger(TKA)
        ledger.mint("alice", 10)
        ledger.mint("carol", 10)
        ledger.transfer("alice", "pool", 4)
        ledger.transfer("carol", "pool", 6)
        ledger.revert_transfer("alice", "pool", 4)
        assert ledger.get_all_balances() == {"alice": 10, "carol": 4, "pool": 6}
        assert ledger.total_supply() == 20

    def test_revert_transfer_restores_consumed_allowance(self) -> None:
        ledger = TokenLedger(TKA)
        ledger.mint("alice", 10)
        ledger.approve("alice", "pool", 5)
        ledger.transfer_from("pool", "alice", "pool", 5)
        assert ledger.allowance("alice", "pool") == 0
        ledger.revert_transfer("alice", "pool", 5, spender="pool")
        assert ledger.allowance("alice", "pool") == 5
        assert ledger.balance_of("alice") == 10

    def test_revert_transfer_skips_hook(self) -> None:
        seen = []
        ledger = TokenLedger(TKA)
        ledger.mint("alice", 10)
        ledger.transfer("alice", "bob", 3)
        ledger.on_transfer = lambda lg, s, t, a: seen.append((s, t, a))
        ledger.revert_transfer("alice", "bob", 3)
        assert seen == []

    def test_raising_hook_undoes_its_movement(self) -> None:
        def refuse(lg, s, t, a) -> None:
            raise RuntimeError("hook refused")

        ledger = TokenLedger(TKA, on_transfer=refuse)
        ledger.mint("alice", 10)
        ledger.approve("alice", "pool", 10)
        with pytest.raises(RuntimeError, match="hook refused"):
            ledger.transfer_from("pool", "alice", "pool", 7)
        assert ledger.get_all_balances() == {"alice": 10}
        assert ledger.allowance("alice", "pool") == 10

    def test_on_transfer_hook_sees_each_movement(self) -> None:
        seen = []
        ledger = TokenLedger(TKA, on_transfer=lambda lg, s, t, a: seen.append((s, t, a)))
        ledger.mint("alice", 10)
        ledger.approve("alice", "pool", 10)
        ledger.transfer("alice", "bob", 1)
        ledger.transfer_from("pool", "alice", "pool", 2)
        assert seen == [("alice", "bob", 1), ("alice", "pool", 2)]


class TestShareLedger:
    def test_mint_burn_keep_supply_in_sync(self) -> None:
        shares = ShareLedger()
        shares.mint("alice", 100)
        shares.mint("bob", 50)
        shares.burn("alice", 30)
        assert shares.total_supply() == 120
        assert shares.verify_supply()

    def test_burn_more_than_held_raises(self) -> None:
        shares = ShareLedger()
        shares.mint("alice", 1)
        with pytest.raises(ValueError, match="Insufficient share balance"):
            shares.burn("alice", 2)

    def test_transfer(self) -> None:
        shares = ShareLedger()
        shares.mint("alice", 10)
        shares.transfer("alice", "pool", 4)
        assert shares.get_all_balances() == {"alice": 6, "pool": 4}
        assert shares.total_supply() == 10

    def test_checkpoint_rollback(self) -> None:
        shares = ShareLedger()
        shares.mint("alice", 10)
        token = shares.checkpoint()
        shares.burn("alice", 10)
        shares.rollback(token)
        assert shares.balance_of("alice") == 10
        assert shares.total_supply() == 10
