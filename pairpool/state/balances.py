"""
Asset ledger collaborators.

Implements the external fungible-asset interface the pool talks to:
- `AssetLedger`: the capabilities the pool requires (query, push, pull).
- `Revertible`: optional undo of one specific movement, so an aborted pool
  operation can reverse exactly the transfers it made and nothing else.
- `TokenLedger`: deterministic in-memory reference implementation.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Protocol, Tuple, runtime_checkable


# Type aliases
Address = str  # holder identity (account or pool address)
AssetId = str  # 0x-prefixed 20-byte hex string, lowercase
Amount = int  # Non-negative integer (arbitrary precision)

ASSET_ID_NBYTES = 20

TransferHook = Callable[["TokenLedger", Address, Address, Amount], None]


class LedgerError(ValueError):
    """Base class for asset-ledger rejections."""


class InsufficientBalanceError(LedgerError):
    pass


class InsufficientAllowanceError(LedgerError):
    pass


@runtime_checkable
class AssetLedger(Protocol):
    asset_id: AssetId

    def balance_of(self, holder: Address) -> Amount: ...

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool: ...

    def transfer_from(self, spender: Address, owner: Address, to: Address, amount: Amount) -> bool: ...


@runtime_checkable
class Revertible(Protocol):
    def revert_transfer(
        self, sender: Address, to: Address, amount: Amount, *, spender: Optional[Address] = None
    ) -> None: ...


class TokenLedger:
    """
    Deterministic balance ledger for a single asset.

    Note: balances are stored sparsely in a plain dict. Callers that need a
    stable ordering (hashing, snapshots) must sort keys explicitly.

    `on_transfer`, when set, is called after every successful movement with
    `(ledger, sender, to, amount)`. It models asset code that runs during a
    transfer and may call back into whoever initiated it. If the hook raises,
    the movement (and any allowance it consumed) is undone before the error
    propagates.
    """

    def __init__(self, asset_id: AssetId, symbol: str = "", on_transfer: Optional[TransferHook] = None):
        self.asset_id = asset_id
        self.symbol = symbol
        self.on_transfer = on_transfer
        self._balances: Dict[Address, Amount] = {}
        self._allowances: Dict[Tuple[Address, Address], Amount] = {}
        self._total_supply: Amount = 0

    def balance_of(self, holder: Address) -> Amount:
        """Get balance for holder. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def allowance(self, owner: Address, spender: Address) -> Amount:
        return self._allowances.get((owner, spender), 0)

    def total_supply(self) -> Amount:
        return self._total_supply

    def _set(self, holder: Address, amount: Amount) -> None:
        if amount < 0:
            raise InsufficientBalanceError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def mint(self, holder: Address, amount: Amount) -> None:
        """Create `amount` new units for `holder` (test/bootstrap helper)."""
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative: {amount}")
        self._set(holder, self.balance_of(holder) + amount)
        self._total_supply += amount

    def approve(self, owner: Address, spender: Address, amount: Amount) -> bool:
        if amount < 0:
            raise ValueError(f"Allowance must be non-negative: {amount}")
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount
        return True

    def _move(self, sender: Address, to: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        current = self.balance_of(sender)
        if current < amount:
            raise InsufficientBalanceError(
                f"Insufficient {self.symbol or self.asset_id} balance: {current} < {amount}"
            )
        self._set(sender, current - amount)
        self._set(to, self.balance_of(to) + amount)

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool:
        """
        Move `amount` from `sender` to `to`.

        Raises:
            InsufficientBalanceError: If sender holds less than `amount`
        """
        self._move(sender, to, amount)
        self._notify(sender, to, amount, spender=None)
        return True

    def transfer_from(self, spender: Address, owner: Address, to: Address, amount: Amount) -> bool:
        """
        Move `amount` from `owner` to `to` on behalf of `spender`.

        Raises:
            InsufficientAllowanceError: If spender's allowance is below `amount`
            InsufficientBalanceError: If owner holds less than `amount`
        """
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise InsufficientAllowanceError(
                f"Insufficient allowance for {spender}: {allowed} < {amount}"
            )
        self._move(sender=owner, to=to, amount=amount)
        self.approve(owner, spender, allowed - amount)
        self._notify(owner, to, amount, spender=spender)
        return True

    def _notify(self, sender: Address, to: Address, amount: Amount, *, spender: Optional[Address]) -> None:
        if self.on_transfer is None:
            return
        try:
            self.on_transfer(self, sender, to, amount)
        except Exception:
            self.revert_transfer(sender, to, amount, spender=spender)
            raise

    def revert_transfer(
        self, sender: Address, to: Address, amount: Amount, *, spender: Optional[Address] = None
    ) -> None:
        """
        Undo an earlier movement of `amount` from `sender` to `to`.

        Bypasses allowances and `on_transfer`. When `spender` is given, the
        allowance the movement consumed is restored as well.
        """
        self._move(to, sender, amount)
        if spender is not None:
            self.approve(sender, spender, self.allowance(sender, spender) + amount)

    def get_all_balances(self) -> Dict[Address, Amount]:
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"TokenLedger({self.symbol or self.asset_id}, {len(self._balances)} holders)"
