"""
Liquidity-share balance tracking.

Shares are scoped to one pool instance and tracked separately from asset
balances. The sum of all holder balances always equals `total_supply()`.
"""

from __future__ import annotations

from typing import Dict

from .balances import Address, Amount


class ShareLedger:
    """
    Mintable/burnable/transferable balance table mapping holder -> shares.

    Notes:
    - Share balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    """

    def __init__(self) -> None:
        self._balances: Dict[Address, Amount] = {}
        self._total_supply: Amount = 0

    def balance_of(self, holder: Address) -> Amount:
        """Get share balance for holder. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def total_supply(self) -> Amount:
        return self._total_supply

    def _set(self, holder: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Share balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def _add(self, holder: Address, delta: int) -> None:
        current = self.balance_of(holder)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient share balance: {current} + {delta} = {new_balance} < 0"
            )
        self._set(holder, new_balance)

    def mint(self, holder: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative: {amount}")
        self._add(holder, amount)
        self._total_supply += amount

    def burn(self, holder: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Burn amount must be non-negative: {amount}")
        self._add(holder, -amount)
        self._total_supply -= amount

    def transfer(self, sender: Address, to: Address, amount: Amount) -> None:
        """Move a non-negative amount of shares between holders."""
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        self._add(sender, -amount)
        self._add(to, amount)

    def checkpoint(self) -> object:
        return (dict(self._balances), self._total_supply)

    def rollback(self, token: object) -> None:
        balances, total_supply = token  # type: ignore[misc]
        self._balances = dict(balances)
        self._total_supply = total_supply

    def get_all_balances(self) -> Dict[Address, Amount]:
        """Return all share balances."""
        return dict(self._balances)

    def verify_supply(self) -> bool:
        """Verify stored balances are non-negative and sum to the total supply."""
        return (
            all(amount >= 0 for amount in self._balances.values())
            and sum(self._balances.values()) == self._total_supply
        )

    def __repr__(self) -> str:
        return f"ShareLedger({len(self._balances)} holders, supply={self._total_supply})"
