"""
Pull/push wrappers around the asset-ledger collaborator.

A falsy return or a `LedgerError` becomes `TransferFailedError`. Any other
exception raised by the ledger (including one raised by a callback into the
pool) propagates unchanged.

Every completed movement is appended to the context's journal so an aborted
operation can reverse exactly the transfers this pool made.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..state.balances import Address, Amount, AssetLedger, LedgerError
from .context import PoolContext
from .errors import TransferFailedError


@dataclass(frozen=True)
class Movement:
    ledger: AssetLedger
    sender: Address
    to: Address
    amount: Amount
    spender: Optional[Address] = None


def pull(ctx: PoolContext, ledger: AssetLedger, owner: Address, amount: Amount) -> None:
    """Move `amount` from `owner` into the pool using the pool's allowance."""
    pool = ctx.address
    try:
        ok = ledger.transfer_from(pool, owner, pool, amount)
    except LedgerError as exc:
        raise TransferFailedError(f"pull of {amount} {ledger.asset_id} from {owner} failed: {exc}") from exc
    if not ok:
        raise TransferFailedError(f"pull of {amount} {ledger.asset_id} from {owner} reported failure")
    ctx.journal.append(Movement(ledger=ledger, sender=owner, to=pool, amount=amount, spender=pool))


def push(ctx: PoolContext, ledger: AssetLedger, to: Address, amount: Amount) -> None:
    """Move `amount` out of pool custody to `to`."""
    pool = ctx.address
    try:
        ok = ledger.transfer(pool, to, amount)
    except LedgerError as exc:
        raise TransferFailedError(f"push of {amount} {ledger.asset_id} to {to} failed: {exc}") from exc
    if not ok:
        raise TransferFailedError(f"push of {amount} {ledger.asset_id} to {to} reported failure")
    ctx.journal.append(Movement(ledger=ledger, sender=pool, to=to, amount=amount))
