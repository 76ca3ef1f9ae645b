"""
Explicit per-pool state handed to every operation handler.

A `PoolContext` owns the pool record and references the collaborators for one
pool instance; nothing is kept in module globals, so any number of pools can
coexist.

The journal is cleared at the start and end of every transaction; it only
ever holds the transfers of the operation currently running.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..state.balances import AssetId, AssetLedger
from ..state.lp import ShareLedger
from ..state.pools import PoolState
from .config import PoolConfig
from .errors import InvalidAssetError
from .events import EventLog


@dataclass
class PoolContext:
    state: PoolState
    ledger_a: AssetLedger
    ledger_b: AssetLedger
    shares: ShareLedger
    config: PoolConfig
    events: EventLog
    # movements made by the operation in flight, in order
    journal: list = field(default_factory=list)

    @property
    def address(self) -> str:
        return self.state.address

    def ledger_for(self, asset: AssetId) -> AssetLedger:
        if asset == self.state.asset_a:
            return self.ledger_a
        if asset == self.state.asset_b:
            return self.ledger_b
        raise InvalidAssetError(f"asset {asset} is not in pool {self.state.pool_id}")
