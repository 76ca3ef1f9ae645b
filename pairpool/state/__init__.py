"""
State management for pairpool
"""

from .balances import AssetLedger, Revertible, LedgerError, TokenLedger
from .lp import ShareLedger
from .pools import PoolState, compute_pool_id, resolve_pair

__all__ = [
    "AssetLedger",
    "Revertible",
    "LedgerError",
    "TokenLedger",
    "ShareLedger",
    "PoolState",
    "compute_pool_id",
    "resolve_pair",
]
