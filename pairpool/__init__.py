"""
pairpool: a two-asset constant-product exchange pool.
"""

from .core import Pool, PoolConfig, PoolError
from .state import ShareLedger, TokenLedger

__all__ = [
    "Pool",
    "PoolConfig",
    "PoolError",
    "ShareLedger",
    "TokenLedger",
]
