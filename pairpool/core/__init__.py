"""
Core pool engines
"""

from .config import PoolConfig
from .cpmm import compute_lp_burn, compute_lp_mint, quote_swap
from .errors import (
    AmountOverflowError,
    ConfigurationError,
    CustodyMismatchError,
    EmptyReservesError,
    ErrorCategory,
    IdenticalAssetsError,
    InsufficientLiquidityMintedError,
    InsufficientOutputError,
    InsufficientSharesError,
    InvalidAmountError,
    InvalidAssetError,
    InvariantViolationError,
    PoolError,
    PoolLockedError,
    SlippageError,
    TransferFailedError,
)
from .events import DepositEvent, Event, SwapEvent, SyncEvent, WithdrawalEvent
from .pool import Pool

__all__ = [
    "Pool",
    "PoolConfig",
    "quote_swap",
    "compute_lp_mint",
    "compute_lp_burn",
    "Event",
    "SwapEvent",
    "DepositEvent",
    "WithdrawalEvent",
    "SyncEvent",
    "ErrorCategory",
    "PoolError",
    "ConfigurationError",
    "InvalidAmountError",
    "AmountOverflowError",
    "InvalidAssetError",
    "IdenticalAssetsError",
    "InsufficientSharesError",
    "InsufficientOutputError",
    "InvariantViolationError",
    "InsufficientLiquidityMintedError",
    "EmptyReservesError",
    "SlippageError",
    "CustodyMismatchError",
    "TransferFailedError",
    "PoolLockedError",
]
