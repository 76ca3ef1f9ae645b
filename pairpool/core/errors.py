"""Exception types for pool operations.

Every failure a caller can observe derives from ``PoolError`` and carries a
stable ``code`` plus an ``ErrorCategory`` so routing layers can tell "retry
with different parameters" apart from "abandon".
"""

from __future__ import annotations

from enum import Enum, unique


@unique
class ErrorCategory(Enum):
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    ECONOMIC = "economic"
    COLLABORATOR = "collaborator"
    CONCURRENCY = "concurrency"


class PoolError(Exception):
    """Base class for all pool failures."""

    code: str = "POOL_ERROR"
    category: ErrorCategory = ErrorCategory.VALIDATION


# -- configuration ------------------------------------------------------------


class ConfigurationError(PoolError):
    """Raised for invalid or identical asset identities, or a malformed config."""

    code = "INVALID_CONFIGURATION"
    category = ErrorCategory.CONFIGURATION


# -- input validation ---------------------------------------------------------


class InvalidAmountError(PoolError):
    code = "INVALID_AMOUNT"


class AmountOverflowError(PoolError):
    """Raised when an amount exceeds the configured domain bound."""

    code = "AMOUNT_OVERFLOW"


class InvalidAssetError(PoolError):
    code = "INVALID_ASSET"


class IdenticalAssetsError(PoolError):
    code = "IDENTICAL_ASSETS"


class InsufficientSharesError(PoolError):
    code = "INSUFFICIENT_SHARES"


# -- economic -----------------------------------------------------------------


class InsufficientOutputError(PoolError):
    code = "INSUFFICIENT_OUTPUT_AMOUNT"
    category = ErrorCategory.ECONOMIC


class InvariantViolationError(PoolError):
    """Raised when a post-state violates one or more invariants."""

    code = "INVARIANT_VIOLATION"
    category = ErrorCategory.ECONOMIC

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class InsufficientLiquidityMintedError(PoolError):
    code = "INSUFFICIENT_LIQUIDITY_MINTED"
    category = ErrorCategory.ECONOMIC


class EmptyReservesError(PoolError):
    code = "EMPTY_RESERVES"
    category = ErrorCategory.ECONOMIC


class SlippageError(PoolError):
    code = "SLIPPAGE_EXCEEDED"
    category = ErrorCategory.ECONOMIC


class CustodyMismatchError(PoolError):
    """Raised when the pool received less than the declared input."""

    code = "CUSTODY_MISMATCH"
    category = ErrorCategory.ECONOMIC


# -- collaborator / concurrency -------------------------------------------------


class TransferFailedError(PoolError):
    code = "TRANSFER_FAILED"
    category = ErrorCategory.COLLABORATOR


class PoolLockedError(PoolError):
    """Raised on reentrant or concurrent entry into a mutating operation."""

    code = "LOCKED"
    category = ErrorCategory.CONCURRENCY
