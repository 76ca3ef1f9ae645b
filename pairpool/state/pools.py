"""
Pool record for a two-asset constant-product pool.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Tuple

from .balances import ASSET_ID_NBYTES, Address, Amount, AssetId

_HEX_DIGITS = frozenset("0123456789abcdef")


def normalize_asset_id(asset: object) -> AssetId:
    """
    Canonicalize an asset identity to a lowercase 0x-prefixed 20-byte hex string.

    Accepts the identity with or without the 0x prefix, in any case.
    """
    if not isinstance(asset, str):
        raise TypeError(f"asset id must be a str, got {type(asset).__name__}")
    digits = asset.strip().lower()
    if digits.startswith("0x"):
        digits = digits[2:]
    if len(digits) != 2 * ASSET_ID_NBYTES:
        raise ValueError(f"asset id must be {ASSET_ID_NBYTES} bytes (hex length {2 * ASSET_ID_NBYTES})")
    if not set(digits) <= _HEX_DIGITS:
        raise ValueError("asset id must be valid hex")
    return "0x" + digits


def resolve_pair(asset_x: AssetId, asset_y: AssetId) -> Tuple[AssetId, AssetId, bool]:
    """
    Order two asset identities canonically (lower identity first).

    Returns:
        Tuple of (asset_a, asset_b, flipped) where `flipped` is True when the
        caller's order was reversed.

    Raises:
        ValueError: If both identities are equal
    """
    x = normalize_asset_id(asset_x)
    y = normalize_asset_id(asset_y)
    if x == y:
        raise ValueError(f"Assets must be distinct: {x}")
    if x < y:
        return x, y, False
    return y, x, True


def compute_pool_id(asset_a: AssetId, asset_b: AssetId) -> str:
    """
    Deterministically compute a pool identifier for a canonical pair.

    pool_id = H("PairPool" || asset_a || asset_b), truncated to 20 bytes so the
    id can double as the pool's custody address.
    """
    if asset_a >= asset_b:
        raise ValueError(f"Assets must be in canonical order: {asset_a} < {asset_b}")

    pool_id_data = b"PairPool" + asset_a.encode("utf-8") + asset_b.encode("utf-8")
    return "0x" + hashlib.sha256(pool_id_data).hexdigest()[: 2 * ASSET_ID_NBYTES]


@dataclass
class PoolState:
    """
    Recorded state of one pool instance.

    Attributes:
        pool_id: Deterministic pool identifier
        address: Holder identity under which the pool keeps custody
        asset_a: Lower asset identity (fixed at construction)
        asset_b: Higher asset identity (fixed at construction)
        reserve_a: Recorded reserve of asset_a
        reserve_b: Recorded reserve of asset_b

    Reserves equal the pool's actual custody after every completed mutating
    operation; they are not maintained mid-operation.
    """
    pool_id: str
    address: Address
    asset_a: AssetId
    asset_b: AssetId
    reserve_a: Amount = 0
    reserve_b: Amount = 0

    def __post_init__(self):
        """Validate pool state invariants."""
        if self.asset_a >= self.asset_b:
            raise ValueError(
                f"Assets must be in canonical order: {self.asset_a} < {self.asset_b}"
            )
        if self.reserve_a < 0 or self.reserve_b < 0:
            raise ValueError(
                f"Reserves must be non-negative: ({self.reserve_a}, {self.reserve_b})"
            )

    def has_asset(self, asset: AssetId) -> bool:
        return asset == self.asset_a or asset == self.asset_b

    def get_reserve(self, asset: AssetId) -> Amount:
        """
        Get reserve for a specific asset.

        Raises:
            ValueError: If asset is not in this pool
        """
        if asset == self.asset_a:
            return self.reserve_a
        elif asset == self.asset_b:
            return self.reserve_b
        else:
            raise ValueError(f"Asset {asset} not in pool {self.pool_id}")

    def __repr__(self) -> str:
        return (
            f"PoolState(pool_id={self.pool_id[:12]}..., "
            f"assets=({self.asset_a[:8]}..., {self.asset_b[:8]}...), "
            f"reserves=({self.reserve_a}, {self.reserve_b}))"
        )
