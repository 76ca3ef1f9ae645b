"""
Input validation shared by the swap and liquidity engines.

All checks here run before any transfer, so a rejection leaves nothing to undo.
"""

from __future__ import annotations

from typing import Tuple

from ..state.balances import Amount, AssetId
from ..state.pools import PoolState, normalize_asset_id
from .config import PoolConfig
from .errors import AmountOverflowError, IdenticalAssetsError, InvalidAmountError, InvalidAssetError


def require_amount(name: str, value: object, config: PoolConfig, *, allow_zero: bool = False) -> Amount:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmountError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidAmountError(f"{name} must be {'non-negative' if allow_zero else 'positive'}: {value}")
    if value > config.max_amount:
        raise AmountOverflowError(f"{name} exceeds max_amount: {value}")
    return value


def require_swap_pair(state: PoolState, asset_in: object, asset_out: object) -> Tuple[AssetId, AssetId]:
    """
    Normalize and check a swap direction against the pool's configured pair.

    Raises:
        InvalidAssetError: If either identity is malformed or not in this pool
        IdenticalAssetsError: If both sides name the same asset
    """
    try:
        a_in = normalize_asset_id(asset_in)
        a_out = normalize_asset_id(asset_out)
    except (TypeError, ValueError) as exc:
        raise InvalidAssetError(str(exc)) from exc

    for asset in (a_in, a_out):
        if not state.has_asset(asset):
            raise InvalidAssetError(f"asset {asset} is not in pool {state.pool_id}")
    if a_in == a_out:
        raise IdenticalAssetsError(f"asset_in and asset_out are both {a_in}")
    return a_in, a_out
