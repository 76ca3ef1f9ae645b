"""
Deterministic pool snapshot and state root hashing (v1).

This is intended for:
- debugging / audit (stable hashes for the same logical state),
- comparing pools across replays of the same operation sequence.

Layout: domain tag, then a length-prefixed pool section and a length-prefixed
share section. Integers are unsigned LEB128; strings are UTF-8 with a length
prefix. Share holders are sorted so dict ordering never leaks into the hash.
"""

from __future__ import annotations

import hashlib
from typing import Any, Dict

from .lp import ShareLedger
from .pools import PoolState


STATE_ROOT_VERSION = 1

_DOMAIN = b"pairpool:pool_state_root:v%d\x00" % STATE_ROOT_VERSION


def pool_snapshot(pool: PoolState, shares: ShareLedger) -> Dict[str, Any]:
    """Plain-dict view of the pool record and share balances, holders sorted."""
    holders = sorted(shares.get_all_balances().items())
    return {
        "pool_id": pool.pool_id,
        "address": pool.address,
        "asset_a": pool.asset_a,
        "asset_b": pool.asset_b,
        "reserve_a": pool.reserve_a,
        "reserve_b": pool.reserve_b,
        "total_shares": shares.total_supply(),
        "shares": [{"holder": holder, "amount": amount} for holder, amount in holders],
    }


def _uvarint(value: int, name: str) -> bytes:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"invalid {name}: {value!r}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _field(data: bytes) -> bytes:
    return _uvarint(len(data), "length") + data


def _encode_shares_section(shares: ShareLedger) -> bytes:
    entries = sorted(shares.get_all_balances().items())
    out = bytearray(_uvarint(len(entries), "holder count"))
    for holder, amount in entries:
        out += _field(holder.encode("utf-8"))
        out += _uvarint(amount, "share amount")
    return bytes(out)


def _encode_pool_section(pool: PoolState) -> bytes:
    out = bytearray()
    for text in (pool.pool_id, pool.asset_a, pool.asset_b):
        out += _field(text.encode("utf-8"))
    out += _uvarint(pool.reserve_a, "pool reserve_a")
    out += _uvarint(pool.reserve_b, "pool reserve_b")
    return bytes(out)


def compute_state_root(pool: PoolState, shares: ShareLedger) -> str:
    """
    Compute a deterministic state root hash for one pool.

    Returns a 0x-prefixed sha256 digest.
    """
    if not isinstance(shares, ShareLedger):
        raise TypeError("shares must be a ShareLedger")

    payload = (
        _DOMAIN
        + b"POL"
        + _field(_encode_pool_section(pool))
        + b"SHR"
        + _uvarint(shares.total_supply(), "total shares")
        + _field(_encode_shares_section(shares))
    )
    return "0x" + hashlib.sha256(payload).hexdigest()
