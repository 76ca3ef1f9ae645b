"""
Runtime configuration for a pool instance.

Values come from defaults, the process environment (`PoolConfig.from_env`),
or a plain mapping such as a parsed YAML document (`PoolConfig.from_mapping`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping

from .errors import ConfigurationError


MAX_UINT256 = 2**256 - 1

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in _TRUE_STRINGS:
        return True
    if v in _FALSE_STRINGS:
        return False
    return default


@dataclass(frozen=True)
class PoolConfig:
    # Domain bound for every amount argument (uint256 by default).
    max_amount: int = MAX_UINT256

    # Swaps always check k against the balance delta observed across the pull.
    # If True, that delta must also equal `amount_in` exactly.
    strict_custody: bool = False

    # Run the post-state invariant registry after every mutating operation.
    check_invariants: bool = True

    # Keep committed notifications in `Pool.events`.
    record_events: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.max_amount, int) or isinstance(self.max_amount, bool) or self.max_amount <= 0:
            raise ConfigurationError(f"max_amount must be a positive int: {self.max_amount!r}")
        for name in ("strict_custody", "check_invariants", "record_events"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"{name} must be a bool")

    @classmethod
    def from_env(cls) -> "PoolConfig":
        return cls(
            max_amount=_env_int("PAIRPOOL_MAX_AMOUNT", MAX_UINT256, lo=1, hi=MAX_UINT256),
            strict_custody=_env_bool("PAIRPOOL_STRICT_CUSTODY", False),
            check_invariants=_env_bool("PAIRPOOL_CHECK_INVARIANTS", True),
            record_events=_env_bool("PAIRPOOL_RECORD_EVENTS", True),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "PoolConfig":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError("pool config must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown pool config keys: {', '.join(unknown)}")
        return cls(**dict(data))
