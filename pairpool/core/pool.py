"""
Pool facade: the single externally reachable entry point of one pool instance.

Every mutating operation runs in one transaction scope:
1. acquire the non-reentrant lock (reject, never queue),
2. checkpoint the pool record and share ledger,
3. run the engine (validate -> pull -> compute -> check -> push -> refresh),
   journaling every asset movement it makes,
4. check post-state invariants and commit notifications,
5. on any failure reverse the journaled movements, restore the checkpoint
   and re-raise the original error.

Listeners see committed notifications only after the lock is released.
Only this pool's own movements are ever reversed, so pools sharing an asset
ledger never undo each other's work.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from ..state.balances import Address, Amount, AssetId, AssetLedger, LedgerError, Revertible
from ..state.lp import ShareLedger
from ..state.pools import PoolState, compute_pool_id, normalize_asset_id, resolve_pair
from ..state.state_root import compute_state_root, pool_snapshot
from . import liquidity as _liquidity
from . import swap as _swap
from .config import PoolConfig
from .context import PoolContext
from .cpmm import compute_lp_burn, compute_lp_mint, quote_swap
from .errors import ConfigurationError, InsufficientSharesError, InvalidAssetError, InvariantViolationError
from .events import EventLog, Listener, Notification, SyncEvent
from .guard import NonReentrantLock
from .invariants import check_all
from .reserves import get_reserves, refresh, reserves_for
from .validation import require_amount, require_swap_pair

logger = logging.getLogger(__name__)

_LEDGER_METHODS = ("balance_of", "transfer", "transfer_from")


def _require_ledger(ledger: object, name: str) -> AssetId:
    """A ledger is usable when it exposes a well-formed asset_id and the required callables."""
    missing = [m for m in _LEDGER_METHODS if not callable(getattr(ledger, m, None))]
    if missing:
        raise ConfigurationError(f"{name} is not an asset ledger (missing {', '.join(missing)})")
    if not isinstance(ledger, AssetLedger):
        raise ConfigurationError(f"{name} is not an asset ledger (missing asset_id)")
    try:
        return normalize_asset_id(ledger.asset_id)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} has an invalid asset_id: {exc}") from exc


class Pool:
    """
    Two-asset constant-product pool.

    The two ledgers may be given in either order; the pool stores them in
    canonical order (lower asset identity first) and never changes it.
    """

    def __init__(
        self,
        ledger_x: AssetLedger,
        ledger_y: AssetLedger,
        *,
        address: Optional[Address] = None,
        shares: Optional[ShareLedger] = None,
        config: Optional[PoolConfig] = None,
    ) -> None:
        asset_x = _require_ledger(ledger_x, "ledger_x")
        asset_y = _require_ledger(ledger_y, "ledger_y")
        if asset_x == asset_y:
            raise ConfigurationError(f"pool assets must be distinct: {asset_x}")
        asset_a, asset_b, flipped = resolve_pair(asset_x, asset_y)
        ledger_a, ledger_b = (ledger_y, ledger_x) if flipped else (ledger_x, ledger_y)

        pool_id = compute_pool_id(asset_a, asset_b)
        config = config if config is not None else PoolConfig()

        self._ctx = PoolContext(
            state=PoolState(pool_id=pool_id, address=address or pool_id, asset_a=asset_a, asset_b=asset_b),
            ledger_a=ledger_a,
            ledger_b=ledger_b,
            shares=shares if shares is not None else ShareLedger(),
            config=config,
            events=EventLog(record=config.record_events),
        )
        self._lock = NonReentrantLock()

    # -- read-only accessors --------------------------------------------------

    @property
    def pool_id(self) -> str:
        return self._ctx.state.pool_id

    @property
    def address(self) -> Address:
        return self._ctx.state.address

    @property
    def config(self) -> PoolConfig:
        return self._ctx.config

    @property
    def shares(self) -> ShareLedger:
        return self._ctx.shares

    @property
    def events(self) -> Tuple[Notification, ...]:
        return self._ctx.events.published

    @property
    def locked(self) -> bool:
        return self._lock.locked

    def get_reserves(self) -> Tuple[Amount, Amount]:
        return get_reserves(self._ctx.state)

    def get_asset_a(self) -> AssetId:
        return self._ctx.state.asset_a

    def get_asset_b(self) -> AssetId:
        return self._ctx.state.asset_b

    def total_shares(self) -> Amount:
        return self._ctx.shares.total_supply()

    def shares_of(self, holder: Address) -> Amount:
        return self._ctx.shares.balance_of(holder)

    def canonical_amounts(self, amounts: Mapping[AssetId, Amount]) -> Tuple[Amount, Amount]:
        """Map `{asset: amount}` given in any order onto (amount_a, amount_b)."""
        by_asset: Dict[AssetId, Amount] = {}
        for asset, amount in amounts.items():
            try:
                key = normalize_asset_id(asset)
            except (TypeError, ValueError) as exc:
                raise InvalidAssetError(str(exc)) from exc
            if not self._ctx.state.has_asset(key):
                raise InvalidAssetError(f"asset {key} is not in pool {self.pool_id}")
            by_asset[key] = amount
        if len(by_asset) != 2:
            raise InvalidAssetError("amounts must name both pool assets exactly once")
        return by_asset[self._ctx.state.asset_a], by_asset[self._ctx.state.asset_b]

    def subscribe(self, listener: Listener) -> None:
        self._ctx.events.subscribe(listener)

    def snapshot(self) -> Dict[str, Any]:
        return pool_snapshot(self._ctx.state, self._ctx.shares)

    def state_root(self) -> str:
        return compute_state_root(self._ctx.state, self._ctx.shares)

    def invariant_violations(self) -> list[str]:
        return check_all(self._ctx)

    # -- quotes (no transfers, no lock) ---------------------------------------

    def quote_swap(self, asset_in: AssetId, asset_out: AssetId, amount_in: Amount) -> Amount:
        asset_in, asset_out = require_swap_pair(self._ctx.state, asset_in, asset_out)
        amount_in = require_amount("amount_in", amount_in, self._ctx.config)
        reserve_in, reserve_out = reserves_for(self._ctx.state, asset_in, asset_out)
        return quote_swap(reserve_in, reserve_out, amount_in).amount_out

    def quote_add_liquidity(self, amount_a_in: Amount, amount_b_in: Amount) -> Tuple[Amount, Amount, Amount]:
        amount_a_in = require_amount("amount_a_in", amount_a_in, self._ctx.config)
        amount_b_in = require_amount("amount_b_in", amount_b_in, self._ctx.config)
        state = self._ctx.state
        mint = compute_lp_mint(state.reserve_a, state.reserve_b, self.total_shares(), amount_a_in, amount_b_in)
        return mint.amount_a_used, mint.amount_b_used, mint.liquidity

    def quote_remove_liquidity(self, liquidity: Amount) -> Tuple[Amount, Amount]:
        liquidity = require_amount("liquidity", liquidity, self._ctx.config)
        if liquidity > self.total_shares():
            raise InsufficientSharesError(f"cannot burn {liquidity} of {self.total_shares()} shares")
        state = self._ctx.state
        burn = compute_lp_burn(liquidity, state.reserve_a, state.reserve_b, self.total_shares())
        return burn.amount_a_out, burn.amount_b_out

    # -- mutating operations --------------------------------------------------

    def swap(
        self,
        caller: Address,
        asset_in: AssetId,
        asset_out: AssetId,
        amount_in: Amount,
        *,
        min_amount_out: Amount = 0,
    ) -> Amount:
        with self._transaction("swap"):
            return _swap.swap(self._ctx, caller, asset_in, asset_out, amount_in, min_amount_out=min_amount_out)

    def add_liquidity(
        self,
        caller: Address,
        amount_a_in: Amount,
        amount_b_in: Amount,
        *,
        amount_a_min: Amount = 0,
        amount_b_min: Amount = 0,
    ) -> Tuple[Amount, Amount, Amount]:
        with self._transaction("add_liquidity"):
            return _liquidity.add_liquidity(
                self._ctx, caller, amount_a_in, amount_b_in,
                amount_a_min=amount_a_min, amount_b_min=amount_b_min,
            )

    def remove_liquidity(
        self,
        caller: Address,
        liquidity: Amount,
        *,
        amount_a_min: Amount = 0,
        amount_b_min: Amount = 0,
    ) -> Tuple[Amount, Amount]:
        with self._transaction("remove_liquidity"):
            return _liquidity.remove_liquidity(
                self._ctx, caller, liquidity,
                amount_a_min=amount_a_min, amount_b_min=amount_b_min,
            )

    def sync(self) -> Tuple[Amount, Amount]:
        """Absorb any passive change in custody into the recorded reserves."""
        with self._transaction("sync"):
            reserve_a, reserve_b = refresh(self._ctx)
            self._ctx.events.emit(SyncEvent(reserve_a=reserve_a, reserve_b=reserve_b))
            return reserve_a, reserve_b

    # -- transaction scope ----------------------------------------------------

    def _revert_journal(self) -> None:
        """Reverse this pool's movements, newest first."""
        for move in reversed(self._ctx.journal):
            if not isinstance(move.ledger, Revertible):
                # Hosts without per-movement undo roll the whole call back themselves.
                continue
            try:
                move.ledger.revert_transfer(move.sender, move.to, move.amount, spender=move.spender)
            except LedgerError:
                logger.error(
                    "could not reverse %d %s from %s to %s on pool %s",
                    move.amount, move.ledger.asset_id, move.sender, move.to, self.pool_id,
                )

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        ctx = self._ctx
        committed: list[Notification] = []
        with self._lock.held(operation):
            state = ctx.state
            reserves = (state.reserve_a, state.reserve_b)
            shares_token = ctx.shares.checkpoint()
            ctx.journal.clear()
            try:
                yield
                if ctx.config.check_invariants:
                    violations = check_all(ctx)
                    if violations:
                        raise InvariantViolationError(violations)
                committed = ctx.events.commit()
            except Exception as exc:
                ctx.shares.rollback(shares_token)
                self._revert_journal()
                state.reserve_a, state.reserve_b = reserves
                ctx.events.discard()
                logger.info("%s aborted on pool %s: %s", operation, self.pool_id, getattr(exc, "code", type(exc).__name__))
                raise
            finally:
                ctx.journal.clear()
        ctx.events.deliver(committed)
