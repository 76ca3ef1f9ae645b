"""Notification types emitted by successful mutating pool operations.

One frozen dataclass per event kind. ``EventLog`` buffers notifications for the
operation in flight. They are committed together with the operation and handed
to listeners only after the pool lock is released; a failing listener is logged
and cannot undo the committed state.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum, unique
from typing import Any, Callable, Union

from ..state.balances import Address, Amount, AssetId

logger = logging.getLogger(__name__)


@unique
class Event(Enum):
    SWAP = "Swap"
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"
    SYNC = "Sync"


@dataclass(frozen=True)
class SwapEvent:
    caller: Address
    asset_in: AssetId
    asset_out: AssetId
    amount_in: Amount
    amount_out: Amount
    event: Event = field(default=Event.SWAP, init=False)


@dataclass(frozen=True)
class DepositEvent:
    caller: Address
    amount_a: Amount
    amount_b: Amount
    liquidity: Amount
    event: Event = field(default=Event.DEPOSIT, init=False)


@dataclass(frozen=True)
class WithdrawalEvent:
    caller: Address
    amount_a: Amount
    amount_b: Amount
    liquidity: Amount
    event: Event = field(default=Event.WITHDRAWAL, init=False)


@dataclass(frozen=True)
class SyncEvent:
    reserve_a: Amount
    reserve_b: Amount
    event: Event = field(default=Event.SYNC, init=False)


Notification = Union[SwapEvent, DepositEvent, WithdrawalEvent, SyncEvent]
Listener = Callable[[Notification], None]


def event_to_dict(notification: Notification) -> dict[str, Any]:
    d = asdict(notification)
    d["event"] = notification.event.value
    return d


class EventLog:
    """Pending/published notification buffer with listener fan-out."""

    def __init__(self, *, record: bool = True) -> None:
        self._record = record
        self._published: list[Notification] = []
        self._pending: list[Notification] = []
        self._listeners: list[Listener] = []

    @property
    def published(self) -> tuple[Notification, ...]:
        return tuple(self._published)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def emit(self, notification: Notification) -> None:
        self._pending.append(notification)

    def discard(self) -> None:
        self._pending.clear()

    def commit(self) -> list[Notification]:
        """Take the pending notifications of a committed operation (recording them if enabled)."""
        committed, self._pending = self._pending, []
        if self._record:
            self._published.extend(committed)
        return committed

    def deliver(self, notifications: list[Notification]) -> None:
        """Hand committed notifications to every listener, in subscription order."""
        for notification in notifications:
            for listener in list(self._listeners):
                try:
                    listener(notification)
                except Exception:
                    logger.exception("listener %r failed on %s", listener, notification.event.value)
