"""Emitted records for external observers.

Each record is a frozen dataclass tagged with an `EventKind`. Engines buffer
records during a call and publish them to their `EventLog` only when the call
commits, so a rolled-back call never leaves a record behind.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Iterator, List, Optional, Union


@unique
class EventKind(Enum):
    LIQUIDITY_ADDED = "LiquidityAdded"
    LIQUIDITY_REMOVED = "LiquidityRemoved"
    SWAP = "Swap"
    SHARES_TRANSFERRED = "SharesTransferred"
    STAKED = "Staked"
    UNSTAKED = "Unstaked"
    REWARD_CLAIMED = "RewardClaimed"
    REWARD_RATE_CHANGED = "RewardRateChanged"


@dataclass(frozen=True)
class LiquidityAdded:
    account: str
    amount_a: int
    amount_b: int
    shares: int
    kind: EventKind = field(default=EventKind.LIQUIDITY_ADDED, init=False)


@dataclass(frozen=True)
class LiquidityRemoved:
    account: str
    amount_a: int
    amount_b: int
    shares: int
    kind: EventKind = field(default=EventKind.LIQUIDITY_REMOVED, init=False)


@dataclass(frozen=True)
class Swap:
    account: str
    input_asset: str
    amount_in: int
    amount_out: int
    kind: EventKind = field(default=EventKind.SWAP, init=False)


@dataclass(frozen=True)
class SharesTransferred:
    account: str
    recipient: str
    shares: int
    kind: EventKind = field(default=EventKind.SHARES_TRANSFERRED, init=False)


@dataclass(frozen=True)
class Staked:
    account: str
    amount: int
    kind: EventKind = field(default=EventKind.STAKED, init=False)


@dataclass(frozen=True)
class Unstaked:
    account: str
    amount: int
    kind: EventKind = field(default=EventKind.UNSTAKED, init=False)


@dataclass(frozen=True)
class RewardClaimed:
    account: str
    amount: int
    kind: EventKind = field(default=EventKind.REWARD_CLAIMED, init=False)


@dataclass(frozen=True)
class RewardRateChanged:
    account: str
    old_rate: int
    new_rate: int
    kind: EventKind = field(default=EventKind.REWARD_RATE_CHANGED, init=False)


Event = Union[
    LiquidityAdded,
    LiquidityRemoved,
    Swap,
    SharesTransferred,
    Staked,
    Unstaked,
    RewardClaimed,
    RewardRateChanged,
]


class EventLog:
    """Append-only record log, optionally bounded."""

    def __init__(self, maxlen: Optional[int] = None) -> None:
        self.events = deque(maxlen=maxlen)

    def add(self, e: Event) -> None:
        self.events.append(e)

    def extend(self, events: List[Event]) -> None:
        self.events.extend(events)

    def tail(self, n: int = 200) -> List[Event]:
        if n <= 0:
            return []
        if n >= len(self.events):
            return list(self.events)
        return list(self.events)[-n:]

    def of_kind(self, kind: EventKind) -> List[Event]:
        return [e for e in self.events if e.kind is kind]

    def last(self) -> Optional[Event]:
        return self.events[-1] if self.events else None

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self.events))

    def __len__(self) -> int:
        return len(self.events)
