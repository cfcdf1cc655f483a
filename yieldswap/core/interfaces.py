"""
Collaborator protocols the engines depend on.

The engines never touch an asset ledger or a clock directly; they go through
these two narrow contracts so any backing implementation can be plugged in.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AssetTransfer(Protocol):
    """
    Custodial transfer contract for a single asset.

    - `pull(account, amount)` moves `amount` from `account` into engine custody.
    - `push(account, amount)` moves `amount` from engine custody to `account`.

    Both report success as a bool; a False return must leave the asset ledger
    unchanged.

    An implementation that runs receiver callbacks on `push` may also provide
    `refund(account, amount) -> bool`, a push without callbacks. Rollback uses
    it to return pulled amounts and falls back to `push` otherwise.
    """

    asset_id: str

    def pull(self, account: str, amount: int) -> bool:
        ...

    def push(self, account: str, amount: int) -> bool:
        ...


@runtime_checkable
class Clock(Protocol):
    """Monotonically non-decreasing integer time source (seconds)."""

    def now(self) -> int:
        ...
