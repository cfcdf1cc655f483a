"""
All-or-nothing call execution for the engines.

A public engine call runs inside `engine_call(...)`, which:
- holds the engine's `NonReentrant` guard for the whole call,
- hands the body a `CallFrame` that journals every ledger write and every
  completed asset transfer,
- on any exception compensates completed transfers in reverse order, restores
  journaled writes and re-raises,
- on success publishes the buffered events.

This reproduces whole-call atomicity for engines whose collaborators live
outside the process and cannot join a transaction.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Tuple

from ..state.accounts import AccountTable
from .errors import InsufficientBalance, TransferFailed
from .events import Event
from .guards import NonReentrant
from .interfaces import AssetTransfer

logger = logging.getLogger(__name__)


class CallFrame:
    """Journal for a single engine call."""

    def __init__(self, engine: str, caller: str, now: Optional[int] = None) -> None:
        self.engine = engine
        self.caller = caller
        self.now = now
        self.events: List[Event] = []
        self._undo: List[Callable[[], Any]] = []
        self._compensations: List[Tuple[str, Callable[[], bool]]] = []

    # -- Ledger writes -----------------------------------------------------

    def checkpoint(self, owner: object, attr: str) -> None:
        """Record `owner.attr` so rollback can restore it."""
        saved = getattr(owner, attr)
        self._undo.append(lambda: setattr(owner, attr, saved))

    def write(self, table: AccountTable, account: str, value: int) -> None:
        previous = table.set(account, value)
        self._undo.append(lambda: table.set(account, previous))

    def adjust(self, table: AccountTable, account: str, delta: int) -> int:
        """Add `delta` to an account entry; returns the new value."""
        current = table.get(account)
        new_value = current + delta
        if new_value < 0:
            raise InsufficientBalance(
                f"{account!r} holds {current}, cannot remove {-delta}"
            )
        self.write(table, account, new_value)
        return new_value

    # -- Transfers ---------------------------------------------------------

    def pull(self, token: AssetTransfer, amount: int, account: Optional[str] = None) -> None:
        src = self.caller if account is None else account
        if not token.pull(src, amount):
            raise TransferFailed("pull", token.asset_id, src, amount)
        # Refunds skip receive hooks: the guard is still held during rollback.
        refund = getattr(token, "refund", token.push)
        self._compensations.append(
            (f"refund {amount} {token.asset_id} to {src!r}", lambda: refund(src, amount))
        )

    def push(self, token: AssetTransfer, amount: int, account: Optional[str] = None) -> None:
        dst = self.caller if account is None else account
        if not token.push(dst, amount):
            raise TransferFailed("push", token.asset_id, dst, amount)
        self._compensations.append(
            (f"claw back {amount} {token.asset_id} from {dst!r}", lambda: token.pull(dst, amount))
        )

    # -- Events ------------------------------------------------------------

    def emit(self, event: Event) -> None:
        self.events.append(event)

    # -- Rollback ----------------------------------------------------------

    def rollback(self) -> None:
        for description, compensate in reversed(self._compensations):
            try:
                ok = compensate()
            except Exception:
                logger.exception("%s: compensation raised (%s)", self.engine, description)
                continue
            if not ok:
                logger.error("%s: compensation failed (%s)", self.engine, description)
        for undo in reversed(self._undo):
            undo()
        self._compensations.clear()
        self._undo.clear()
        self.events.clear()


@contextmanager
def engine_call(
    guard: NonReentrant,
    caller: str,
    publish: Callable[[List[Event]], None],
    *,
    clock: Optional[Callable[[], int]] = None,
) -> Iterator[CallFrame]:
    """
    Run one public engine call.

    `clock` is read once, after the guard is held, and exposed as `frame.now`.
    Rollback also runs for `BaseException` (e.g. KeyboardInterrupt).
    """
    guard.enter()
    try:
        frame = CallFrame(guard.name, caller, clock() if clock is not None else None)
        try:
            yield frame
        except BaseException as exc:
            logger.warning("%s: call by %r rolled back: %r", guard.name, caller, exc)
            frame.rollback()
            raise
        publish(frame.events)
    finally:
        guard.exit()
