"""
Reference `AssetTransfer` collaborators.

- `LedgerTransfer`: custodial pull/push of one asset on an `AssetLedger`.
- `PoolShareTransfer`: pull/push of a pool's shares, so a `RewardEngine` can
  stake LP receipts issued by a `PoolEngine`.

Both report failure as False and leave their ledger unchanged in that case.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict

from ..core.errors import InsufficientBalance, InvalidInput
from ..core.pool import PoolEngine
from ..state.balances import Account, Amount, AssetId, AssetLedger

logger = logging.getLogger(__name__)

# Called after an account has been credited by a push: hook(asset_id, amount).
ReceiveHook = Callable[[AssetId, Amount], None]


class LedgerTransfer:
    """
    Moves one asset between callers and a custodian account on an `AssetLedger`.

    `on_receive` registers a hook run after a push credits an account. This is
    how a receiving contract's callback is modelled: if the hook raises, the
    push is reverted and the exception propagates to the engine.
    """

    def __init__(self, ledger: AssetLedger, asset_id: AssetId, custodian: Account) -> None:
        if not isinstance(asset_id, str) or not asset_id:
            raise ValueError("asset_id must be a non-empty string")
        if not isinstance(custodian, str) or not custodian:
            raise ValueError("custodian must be a non-empty string")
        self.ledger = ledger
        self.asset_id = asset_id
        self.custodian = custodian
        self._hooks: Dict[Account, ReceiveHook] = {}

    def on_receive(self, account: Account, hook: ReceiveHook) -> None:
        self._hooks[account] = hook

    def clear_hook(self, account: Account) -> None:
        self._hooks.pop(account, None)

    def balance_of(self, account: Account) -> Amount:
        return self.ledger.get(account, self.asset_id)

    @property
    def custody_balance(self) -> Amount:
        return self.ledger.get(self.custodian, self.asset_id)

    def pull(self, account: Account, amount: Amount) -> bool:
        if amount < 0:
            return False
        ok = self.ledger.transfer(account, self.custodian, self.asset_id, amount)
        if not ok:
            logger.debug("pull of %d %s from %r refused", amount, self.asset_id, account)
        return ok

    def push(self, account: Account, amount: Amount) -> bool:
        if amount < 0:
            return False
        if not self.ledger.transfer(self.custodian, account, self.asset_id, amount):
            logger.debug("push of %d %s to %r refused", amount, self.asset_id, account)
            return False
        hook = self._hooks.get(account)
        if hook is not None:
            try:
                hook(self.asset_id, amount)
            except BaseException:
                # The receiver reverted: undo the credit before propagating.
                self.ledger.transfer(account, self.custodian, self.asset_id, amount)
                raise
        return True

    def refund(self, account: Account, amount: Amount) -> bool:
        """Return a pulled amount to `account` without running its receive hook."""
        if amount < 0:
            return False
        return self.ledger.transfer(self.custodian, account, self.asset_id, amount)

    def __repr__(self) -> str:
        return f"LedgerTransfer({self.asset_id!r}, custodian={self.custodian!r})"


class PoolShareTransfer:
    """Custodial pull/push of a `PoolEngine`'s shares."""

    def __init__(self, pool: PoolEngine, custodian: Account, *, asset_id: str = "") -> None:
        if not isinstance(custodian, str) or not custodian:
            raise ValueError("custodian must be a non-empty string")
        self.pool = pool
        self.custodian = custodian
        self.asset_id = asset_id or f"{pool.name}:shares"

    def balance_of(self, account: Account) -> Amount:
        return self.pool.share_balance(account)

    @property
    def custody_balance(self) -> Amount:
        return self.pool.share_balance(self.custodian)

    def pull(self, account: Account, amount: Amount) -> bool:
        return self._move(account, self.custodian, amount)

    def push(self, account: Account, amount: Amount) -> bool:
        return self._move(self.custodian, account, amount)

    def _move(self, sender: Account, recipient: Account, amount: Amount) -> bool:
        try:
            self.pool.transfer_shares(sender, recipient, amount)
        except (InsufficientBalance, InvalidInput) as exc:
            logger.debug("share transfer %r -> %r of %d refused: %s", sender, recipient, amount, exc)
            return False
        return True

    def __repr__(self) -> str:
        return f"PoolShareTransfer({self.asset_id!r}, custodian={self.custodian!r})"
