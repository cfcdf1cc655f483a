"""
Per-account ledger tables for the engines.

Pool shares, stakes, reward checkpoints and pending rewards are all tracked in
`AccountTable`s: account -> non-negative int with default-zero semantics.
"""

from __future__ import annotations

from typing import Dict, Iterator, Tuple

from .balances import Account, Amount


class AccountTable:
    """
    Sparse account -> amount table with a running total.

    Notes:
    - Values are always non-negative.
    - Zero values are omitted, so absent and zero are indistinguishable.
    - `total()` is maintained incrementally and never recomputed on reads.
    """

    def __init__(self) -> None:
        self._values: Dict[Account, Amount] = {}
        self._total: Amount = 0

    def get(self, account: Account) -> Amount:
        """Get the value for `account`. Returns 0 if not found."""
        return self._values.get(account, 0)

    def set(self, account: Account, amount: Amount) -> Amount:
        """Set the value for `account`; returns the previous value."""
        if amount < 0:
            raise ValueError(f"Account value cannot be negative: {amount}")
        previous = self.get(account)
        if amount == 0:
            self._values.pop(account, None)
        else:
            self._values[account] = amount
        self._total += amount - previous
        return previous

    def add(self, account: Account, delta: int) -> Amount:
        """Add delta to an account (delta may be negative); returns the new value."""
        current = self.get(account)
        new_value = current + delta
        if new_value < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_value} < 0"
            )
        self.set(account, new_value)
        return new_value

    def total(self) -> Amount:
        return self._total

    def items(self) -> Iterator[Tuple[Account, Amount]]:
        # Snapshot so callers may mutate while iterating.
        return iter(list(self._values.items()))

    def as_dict(self) -> Dict[Account, Amount]:
        return dict(self._values)

    def verify_total(self) -> bool:
        """True when the running total equals the sum of stored values."""
        return self._total == sum(self._values.values())

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, account: object) -> bool:
        return account in self._values

    def __repr__(self) -> str:
        return f"AccountTable({len(self._values)} entries, total={self._total})"
