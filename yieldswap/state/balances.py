"""
Multi-asset balance tracking for the reference asset ledger.

Implements AssetLedger[Account, AssetId] -> Amount
"""

from typing import Dict, Tuple


# Type aliases
Account = str  # opaque caller identity
AssetId = str  # non-empty asset identifier
Amount = int  # Non-negative integer (arbitrary precision)


class AssetLedger:
    """
    Balance table mapping (account, asset) -> amount.

    This is the in-memory stand-in for the external fungible-asset ledgers the
    engines custody through. Zero balances are omitted to keep the table sparse.
    """

    def __init__(self):
        """Initialize empty ledger."""
        self._balances: Dict[Tuple[Account, AssetId], Amount] = {}

    def get(self, account: Account, asset: AssetId) -> Amount:
        """Get balance for (account, asset). Returns 0 if not found."""
        return self._balances.get((account, asset), 0)

    def set(self, account: Account, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (account, asset).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((account, asset), None)
        else:
            self._balances[(account, asset)] = amount

    def add(self, account: Account, asset: AssetId, delta: int) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(account, asset)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(account, asset, new_balance)

    def mint(self, account: Account, asset: AssetId, amount: Amount) -> None:
        """Create `amount` new units of `asset` for `account`."""
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative: {amount}")
        self.add(account, asset, amount)

    def transfer(self, sender: Account, recipient: Account, asset: AssetId, amount: Amount) -> bool:
        """
        Move `amount` of `asset` between accounts.

        Returns False (and changes nothing) when the sender is short.
        """
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        if self.get(sender, asset) < amount:
            return False
        self.add(sender, asset, -amount)
        self.add(recipient, asset, amount)
        return True

    def total_supply(self, asset: AssetId) -> Amount:
        """Sum of every account's balance of `asset`."""
        return sum(amount for (_, a), amount in self._balances.items() if a == asset)

    def get_all_balances(self) -> Dict[Tuple[Account, AssetId], Amount]:
        """Return a copy of all balances."""
        return dict(self._balances)

    def get_balances_for_asset(self, asset: AssetId) -> Dict[Account, Amount]:
        """Return account -> amount for a single asset."""
        result = {}
        for (acct, a), amount in self._balances.items():
            if a == asset:
                result[acct] = amount
        return result

    def __repr__(self) -> str:
        return f"AssetLedger({len(self._balances)} entries)"
