"""
Ledger state tables for yieldswap
"""

from .accounts import AccountTable
from .balances import Account, Amount, AssetId, AssetLedger

__all__ = [
    "Account",
    "Amount",
    "AssetId",
    "AssetLedger",
    "AccountTable",
]
