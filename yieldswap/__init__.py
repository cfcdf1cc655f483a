"""
yieldswap: constant-product liquidity pool with an integrated reward farm.
"""

from .core import (
    EventKind,
    InsufficientBalance,
    InsufficientLiquidityMinted,
    InsufficientOutput,
    InvalidAsset,
    InvalidInput,
    LedgerError,
    NothingToClaim,
    PoolEngine,
    Reentrancy,
    RewardEngine,
    TransferFailed,
    Unauthorized,
)

__version__ = "0.1.0"

__all__ = [
    "EventKind",
    "InsufficientBalance",
    "InsufficientLiquidityMinted",
    "InsufficientOutput",
    "InvalidAsset",
    "InvalidInput",
    "LedgerError",
    "NothingToClaim",
    "PoolEngine",
    "Reentrancy",
    "RewardEngine",
    "TransferFailed",
    "Unauthorized",
]
