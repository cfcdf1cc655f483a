"""
Core ledger engines
"""

from .cpmm import (
    DEFAULT_FEE_BPS,
    SwapQuote,
    compute_fee,
    compute_share_burn,
    compute_share_mint,
    swap_exact_in,
)
from .errors import (
    InsufficientBalance,
    InsufficientLiquidityMinted,
    InsufficientOutput,
    InvalidAsset,
    InvalidInput,
    InvariantViolation,
    LedgerError,
    NothingToClaim,
    Reentrancy,
    TransferFailed,
    Unauthorized,
)
from .events import EventKind, EventLog
from .farm import RewardEngine
from .interfaces import AssetTransfer, Clock
from .invariants import assert_invariants, check_farm, check_pool
from .math import BPS_DENOM, MAX_AMOUNT, REWARD_SCALE
from .pool import PoolEngine, PoolState
from .rewards import AccumulatorState

__all__ = [
    "DEFAULT_FEE_BPS",
    "SwapQuote",
    "compute_fee",
    "compute_share_burn",
    "compute_share_mint",
    "swap_exact_in",
    "InsufficientBalance",
    "InsufficientLiquidityMinted",
    "InsufficientOutput",
    "InvalidAsset",
    "InvalidInput",
    "InvariantViolation",
    "LedgerError",
    "NothingToClaim",
    "Reentrancy",
    "TransferFailed",
    "Unauthorized",
    "EventKind",
    "EventLog",
    "RewardEngine",
    "AssetTransfer",
    "Clock",
    "assert_invariants",
    "check_farm",
    "check_pool",
    "BPS_DENOM",
    "MAX_AMOUNT",
    "REWARD_SCALE",
    "PoolEngine",
    "PoolState",
    "AccumulatorState",
]
