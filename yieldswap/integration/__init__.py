"""
Reference collaborators, configuration and snapshots around the core engines.
"""

from .clock import ManualClock, SystemClock
from .config import (
    POOL_SHARES,
    ExchangeConfig,
    FarmConfig,
    PoolConfig,
    build_exchange,
    config_from_mapping,
    configure_logging,
    load_config,
)
from .snapshot import Snapshot, encode_snapshot_data, farm_snapshot, pool_snapshot
from .transfers import LedgerTransfer, PoolShareTransfer

__all__ = [
    "ManualClock",
    "SystemClock",
    "POOL_SHARES",
    "ExchangeConfig",
    "FarmConfig",
    "PoolConfig",
    "build_exchange",
    "config_from_mapping",
    "configure_logging",
    "load_config",
    "Snapshot",
    "encode_snapshot_data",
    "farm_snapshot",
    "pool_snapshot",
    "LedgerTransfer",
    "PoolShareTransfer",
]
