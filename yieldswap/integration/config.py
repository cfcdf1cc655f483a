"""
Deployment configuration for a pool + farm pair.

Config is a small YAML document:

    pool:
      asset_a: USDC
      asset_b: WETH
      fee_bps: 25
    farm:
      reward_asset: YLD
      stake_asset: pool_shares   # stake the pool's own shares
      reward_rate: 100
      controller: treasury
    log_level: INFO

Environment overrides (applied after the file):
  YIELDSWAP_FEE_BPS, YIELDSWAP_REWARD_RATE, YIELDSWAP_LOG_LEVEL
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

import yaml

from ..core.cpmm import DEFAULT_FEE_BPS
from ..core.farm import RewardEngine
from ..core.interfaces import Clock
from ..core.math import BPS_DENOM
from ..core.pool import PoolEngine
from ..state.balances import AssetLedger
from .transfers import LedgerTransfer, PoolShareTransfer

logger = logging.getLogger(__name__)

# `stake_asset` value meaning "the pool's shares".
POOL_SHARES = "pool_shares"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return value.strip()


def _require_int(value: Any, *, name: str, lo: int = 0, hi: Optional[int] = None) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < lo or (hi is not None and value > hi):
        raise ValueError(f"{name} out of range: {value}")
    return int(value)


@dataclass(frozen=True)
class PoolConfig:
    asset_a: str
    asset_b: str
    fee_bps: int = DEFAULT_FEE_BPS

    def __post_init__(self) -> None:
        _require_str(self.asset_a, name="pool.asset_a")
        _require_str(self.asset_b, name="pool.asset_b")
        if self.asset_a == self.asset_b:
            raise ValueError("pool assets must be distinct")
        _require_int(self.fee_bps, name="pool.fee_bps", hi=BPS_DENOM)


@dataclass(frozen=True)
class FarmConfig:
    reward_asset: str
    stake_asset: str
    reward_rate: int
    controller: str

    def __post_init__(self) -> None:
        _require_str(self.reward_asset, name="farm.reward_asset")
        _require_str(self.stake_asset, name="farm.stake_asset")
        if self.reward_asset == self.stake_asset:
            raise ValueError("farm reward and stake assets must differ")
        _require_int(self.reward_rate, name="farm.reward_rate")
        _require_str(self.controller, name="farm.controller")


@dataclass(frozen=True)
class ExchangeConfig:
    pool: Optional[PoolConfig] = None
    farm: Optional[FarmConfig] = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}: {self.log_level!r}")
        if self.farm is not None and self.farm.stake_asset == POOL_SHARES and self.pool is None:
            raise ValueError(f"farm.stake_asset={POOL_SHARES!r} requires a pool section")


def _int_env(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer: {raw!r}") from exc


def config_from_mapping(obj: Mapping[str, Any]) -> ExchangeConfig:
    if not isinstance(obj, Mapping):
        raise TypeError("config must be a mapping")

    pool_cfg = None
    pool_obj = obj.get("pool")
    if pool_obj is not None:
        if not isinstance(pool_obj, Mapping):
            raise TypeError("pool must be a mapping")
        pool_cfg = PoolConfig(
            asset_a=pool_obj.get("asset_a"),
            asset_b=pool_obj.get("asset_b"),
            fee_bps=pool_obj.get("fee_bps", DEFAULT_FEE_BPS),
        )

    farm_cfg = None
    farm_obj = obj.get("farm")
    if farm_obj is not None:
        if not isinstance(farm_obj, Mapping):
            raise TypeError("farm must be a mapping")
        farm_cfg = FarmConfig(
            reward_asset=farm_obj.get("reward_asset"),
            stake_asset=farm_obj.get("stake_asset", POOL_SHARES),
            reward_rate=farm_obj.get("reward_rate", 0),
            controller=farm_obj.get("controller"),
        )

    log_level = str(obj.get("log_level", "WARNING")).upper()
    return ExchangeConfig(pool=pool_cfg, farm=farm_cfg, log_level=log_level)


def apply_env_overrides(config: ExchangeConfig) -> ExchangeConfig:
    fee_bps = _int_env("YIELDSWAP_FEE_BPS")
    if fee_bps is not None and config.pool is not None:
        config = replace(config, pool=replace(config.pool, fee_bps=fee_bps))

    reward_rate = _int_env("YIELDSWAP_REWARD_RATE")
    if reward_rate is not None and config.farm is not None:
        config = replace(config, farm=replace(config.farm, reward_rate=reward_rate))

    log_level = os.environ.get("YIELDSWAP_LOG_LEVEL", "").strip().upper()
    if log_level:
        config = replace(config, log_level=log_level)
    return config


def load_config(path: Union[str, Path], *, env: bool = True) -> ExchangeConfig:
    """Read a YAML config file; environment overrides apply unless `env=False`."""
    p = Path(path)
    obj = yaml.safe_load(p.read_text(encoding="utf-8"))
    if obj is None:
        obj = {}
    if not isinstance(obj, Mapping):
        raise TypeError(f"{p}: config YAML must be a mapping")
    config = config_from_mapping(obj)
    return apply_env_overrides(config) if env else config


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_exchange(
    config: ExchangeConfig,
    ledger: AssetLedger,
    clock: Clock,
    *,
    pool_custodian: str = "pool",
    farm_custodian: str = "farm",
) -> Tuple[Optional[PoolEngine], Optional[RewardEngine]]:
    """Wire the configured engines against `ledger`."""
    pool = None
    if config.pool is not None:
        pool = PoolEngine(
            LedgerTransfer(ledger, config.pool.asset_a, pool_custodian),
            LedgerTransfer(ledger, config.pool.asset_b, pool_custodian),
            fee_bps=config.pool.fee_bps,
            name=pool_custodian,
        )

    farm = None
    if config.farm is not None:
        if config.farm.stake_asset == POOL_SHARES:
            if pool is None:
                raise ValueError(f"stake_asset={POOL_SHARES!r} requires a pool")
            stake_token = PoolShareTransfer(pool, farm_custodian)
        else:
            stake_token = LedgerTransfer(ledger, config.farm.stake_asset, farm_custodian)
        farm = RewardEngine(
            LedgerTransfer(ledger, config.farm.reward_asset, farm_custodian),
            stake_token,
            reward_rate=config.farm.reward_rate,
            controller=config.farm.controller,
            clock=clock,
            name=farm_custodian,
        )

    logger.info("built exchange: pool=%r farm=%r", pool, farm)
    return pool, farm
