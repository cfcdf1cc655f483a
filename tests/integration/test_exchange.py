# [TESTER] v1

from __future__ import annotations

import pytest

from yieldswap.core.errors import InsufficientBalance, TransferFailed
from yieldswap.core.invariants import assert_invariants
from yieldswap.integration.clock import ManualClock
from yieldswap.integration.config import ExchangeConfig, FarmConfig, PoolConfig, build_exchange
from yieldswap.integration.transfers import PoolShareTransfer
from yieldswap.state.balances import AssetLedger


def _exchange():
    config = ExchangeConfig(
        pool=PoolConfig(asset_a="USDC", asset_b="WETH"),
        farm=FarmConfig(reward_asset="YLD", stake_asset="pool_shares", reward_rate=100, controller="treasury"),
    )
    ledger = AssetLedger()
    clock = ManualClock(1_700_000_000)
    pool, farm = build_exchange(config, ledger, clock)
    assert pool is not None and farm is not None
    ledger.mint("farm", "YLD", 10**9)
    return ledger, clock, pool, farm


def test_build_exchange_wires_the_farm_to_pool_shares() -> None:
    _, _, pool, farm = _exchange()
    assert farm.stake_asset == "pool:shares"
    assert isinstance(farm._stake_token, PoolShareTransfer)
    assert pool.fee_bps == 25


def test_liquidity_provider_round_trip() -> None:
    ledger, clock, pool, farm = _exchange()
    ledger.mint("alice", "USDC", 1000)
    ledger.mint("alice", "WETH", 1000)
    ledger.mint("bob", "USDC", 100_000)

    shares = pool.add_liquidity("alice", 1000, 1000)
    farm.stake("alice", shares)
    assert pool.share_balance("alice") == 0
    assert pool.share_balance("farm") == shares == farm.total_staked

    # Staked shares cannot be withdrawn from the pool.
    with pytest.raises(InsufficientBalance):
        pool.remove_liquidity("alice", 1)

    assert pool.swap("bob", "USDC", 100_000) == 990
    clock.advance(10)

    assert farm.exit("alice") == (shares, 1000)
    assert ledger.get("alice", "YLD") == 1000
    assert pool.remove_liquidity("alice", shares) == (101_000, 10)
    assert pool.total_shares == 0

    assert_invariants(pool)
    assert_invariants(farm)


def test_stake_without_shares_fails_cleanly() -> None:
    _, _, pool, farm = _exchange()
    with pytest.raises(TransferFailed):
        farm.stake("mallory", 10)
    assert farm.total_staked == 0
    assert len(pool.events) == 0


def test_build_exchange_with_only_a_pool() -> None:
    pool, farm = build_exchange(
        ExchangeConfig(pool=PoolConfig(asset_a="A", asset_b="B", fee_bps=0)), AssetLedger(), ManualClock(0)
    )
    assert farm is None
    assert pool is not None and pool.fee_bps == 0
