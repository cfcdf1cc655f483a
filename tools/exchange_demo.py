#!/usr/bin/env python3
"""
Offline pool + farm walkthrough on an in-memory ledger.

Seeds a pool, swaps, stakes the LP shares in the farm, lets time pass on a
manual clock and claims the reward. Every step prints the resulting ledger.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from yieldswap.core import LedgerError
from yieldswap.integration import (
    ExchangeConfig,
    FarmConfig,
    ManualClock,
    PoolConfig,
    build_exchange,
    configure_logging,
    farm_snapshot,
    load_config,
    pool_snapshot,
)
from yieldswap.state import AssetLedger


def _default_config() -> ExchangeConfig:
    return ExchangeConfig(
        pool=PoolConfig(asset_a="USDC", asset_b="WETH", fee_bps=25),
        farm=FarmConfig(reward_asset="YLD", stake_asset="pool_shares", reward_rate=100, controller="treasury"),
    )


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--config", type=Path, default=None, help="YAML config (defaults to a USDC/WETH pool)")
    ap.add_argument("--seed", type=int, default=1_000_000, help="initial deposit of each asset")
    ap.add_argument("--swap", type=int, default=100_000, help="asset A swapped into the pool")
    ap.add_argument("--seconds", type=int, default=3600, help="time staked before claiming")
    ap.add_argument("--reward-budget", type=int, default=10_000_000, help="reward asset minted to the farm")
    args = ap.parse_args(argv)

    config = load_config(args.config) if args.config else _default_config()
    configure_logging(config.log_level)
    if config.pool is None or config.farm is None:
        print("[demo] FAIL: config needs both a pool and a farm section")
        return 2

    ledger = AssetLedger()
    clock = ManualClock(start=1_700_000_000)
    pool, farm = build_exchange(config, ledger, clock)
    assert pool is not None and farm is not None

    lp, trader = "alice", "bob"
    ledger.mint(lp, pool.asset_a, args.seed)
    ledger.mint(lp, pool.asset_b, args.seed)
    ledger.mint(trader, pool.asset_a, args.swap)
    ledger.mint("farm", farm.reward_asset, args.reward_budget)

    try:
        shares = pool.add_liquidity(lp, args.seed, args.seed)
        print(f"[demo] {lp} seeded pool: shares={shares} reserves={pool.reserves}")

        quote = pool.get_quote(pool.asset_a, args.swap)
        out = pool.swap(trader, pool.asset_a, args.swap, min_amount_out=quote)
        print(f"[demo] {trader} swapped {args.swap} {pool.asset_a} -> {out} {pool.asset_b} (quote={quote})")
        print(f"[demo] reserves={pool.reserves} k={pool.k}")

        farm.stake(lp, shares)
        print(f"[demo] {lp} staked {shares} shares at t={clock.now()}")
        clock.advance(args.seconds)
        print(f"[demo] after {args.seconds}s earned={farm.earned(lp)}")

        unstaked, claimed = farm.exit(lp)
        print(f"[demo] {lp} exited: unstaked={unstaked} claimed={claimed} {farm.reward_asset}")

        amount_a, amount_b = pool.remove_liquidity(lp, shares)
        print(f"[demo] {lp} withdrew ({amount_a}, {amount_b}) for {shares} shares")
    except LedgerError as exc:
        print(f"[demo] FAIL ({exc.code}): {exc}")
        return 1

    print(f"[demo] pool commitment={pool_snapshot(pool).commitment_hex()}")
    print(f"[demo] farm commitment={farm_snapshot(farm).commitment_hex()}")
    print("[demo] OK")
    return 0


if __name__ == "__main__":
    sys.exit(main())
