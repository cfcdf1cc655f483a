# [TESTER] v1

from __future__ import annotations

import pytest

from yieldswap.core.farm import RewardEngine
from yieldswap.core.pool import PoolEngine
from yieldswap.integration.clock import ManualClock
from yieldswap.integration.snapshot import Snapshot, encode_snapshot_data, farm_snapshot, pool_snapshot
from yieldswap.integration.transfers import LedgerTransfer
from yieldswap.state.balances import AssetLedger


def _pool_with(depositors):
    ledger = AssetLedger()
    pool = PoolEngine(LedgerTransfer(ledger, "A", "pool"), LedgerTransfer(ledger, "B", "pool"))
    for who in depositors:
        ledger.mint(who, "A", 1000)
        ledger.mint(who, "B", 1000)
        pool.add_liquidity(who, 1000, 1000)
    return pool


def test_pool_snapshot_ignores_insertion_order() -> None:
    s1 = pool_snapshot(_pool_with(["alice", "bob"]))
    s2 = pool_snapshot(_pool_with(["bob", "alice"]))
    assert s1.canonical_bytes() == s2.canonical_bytes()
    assert s1.commitment_hex() == s2.commitment_hex()
    assert s1.commitment_hex() == "0x" + s1.commitment_bytes().hex()
    assert [e["account"] for e in s1.data["shares"]] == ["alice", "bob"]


def test_pool_commitment_tracks_every_change() -> None:
    pool = _pool_with(["alice"])
    before = pool_snapshot(pool).commitment_hex()
    pool.transfer_shares("alice", "bob", 1)
    assert pool_snapshot(pool).commitment_hex() != before


def test_farm_snapshot_keeps_accounts_with_pending_rewards() -> None:
    ledger = AssetLedger()
    clock = ManualClock(0)
    farm = RewardEngine(
        LedgerTransfer(ledger, "R", "farm"),
        LedgerTransfer(ledger, "S", "farm"),
        reward_rate=100,
        controller="admin",
        clock=clock,
    )
    ledger.mint("alice", "S", 100)
    farm.stake("alice", 100)
    clock.advance(10)
    farm.unstake("alice", 100)

    snap = farm_snapshot(farm)
    assert snap.label == "farm_snapshot"
    assert snap.data["total_staked"] == 0
    assert snap.data["last_update_time"] == 10
    assert snap.data["stakes"] == [
        {"account": "alice", "staked": 0, "reward_per_token_paid": 10 * 10**18, "pending_rewards": 1000}
    ]


def test_snapshot_version_is_part_of_the_commitment() -> None:
    pool = _pool_with(["alice"])
    assert pool_snapshot(pool, version=1).commitment_hex() != pool_snapshot(pool, version=2).commitment_hex()
    with pytest.raises(ValueError):
        pool_snapshot(pool, version=0)


def test_snapshot_encoding_rules() -> None:
    assert encode_snapshot_data({"b": 1, "a": [2, 3]}) == b'{"a":[2,3],"b":1}'
    assert encode_snapshot_data({"account": "\u00e9"}) == b'{"account":"\\u00e9"}'
    with pytest.raises(TypeError, match=r"\$\.x"):
        encode_snapshot_data({"x": 1.5})
    with pytest.raises(TypeError):
        encode_snapshot_data({"x": [True]})
    with pytest.raises(TypeError):
        encode_snapshot_data({1: "x"})  # type: ignore[dict-item]


def test_label_is_part_of_the_commitment() -> None:
    data = {"total": 1}
    assert Snapshot("pool_snapshot", 1, data).commitment_hex() != Snapshot("farm_snapshot", 1, data).commitment_hex()
