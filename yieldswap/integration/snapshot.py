"""
Engine ledger snapshots.

A snapshot is a plain dict of ints, strings, lists and dicts. Its encoding is
compact JSON with sorted keys and ASCII escapes, so two equal ledgers always
produce the same bytes. The commitment hashes `<label>@v<version>\n` followed
by that encoding.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict

from ..core.farm import RewardEngine
from ..core.pool import PoolEngine


SNAPSHOT_VERSION = 1


def _check_encodable(value: Any, path: str = "$") -> None:
    # bool is an int subclass but has no place in a ledger.
    if isinstance(value, bool) or not isinstance(value, (int, str, list, dict)):
        raise TypeError(f"{path}: cannot encode {type(value).__name__} in a snapshot")
    if isinstance(value, list):
        for i, item in enumerate(value):
            _check_encodable(item, f"{path}[{i}]")
    elif isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"{path}: snapshot keys must be str, got {type(k).__name__}")
            _check_encodable(v, f"{path}.{k}")


def encode_snapshot_data(data: Dict[str, Any]) -> bytes:
    _check_encodable(data)
    return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("ascii")


@dataclass(frozen=True)
class Snapshot:
    """
    Versioned snapshot of one engine's ledger.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    label: str
    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return encode_snapshot_data(self.data)

    def commitment_bytes(self) -> bytes:
        header = f"{self.label}@v{self.version}\n".encode("ascii")
        return hashlib.sha256(header + self.canonical_bytes()).digest()

    def commitment_hex(self) -> str:
        return "0x" + self.commitment_bytes().hex()


def _require_version(version: int) -> int:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return version


def pool_snapshot(pool: PoolEngine, *, version: int = SNAPSHOT_VERSION) -> Snapshot:
    _require_version(version)
    reserve_a, reserve_b = pool.reserves

    share_entries = [
        {"account": account, "shares": int(amount)}
        for account, amount in pool.share_balances().items()
    ]
    share_entries.sort(key=lambda e: e["account"])

    data = {
        "version": version,
        "asset_a": pool.asset_a,
        "asset_b": pool.asset_b,
        "fee_bps": int(pool.fee_bps),
        "reserve_a": int(reserve_a),
        "reserve_b": int(reserve_b),
        "total_shares": int(pool.total_shares),
        "shares": share_entries,
    }
    return Snapshot(label="pool_snapshot", version=version, data=data)


def farm_snapshot(farm: RewardEngine, *, version: int = SNAPSHOT_VERSION) -> Snapshot:
    _require_version(version)

    stake_entries = []
    for account in farm.accounts():
        stake_entries.append(
            {
                "account": account,
                "staked": int(farm.staked_of(account)),
                "reward_per_token_paid": int(farm.reward_per_token_paid_of(account)),
                "pending_rewards": int(farm.pending_rewards_of(account)),
            }
        )

    data = {
        "version": version,
        "reward_asset": farm.reward_asset,
        "stake_asset": farm.stake_asset,
        "controller": farm.controller,
        "reward_rate": int(farm.reward_rate),
        "reward_per_token_stored": int(farm.reward_per_token_stored),
        "last_update_time": int(farm.last_update_time),
        "total_staked": int(farm.total_staked),
        "stakes": stake_entries,
    }
    return Snapshot(label="farm_snapshot", version=version, data=data)
