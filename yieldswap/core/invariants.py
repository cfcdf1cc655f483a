"""Invariant checkers for the pool and reward engines.

Each `inv_*` function returns True when the invariant holds. `check_pool()`
and `check_farm()` return the list of violated invariant ids (empty = all
pass); `assert_invariants()` raises `InvariantViolation` instead.

These are ledger-level conservation laws; they never read the clock or the
asset collaborators.
"""

from __future__ import annotations

from typing import Callable, List, Union

from .errors import InvariantViolation
from .farm import RewardEngine
from .pool import PoolEngine


# ---------------------------------------------------------------------------
# Pool
# ---------------------------------------------------------------------------

def inv_pool_reserves_nonneg(p: PoolEngine) -> bool:
    ra, rb = p.reserves
    return ra >= 0 and rb >= 0


def inv_pool_share_conservation(p: PoolEngine) -> bool:
    return sum(p.share_balances().values()) == p.total_shares


def inv_pool_shares_bounded(p: PoolEngine) -> bool:
    total = p.total_shares
    return all(0 <= v <= total for v in p.share_balances().values())


def inv_pool_empty_iff_no_shares(p: PoolEngine) -> bool:
    ra, rb = p.reserves
    if p.total_shares == 0:
        return ra == 0 and rb == 0
    return ra > 0 and rb > 0


# ---------------------------------------------------------------------------
# Farm
# ---------------------------------------------------------------------------

def inv_farm_stake_conservation(f: RewardEngine) -> bool:
    return sum(f.staked_balances().values()) == f.total_staked


def inv_farm_stakes_bounded(f: RewardEngine) -> bool:
    total = f.total_staked
    return all(0 <= v <= total for v in f.staked_balances().values())


def inv_farm_rate_nonneg(f: RewardEngine) -> bool:
    return f.reward_rate >= 0


def inv_farm_checkpoints_not_ahead(f: RewardEngine) -> bool:
    acc = f.reward_per_token_stored
    return all(f.reward_per_token_paid_of(a) <= acc for a in f.accounts())


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

POOL_INVARIANTS: dict[str, Callable[[PoolEngine], bool]] = {
    "inv_pool_reserves_nonneg": inv_pool_reserves_nonneg,
    "inv_pool_share_conservation": inv_pool_share_conservation,
    "inv_pool_shares_bounded": inv_pool_shares_bounded,
    "inv_pool_empty_iff_no_shares": inv_pool_empty_iff_no_shares,
}

FARM_INVARIANTS: dict[str, Callable[[RewardEngine], bool]] = {
    "inv_farm_stake_conservation": inv_farm_stake_conservation,
    "inv_farm_stakes_bounded": inv_farm_stakes_bounded,
    "inv_farm_rate_nonneg": inv_farm_rate_nonneg,
    "inv_farm_checkpoints_not_ahead": inv_farm_checkpoints_not_ahead,
}


def check_pool(pool: PoolEngine) -> List[str]:
    return [name for name, fn in POOL_INVARIANTS.items() if not fn(pool)]


def check_farm(farm: RewardEngine) -> List[str]:
    return [name for name, fn in FARM_INVARIANTS.items() if not fn(farm)]


def assert_invariants(engine: Union[PoolEngine, RewardEngine]) -> None:
    """Raise `InvariantViolation` listing every failed invariant."""
    if isinstance(engine, PoolEngine):
        violations = check_pool(engine)
    elif isinstance(engine, RewardEngine):
        violations = check_farm(engine)
    else:
        raise TypeError(f"unsupported engine type: {type(engine).__name__}")
    if violations:
        raise InvariantViolation(violations)
