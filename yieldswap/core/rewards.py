"""
Reward-per-token accumulator kernel.

Pure functions over an immutable `AccumulatorState`; the farm engine owns the
per-account tables and calls these to settle time and accrue balances.

The accumulator integrates `reward_rate / total_staked` over time, scaled by
`REWARD_SCALE`. An account's earnings since its last checkpoint are
`staked * (acc - paid) / REWARD_SCALE`, so one account settles in O(1)
regardless of how many other accounts moved in between.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .math import REWARD_SCALE, mul_div


@dataclass(frozen=True)
class AccumulatorState:
    """Pool-wide reward accounting."""

    reward_rate: int
    reward_per_token_stored: int
    last_update_time: int
    total_staked: int

    def __post_init__(self) -> None:
        if self.reward_rate < 0:
            raise ValueError("reward_rate must be non-negative")
        if self.reward_per_token_stored < 0:
            raise ValueError("reward_per_token_stored must be non-negative")
        if self.total_staked < 0:
            raise ValueError("total_staked must be non-negative")


def init_accumulator(reward_rate: int, now: int) -> AccumulatorState:
    return AccumulatorState(
        reward_rate=reward_rate,
        reward_per_token_stored=0,
        last_update_time=now,
        total_staked=0,
    )


def reward_per_token(state: AccumulatorState, now: int) -> int:
    """
    Accumulator value as of `now`, without committing it.

    While nothing is staked the accumulator is frozen: elapsed time with zero
    stake earns nobody anything.
    """
    if now < state.last_update_time:
        raise ValueError(f"time went backwards: {now} < {state.last_update_time}")
    if state.total_staked == 0:
        return state.reward_per_token_stored
    elapsed = now - state.last_update_time
    return state.reward_per_token_stored + mul_div(
        state.reward_rate * elapsed, REWARD_SCALE, state.total_staked
    )


def settle(state: AccumulatorState, now: int) -> AccumulatorState:
    """Advance the accumulator to `now`."""
    return replace(
        state,
        reward_per_token_stored=reward_per_token(state, now),
        last_update_time=now,
    )


def earned_since(staked: int, acc: int, paid: int) -> int:
    """floor(staked * (acc - paid) / REWARD_SCALE)."""
    if paid > acc:
        raise ValueError(f"checkpoint {paid} is ahead of accumulator {acc}")
    return mul_div(staked, acc - paid, REWARD_SCALE)
