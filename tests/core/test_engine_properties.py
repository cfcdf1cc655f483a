"""Property tests for the pool and reward engines.

Hypothesis drives random operation sequences and checks the conservation laws
after every step, plus quote/execution parity for swaps and equal rewards
for equal stakes held over the same interval.
"""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from yieldswap.core.cpmm import compute_share_burn, compute_share_mint, swap_exact_in
from yieldswap.core.errors import InsufficientOutput, LedgerError
from yieldswap.core.farm import RewardEngine
from yieldswap.core.invariants import check_farm, check_pool
from yieldswap.core.pool import PoolEngine
from yieldswap.integration.clock import ManualClock
from yieldswap.integration.transfers import LedgerTransfer
from yieldswap.state.balances import AssetLedger

ACCOUNTS = ("alice", "bob", "carol")

amounts = st.integers(min_value=1, max_value=10**9)
pool_ops = st.lists(
    st.tuples(
        st.sampled_from(["add", "remove", "swap_a", "swap_b", "transfer"]),
        st.sampled_from(ACCOUNTS),
        amounts,
        amounts,
    ),
    max_size=40,
)


@settings(max_examples=300, deadline=None)
@given(
    reserve_in=st.integers(min_value=1, max_value=10**15),
    reserve_out=st.integers(min_value=1, max_value=10**15),
    amount_in=st.integers(min_value=1, max_value=10**15),
    fee_bps=st.integers(min_value=0, max_value=1000),
)
def test_swap_never_decreases_k_or_drains_the_pool(reserve_in, reserve_out, amount_in, fee_bps) -> None:
    try:
        q = swap_exact_in(reserve_in, reserve_out, amount_in, fee_bps)
    except InsufficientOutput:
        return
    assert q.k_after >= q.k_before
    assert 0 < q.amount_out < reserve_out
    assert q.new_reserve_in == reserve_in + amount_in


@settings(max_examples=300, deadline=None)
@given(ra=amounts, rb=amounts, a=amounts, b=amounts)
def test_burning_fresh_shares_never_returns_more_than_deposited(ra, rb, a, b) -> None:
    total = compute_share_mint(0, 0, ra, rb, 0)
    try:
        minted = compute_share_mint(ra, rb, a, b, total)
        out_a, out_b = compute_share_burn(minted, ra + a, rb + b, total + minted)
    except InsufficientOutput:
        return
    assert out_a <= a
    assert out_b <= b


def _run_pool_op(pool: PoolEngine, ledger: AssetLedger, op: str, who: str, x: int, y: int) -> None:
    if op == "add":
        ledger.mint(who, pool.asset_a, x)
        ledger.mint(who, pool.asset_b, y)
        pool.add_liquidity(who, x, y)
    elif op == "remove":
        held = pool.share_balance(who)
        if held:
            pool.remove_liquidity(who, 1 + x % held)
    elif op == "transfer":
        held = pool.share_balance(who)
        if held:
            pool.transfer_shares(who, ACCOUNTS[y % len(ACCOUNTS)], 1 + x % held)
    else:
        asset = pool.asset_a if op == "swap_a" else pool.asset_b
        ledger.mint(who, asset, x)
        quoted = pool.get_quote(asset, x)
        k_before = pool.k
        assert pool.swap(who, asset, x) == quoted
        assert pool.k >= k_before


@settings(max_examples=150, deadline=None)
@given(ops=pool_ops, fee_bps=st.integers(min_value=0, max_value=100))
def test_pool_invariants_hold_over_random_sequences(ops, fee_bps) -> None:
    ledger = AssetLedger()
    pool = PoolEngine(LedgerTransfer(ledger, "A", "pool"), LedgerTransfer(ledger, "B", "pool"), fee_bps=fee_bps)

    for op, who, x, y in ops:
        reserves, shares = pool.reserves, pool.share_balances()
        try:
            _run_pool_op(pool, ledger, op, who, x, y)
        except LedgerError:
            # A rejected call leaves the ledger exactly as it was.
            assert pool.reserves == reserves
            assert pool.share_balances() == shares
        assert check_pool(pool) == []
        # Custody always matches the recorded reserves.
        assert (ledger.get("pool", "A"), ledger.get("pool", "B")) == pool.reserves


@settings(max_examples=300, deadline=None)
@given(
    rate=st.integers(min_value=0, max_value=10**6),
    a=amounts,
    b=amounts,
    d1=st.integers(min_value=0, max_value=10**6),
    d2=st.integers(min_value=0, max_value=10**6),
)
def test_farm_never_emits_more_than_rate_times_time(rate, a, b, d1, d2) -> None:
    ledger = AssetLedger()
    clock = ManualClock(0)
    farm = RewardEngine(
        LedgerTransfer(ledger, "R", "farm"),
        LedgerTransfer(ledger, "S", "farm"),
        reward_rate=rate,
        controller="admin",
        clock=clock,
    )
    ledger.mint("alice", "S", a)
    ledger.mint("bob", "S", b)

    farm.stake("alice", a)
    clock.advance(d1)
    farm.stake("bob", b)
    clock.advance(d2)

    emitted = rate * (d1 + d2)
    total = farm.earned("alice") + farm.earned("bob")
    assert total <= emitted
    # Floor rounding loses at most a few units.
    assert total >= emitted - 4
    assert check_farm(farm) == []


farm_ops = st.lists(
    st.tuples(
        st.sampled_from(["advance", "carol_stake", "carol_unstake", "touch"]),
        st.integers(min_value=0, max_value=10**5),
    ),
    max_size=30,
)


@settings(max_examples=200, deadline=None)
@given(
    rate=st.integers(min_value=0, max_value=10**6),
    stake=amounts,
    alice_first=st.booleans(),
    between=st.lists(st.integers(min_value=1, max_value=10**6), max_size=3),
    ops=farm_ops,
)
def test_equal_stakes_over_equal_time_earn_equal_rewards(rate, stake, alice_first, between, ops) -> None:
    ledger = AssetLedger()
    clock = ManualClock(0)
    farm = RewardEngine(
        LedgerTransfer(ledger, "R", "farm"),
        LedgerTransfer(ledger, "S", "farm"),
        reward_rate=rate,
        controller="admin",
        clock=clock,
    )
    ledger.mint("farm", "R", 10**18)
    for who in ("alice", "bob"):
        ledger.mint(who, "S", stake)
    ledger.mint("carol", "S", 10**12)

    first, second = ("alice", "bob") if alice_first else ("bob", "alice")
    farm.stake(first, stake)
    for n in between:
        farm.stake("carol", n)
    farm.stake(second, stake)

    claimed = {"alice": 0, "bob": 0}
    touches = 0
    for kind, v in ops:
        if kind == "advance":
            clock.advance(v)
        elif kind == "carol_stake":
            farm.stake("carol", 1 + v)
        elif kind == "carol_unstake":
            held = farm.staked_of("carol")
            if held:
                farm.unstake("carol", 1 + v % held)
        else:
            who = ("alice", "bob")[v % 2]
            if farm.earned(who):
                claimed[who] += farm.claim_rewards(who)
                touches += 1

    alice = claimed["alice"] + farm.earned("alice")
    bob = claimed["bob"] + farm.earned("bob")
    # Each separate settlement of one account may floor away one unit.
    assert abs(alice - bob) <= touches + 1
    if touches == 0:
        assert alice == bob
    assert check_farm(farm) == []
