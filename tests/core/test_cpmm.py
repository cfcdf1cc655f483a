# [TESTER] v1

from __future__ import annotations

import pytest

from yieldswap.core.cpmm import (
    DEFAULT_FEE_BPS,
    compute_fee,
    compute_share_burn,
    compute_share_mint,
    swap_exact_in,
    validate_fee_bps,
)
from yieldswap.core.errors import InsufficientLiquidityMinted, InsufficientOutput, InvalidInput


def test_swap_exact_in_charges_floor_fee_and_keeps_it_in_reserve() -> None:
    q = swap_exact_in(reserve_in=1000, reserve_out=1000, amount_in=100_000, fee_bps=DEFAULT_FEE_BPS)

    assert q.fee == 250
    assert q.net_in == 99_750
    assert q.amount_out == 990
    # The full amount_in (fee included) lands in the input reserve.
    assert q.new_reserve_in == 101_000
    assert q.new_reserve_out == 10
    assert q.k_after >= q.k_before


def test_compute_fee_rounds_down() -> None:
    assert compute_fee(399, 25) == 0
    assert compute_fee(400, 25) == 1
    assert compute_fee(10_000, 25) == 25
    assert compute_fee(123, 0) == 0


def test_zero_fee_swap_still_grows_k_by_rounding() -> None:
    q = swap_exact_in(reserve_in=7, reserve_out=11, amount_in=3, fee_bps=0)
    assert q.fee == 0
    assert q.amount_out == (3 * 11) // (7 + 3)
    assert q.k_after >= q.k_before


def test_swap_that_outputs_nothing_is_rejected() -> None:
    with pytest.raises(InsufficientOutput):
        swap_exact_in(reserve_in=10**9, reserve_out=10, amount_in=1, fee_bps=0)


def test_full_fee_swap_outputs_nothing() -> None:
    with pytest.raises(InsufficientOutput):
        swap_exact_in(reserve_in=1000, reserve_out=1000, amount_in=500, fee_bps=10_000)


def test_swap_against_empty_pool_is_rejected() -> None:
    with pytest.raises(InsufficientOutput):
        swap_exact_in(reserve_in=0, reserve_out=0, amount_in=100, fee_bps=25)


def test_swap_rejects_non_positive_amount() -> None:
    with pytest.raises(InvalidInput):
        swap_exact_in(reserve_in=1000, reserve_out=1000, amount_in=0, fee_bps=25)


@pytest.mark.parametrize("fee_bps", [-1, 10_001, True, "25"])
def test_validate_fee_bps_rejects_out_of_range(fee_bps: object) -> None:
    with pytest.raises(InvalidInput):
        validate_fee_bps(fee_bps)  # type: ignore[arg-type]


def test_first_deposit_uses_integer_isqrt() -> None:
    # Values where a float sqrt would lose precision.
    n = (1 << 70) + 12345
    assert compute_share_mint(0, 0, n, n, 0) == n
    assert compute_share_mint(0, 0, 1000, 4000, 0) == 2000
    assert compute_share_mint(0, 0, 2, 3, 0) == 2


def test_subsequent_deposit_mints_the_smaller_proportional_amount() -> None:
    # 100 of A is 10% of reserve A, 1000 of B is 25% of reserve B: the A side wins.
    shares = compute_share_mint(reserve_a=1000, reserve_b=4000, amount_a=100, amount_b=1000, total_shares=2000)
    assert shares == 200


def test_dust_deposit_mints_nothing() -> None:
    with pytest.raises(InsufficientLiquidityMinted):
        compute_share_mint(reserve_a=10**6, reserve_b=10**6, amount_a=1, amount_b=1, total_shares=1000)


def test_insufficient_liquidity_minted_is_an_insufficient_output() -> None:
    assert issubclass(InsufficientLiquidityMinted, InsufficientOutput)


def test_share_burn_rounds_down() -> None:
    assert compute_share_burn(shares=3, reserve_a=10, reserve_b=10, total_shares=7) == (4, 4)


def test_share_burn_of_entire_supply_returns_entire_reserves() -> None:
    assert compute_share_burn(shares=2000, reserve_a=1000, reserve_b=4000, total_shares=2000) == (1000, 4000)


def test_share_burn_rejects_a_zero_side() -> None:
    with pytest.raises(InsufficientOutput):
        compute_share_burn(shares=1, reserve_a=1000, reserve_b=1, total_shares=1000)


def test_share_burn_rejects_more_than_supply() -> None:
    with pytest.raises(InvalidInput):
        compute_share_burn(shares=11, reserve_a=100, reserve_b=100, total_shares=10)
