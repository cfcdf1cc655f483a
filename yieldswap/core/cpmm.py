"""
Constant Product Market Maker (CPMM) pricing and share arithmetic.

This module holds the pure formulas behind the pool engine. Rounding is
part of the contract: every division floors, which favours the pool over
the caller by at most one unit per operation.

Algorithm Design:
- Type: Integer Arithmetic / Deterministic Floor Rounding
- Time Complexity: O(1) per operation
- Space Complexity: O(1) auxiliary
- Invariant: After each swap, x' * y' >= x * y (strictly greater when fee > 0)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..state.balances import Amount
from .errors import InsufficientLiquidityMinted, InsufficientOutput, InvalidInput
from .math import BPS_DENOM, bps_of, isqrt_floor, mul_div

# Fee charged on swap input, in basis points (0.25%).
DEFAULT_FEE_BPS = 25


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    fee: int
    net_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def validate_fee_bps(fee_bps: int) -> int:
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise InvalidInput("fee_bps must be an int")
    if not (0 <= fee_bps <= BPS_DENOM):
        raise InvalidInput(f"fee_bps must be in [0, {BPS_DENOM}]: {fee_bps}")
    return fee_bps


def compute_fee(amount_in: Amount, fee_bps: int) -> Amount:
    """
    Swap fee (floor rounding).

        fee = floor(amount_in * fee_bps / 10_000)
    """
    if amount_in < 0:
        raise InvalidInput(f"amount_in must be non-negative: {amount_in}")
    return bps_of(amount_in, fee_bps)


def swap_exact_in(
    reserve_in: Amount,
    reserve_out: Amount,
    amount_in: Amount,
    fee_bps: int,
) -> SwapQuote:
    """
    Compute output amount and post-swap reserves for an exact-in swap.

    This implements the CPMM formula:
        fee = floor(amount_in * fee_bps / 10_000)
        net_in = amount_in - fee
        amount_out = floor(net_in * reserve_out / (reserve_in + net_in))

    Post-swap reserves:
        new_reserve_in = reserve_in + amount_in  (fee stays in pool)
        new_reserve_out = reserve_out - amount_out

    Raises:
        InvalidInput: on negative reserves or non-positive amount_in
        InsufficientOutput: if the swap would output nothing
    """
    if reserve_in < 0 or reserve_out < 0:
        raise InvalidInput(f"Reserves must be non-negative: ({reserve_in}, {reserve_out})")
    if amount_in <= 0:
        raise InvalidInput(f"amount_in must be positive: {amount_in}")

    fee = compute_fee(amount_in, fee_bps)
    net_in = amount_in - fee
    denominator = reserve_in + net_in
    if denominator == 0:
        raise InsufficientOutput("swap against an empty pool")
    amount_out = mul_div(net_in, reserve_out, denominator)
    if amount_out == 0:
        raise InsufficientOutput(f"swap of {amount_in} outputs zero")

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise AssertionError(f"Invariant violation: new_k ({k_after}) < old_k ({k_before})")

    return SwapQuote(
        amount_in=amount_in,
        fee=fee,
        net_in=net_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )


def compute_share_mint(
    reserve_a: Amount,
    reserve_b: Amount,
    amount_a: Amount,
    amount_b: Amount,
    total_shares: Amount,
) -> Amount:
    """
    Compute pool shares to mint for a liquidity deposit.

    For first deposit (total_shares == 0):
        shares = floor(sqrt(amount_a * amount_b))

    For subsequent deposits:
        shares = min(floor(amount_a * total_shares / reserve_a),
                     floor(amount_b * total_shares / reserve_b))

    The surplus of whichever asset exceeds the pool ratio stays in the pool.

    Raises:
        InvalidInput: on non-positive deposits
        InsufficientLiquidityMinted: if no shares would be minted
    """
    if amount_a <= 0 or amount_b <= 0:
        raise InvalidInput(f"Deposit amounts must be positive: ({amount_a}, {amount_b})")
    if total_shares < 0:
        raise InvalidInput(f"total_shares must be non-negative: {total_shares}")

    if total_shares == 0:
        shares = isqrt_floor(amount_a * amount_b)
    else:
        if reserve_a == 0 or reserve_b == 0:
            raise InsufficientLiquidityMinted("pool has shares but an empty reserve")
        shares = min(
            mul_div(amount_a, total_shares, reserve_a),
            mul_div(amount_b, total_shares, reserve_b),
        )

    if shares <= 0:
        raise InsufficientLiquidityMinted(
            f"deposit ({amount_a}, {amount_b}) mints no shares"
        )
    return shares


def compute_share_burn(
    shares: Amount,
    reserve_a: Amount,
    reserve_b: Amount,
    total_shares: Amount,
) -> Tuple[Amount, Amount]:
    """
    Compute asset amounts returned for burning pool shares.

    Formula:
        amount_a = floor(shares * reserve_a / total_shares)
        amount_b = floor(shares * reserve_b / total_shares)

    Raises:
        InvalidInput: on non-positive shares or shares above supply
        InsufficientOutput: if either amount rounds to zero
    """
    if shares <= 0:
        raise InvalidInput(f"shares must be positive: {shares}")
    if shares > total_shares:
        raise InvalidInput(f"Cannot burn more shares than supply: {shares} > {total_shares}")

    amount_a = mul_div(shares, reserve_a, total_shares)
    amount_b = mul_div(shares, reserve_b, total_shares)
    if amount_a == 0 or amount_b == 0:
        raise InsufficientOutput(
            f"burning {shares} shares returns ({amount_a}, {amount_b})"
        )
    return amount_a, amount_b
