"""
Pool engine: a two-asset constant-product market maker issuing pool shares.

The engine is the imperative shell around the pure formulas in `cpmm.py`:
- reserves live in an immutable `PoolState` swapped on every committed call,
- pool shares live in an `AccountTable`,
- assets move only through the two `AssetTransfer` collaborators,
- every public mutation runs under `engine_call` (non-reentrant, all-or-nothing).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..state.accounts import AccountTable
from ..state.balances import Account, Amount, AssetId
from .cpmm import (
    DEFAULT_FEE_BPS,
    SwapQuote,
    compute_share_burn,
    compute_share_mint,
    swap_exact_in,
    validate_fee_bps,
)
from .errors import InsufficientBalance, InsufficientOutput, InvalidAsset, InvalidInput
from .events import EventLog, LiquidityAdded, LiquidityRemoved, SharesTransferred, Swap
from .execution import engine_call
from .guards import NonReentrant, require_account, require_token
from .interfaces import AssetTransfer
from .math import require_non_negative, require_positive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolState:
    """Custodied reserves of the two pool assets."""

    reserve_a: int = 0
    reserve_b: int = 0

    def __post_init__(self) -> None:
        if self.reserve_a < 0 or self.reserve_b < 0:
            raise ValueError(f"Reserves must be non-negative: ({self.reserve_a}, {self.reserve_b})")


class PoolEngine:
    """
    Constant-product pool over exactly one pair of assets.

    Caller identity is passed explicitly to every mutating operation.
    """

    def __init__(
        self,
        token_a: AssetTransfer,
        token_b: AssetTransfer,
        *,
        fee_bps: int = DEFAULT_FEE_BPS,
        name: str = "pool",
        event_log: Optional[EventLog] = None,
    ) -> None:
        token_a = require_token("token_a", token_a)
        token_b = require_token("token_b", token_b)
        if token_a.asset_id == token_b.asset_id:
            raise InvalidInput(f"pool assets must be distinct: {token_a.asset_id!r}")

        self._token_a = token_a
        self._token_b = token_b
        self._fee_bps = validate_fee_bps(fee_bps)
        self._state = PoolState()
        self._shares = AccountTable()
        self._guard = NonReentrant(name)
        self.events = event_log if event_log is not None else EventLog()

    # -- Views -------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._guard.name

    @property
    def asset_a(self) -> AssetId:
        return self._token_a.asset_id

    @property
    def asset_b(self) -> AssetId:
        return self._token_b.asset_id

    @property
    def fee_bps(self) -> int:
        return self._fee_bps

    @property
    def state(self) -> PoolState:
        return self._state

    @property
    def reserves(self) -> Tuple[Amount, Amount]:
        return self._state.reserve_a, self._state.reserve_b

    @property
    def total_shares(self) -> Amount:
        return self._shares.total()

    @property
    def k(self) -> int:
        return self._state.reserve_a * self._state.reserve_b

    def share_balance(self, account: Account) -> Amount:
        return self._shares.get(account)

    def share_balances(self) -> Dict[Account, Amount]:
        return self._shares.as_dict()

    def get_quote(self, input_asset: AssetId, amount_in: Amount) -> Amount:
        """Output `swap` would deliver for `amount_in` of `input_asset` right now."""
        amount_in = require_positive("amount_in", amount_in)
        return self._price(input_asset, amount_in)[2].amount_out

    def quote_add_liquidity(self, amount_a: Amount, amount_b: Amount) -> Amount:
        """Shares `add_liquidity` would mint right now."""
        amount_a = require_positive("amount_a", amount_a)
        amount_b = require_positive("amount_b", amount_b)
        return compute_share_mint(
            self._state.reserve_a, self._state.reserve_b, amount_a, amount_b, self.total_shares
        )

    def quote_remove_liquidity(self, shares: Amount) -> Tuple[Amount, Amount]:
        """Amounts `remove_liquidity` would return right now."""
        shares = require_positive("shares", shares)
        return compute_share_burn(
            shares, self._state.reserve_a, self._state.reserve_b, self.total_shares
        )

    # -- Mutations ---------------------------------------------------------

    def add_liquidity(
        self,
        caller: Account,
        amount_a: Amount,
        amount_b: Amount,
        *,
        min_shares: Amount = 0,
    ) -> Amount:
        """
        Deposit both assets and mint pool shares to `caller`.

        Raises:
            InvalidInput: non-positive amounts
            InsufficientLiquidityMinted: the deposit mints zero shares
            InsufficientOutput: fewer shares than `min_shares`
            TransferFailed: either pull fails (earlier pulls are refunded)
        """
        amount_a = require_positive("amount_a", amount_a)
        amount_b = require_positive("amount_b", amount_b)
        min_shares = require_non_negative("min_shares", min_shares)

        with self._call(caller) as frame:
            state = self._state
            shares = compute_share_mint(
                state.reserve_a, state.reserve_b, amount_a, amount_b, self.total_shares
            )
            if shares < min_shares:
                raise InsufficientOutput(f"minted {shares} shares < min_shares {min_shares}")

            frame.pull(self._token_a, amount_a)
            frame.pull(self._token_b, amount_b)

            frame.checkpoint(self, "_state")
            self._state = PoolState(
                reserve_a=state.reserve_a + amount_a,
                reserve_b=state.reserve_b + amount_b,
            )
            frame.adjust(self._shares, caller, shares)
            frame.emit(LiquidityAdded(caller, amount_a, amount_b, shares))

        self._log_commit("add_liquidity", caller, amount_a=amount_a, amount_b=amount_b, shares=shares)
        return shares

    def remove_liquidity(
        self,
        caller: Account,
        shares: Amount,
        *,
        min_amount_a: Amount = 0,
        min_amount_b: Amount = 0,
    ) -> Tuple[Amount, Amount]:
        """
        Burn `shares` and return the proportional reserves to `caller`.

        Shares and reserves are debited before the assets are pushed.

        Raises:
            InvalidInput: non-positive shares
            InsufficientBalance: caller holds fewer than `shares`
            InsufficientOutput: either amount rounds to zero or is below its minimum
            TransferFailed: either push fails (the whole call is reverted)
        """
        shares = require_positive("shares", shares)
        min_amount_a = require_non_negative("min_amount_a", min_amount_a)
        min_amount_b = require_non_negative("min_amount_b", min_amount_b)

        with self._call(caller) as frame:
            held = self._shares.get(caller)
            if held < shares:
                raise InsufficientBalance(f"{caller!r} holds {held} shares, cannot burn {shares}")

            state = self._state
            amount_a, amount_b = compute_share_burn(
                shares, state.reserve_a, state.reserve_b, self.total_shares
            )
            if amount_a < min_amount_a:
                raise InsufficientOutput(f"amount_a ({amount_a}) < min_amount_a ({min_amount_a})")
            if amount_b < min_amount_b:
                raise InsufficientOutput(f"amount_b ({amount_b}) < min_amount_b ({min_amount_b})")

            frame.adjust(self._shares, caller, -shares)
            frame.checkpoint(self, "_state")
            self._state = PoolState(
                reserve_a=state.reserve_a - amount_a,
                reserve_b=state.reserve_b - amount_b,
            )

            frame.push(self._token_a, amount_a)
            frame.push(self._token_b, amount_b)
            frame.emit(LiquidityRemoved(caller, amount_a, amount_b, shares))

        self._log_commit("remove_liquidity", caller, amount_a=amount_a, amount_b=amount_b, shares=shares)
        return amount_a, amount_b

    def swap(
        self,
        caller: Account,
        input_asset: AssetId,
        amount_in: Amount,
        *,
        min_amount_out: Amount = 0,
    ) -> Amount:
        """
        Exact-in swap of `amount_in` of `input_asset` for the other pool asset.

        The fee stays in the input reserve; there is no separate fee ledger.

        Raises:
            InvalidInput / InvalidAsset: bad amount or unknown asset
            InsufficientOutput: zero output or below `min_amount_out`
            TransferFailed: pull or push fails (the whole call is reverted)
        """
        amount_in = require_positive("amount_in", amount_in)
        min_amount_out = require_non_negative("min_amount_out", min_amount_out)

        with self._call(caller) as frame:
            token_in, token_out, quote = self._price(input_asset, amount_in)
            if quote.amount_out < min_amount_out:
                raise InsufficientOutput(
                    f"amount_out ({quote.amount_out}) < min_amount_out ({min_amount_out})"
                )

            frame.pull(token_in, amount_in)

            frame.checkpoint(self, "_state")
            if token_in is self._token_a:
                self._state = PoolState(reserve_a=quote.new_reserve_in, reserve_b=quote.new_reserve_out)
            else:
                self._state = PoolState(reserve_a=quote.new_reserve_out, reserve_b=quote.new_reserve_in)

            frame.push(token_out, quote.amount_out)
            frame.emit(Swap(caller, input_asset, amount_in, quote.amount_out))

        self._log_commit(
            "swap", caller, input_asset=input_asset, amount_in=amount_in, amount_out=quote.amount_out, fee=quote.fee
        )
        return quote.amount_out

    def transfer_shares(self, caller: Account, recipient: Account, amount: Amount) -> None:
        """Move `amount` pool shares from `caller` to `recipient`."""
        recipient = require_account("recipient", recipient)
        amount = require_positive("amount", amount)

        with self._call(caller) as frame:
            frame.adjust(self._shares, caller, -amount)
            frame.adjust(self._shares, recipient, amount)
            frame.emit(SharesTransferred(caller, recipient, amount))

        self._log_commit("transfer_shares", caller, recipient=recipient, shares=amount)

    # -- Internals ---------------------------------------------------------

    def _call(self, caller: Account):
        caller = require_account("caller", caller)
        return engine_call(self._guard, caller, self.events.extend)

    def _price(self, input_asset: AssetId, amount_in: Amount) -> Tuple[AssetTransfer, AssetTransfer, SwapQuote]:
        state = self._state
        if input_asset == self._token_a.asset_id:
            token_in, token_out = self._token_a, self._token_b
            reserve_in, reserve_out = state.reserve_a, state.reserve_b
        elif input_asset == self._token_b.asset_id:
            token_in, token_out = self._token_b, self._token_a
            reserve_in, reserve_out = state.reserve_b, state.reserve_a
        else:
            raise InvalidAsset(f"{input_asset!r} is not traded by pool {self.name!r}")
        return token_in, token_out, swap_exact_in(reserve_in, reserve_out, amount_in, self._fee_bps)

    def _log_commit(self, op: str, caller: Account, **fields: object) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug(
            "%s.%s caller=%r %s reserves=(%d, %d) total_shares=%d",
            self.name,
            op,
            caller,
            " ".join(f"{k}={v}" for k, v in fields.items()),
            self._state.reserve_a,
            self._state.reserve_b,
            self.total_shares,
        )

    def __repr__(self) -> str:
        return (
            f"PoolEngine({self.asset_a!r}/{self.asset_b!r}, reserves={self.reserves}, "
            f"total_shares={self.total_shares}, fee_bps={self._fee_bps})"
        )
