"""
Reward engine: stake ledger with continuous reward-per-token accrual.

There is no scheduler. Every mutating call reads the clock once, settles the
accumulator up to that instant and then realizes the acting account's
earnings before touching its stake. Read-only views project the same
arithmetic without committing it.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from ..state.accounts import AccountTable
from ..state.balances import Account, Amount, AssetId
from .errors import InsufficientBalance, InvalidInput, NothingToClaim
from .events import EventLog, RewardClaimed, RewardRateChanged, Staked, Unstaked
from .execution import CallFrame, engine_call
from .guards import NonReentrant, require_account, require_controller, require_token
from .interfaces import AssetTransfer, Clock
from .math import require_int, require_non_negative, require_positive
from .rewards import AccumulatorState, earned_since, init_accumulator, reward_per_token, settle

logger = logging.getLogger(__name__)


class RewardEngine:
    """
    Pays `reward_rate` reward units per second, pro rata to stake.

    `controller` is the only identity allowed to change the rate.
    """

    def __init__(
        self,
        reward_token: AssetTransfer,
        stake_token: AssetTransfer,
        *,
        reward_rate: int,
        controller: Account,
        clock: Clock,
        name: str = "farm",
        event_log: Optional[EventLog] = None,
    ) -> None:
        self._reward_token = require_token("reward_token", reward_token)
        self._stake_token = require_token("stake_token", stake_token)
        if self._reward_token.asset_id == self._stake_token.asset_id:
            # Reward payouts and stakes must never share one custody balance.
            raise InvalidInput(f"reward and stake assets must differ: {self._stake_token.asset_id!r}")
        self._controller = require_account("controller", controller)
        self._clock = clock
        self._guard = NonReentrant(name)

        start = require_int("clock.now()", clock.now())
        if start < 0:
            raise InvalidInput(f"clock.now() must be non-negative: {start}")
        self._acc = init_accumulator(require_non_negative("reward_rate", reward_rate), start)

        self._staked = AccountTable()
        self._paid = AccountTable()
        self._pending = AccountTable()
        self.events = event_log if event_log is not None else EventLog()

    # -- Views -------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._guard.name

    @property
    def reward_asset(self) -> AssetId:
        return self._reward_token.asset_id

    @property
    def stake_asset(self) -> AssetId:
        return self._stake_token.asset_id

    @property
    def controller(self) -> Account:
        return self._controller

    @property
    def state(self) -> AccumulatorState:
        return self._acc

    @property
    def reward_rate(self) -> int:
        return self._acc.reward_rate

    @property
    def total_staked(self) -> Amount:
        return self._acc.total_staked

    @property
    def reward_per_token_stored(self) -> int:
        return self._acc.reward_per_token_stored

    @property
    def last_update_time(self) -> int:
        return self._acc.last_update_time

    def staked_of(self, account: Account) -> Amount:
        return self._staked.get(account)

    def pending_rewards_of(self, account: Account) -> Amount:
        """Settled but unclaimed rewards (excludes accrual since the last touch)."""
        return self._pending.get(account)

    def reward_per_token_paid_of(self, account: Account) -> int:
        return self._paid.get(account)

    def staked_balances(self) -> Dict[Account, Amount]:
        return self._staked.as_dict()

    def accounts(self) -> List[Account]:
        """Every account with a stake, a checkpoint or pending rewards."""
        known = set(self._staked.as_dict()) | set(self._paid.as_dict()) | set(self._pending.as_dict())
        return sorted(known)

    def reward_per_token(self) -> int:
        """Accumulator projected to the current time."""
        return reward_per_token(self._acc, self._now())

    def earned(self, account: Account) -> Amount:
        """Total claimable reward for `account` as of now. Never mutates state."""
        acc = self.reward_per_token()
        return self._pending.get(account) + earned_since(
            self._staked.get(account), acc, self._paid.get(account)
        )

    # -- Mutations ---------------------------------------------------------

    def stake(self, caller: Account, amount: Amount) -> None:
        """Pull `amount` of the stake asset from `caller` and credit its stake."""
        amount = require_positive("amount", amount)

        with self._call(caller) as frame:
            self._settle_and_accrue(frame)
            frame.pull(self._stake_token, amount)
            frame.adjust(self._staked, caller, amount)
            self._acc = replace(self._acc, total_staked=self._acc.total_staked + amount)
            frame.emit(Staked(caller, amount))

        self._log_commit("stake", caller, amount=amount)

    def unstake(self, caller: Account, amount: Amount) -> None:
        """Debit `amount` from `caller`'s stake and push it back."""
        amount = require_positive("amount", amount)

        with self._call(caller) as frame:
            self._require_stake(caller, amount)
            self._settle_and_accrue(frame)
            self._debit_stake(frame, caller, amount)
            frame.push(self._stake_token, amount)
            frame.emit(Unstaked(caller, amount))

        self._log_commit("unstake", caller, amount=amount)

    def claim_rewards(self, caller: Account) -> Amount:
        """Pay out everything `caller` has earned so far."""
        with self._call(caller) as frame:
            self._settle_and_accrue(frame)
            amount = self._pending.get(caller)
            if amount == 0:
                raise NothingToClaim(f"{caller!r} has no rewards to claim")
            self._pay_out(frame, caller, amount)

        self._log_commit("claim_rewards", caller, amount=amount)
        return amount

    def exit(self, caller: Account) -> Tuple[Amount, Amount]:
        """Unstake everything and claim any pending reward in one call."""
        with self._call(caller) as frame:
            staked = self._staked.get(caller)
            if staked == 0:
                raise InsufficientBalance(f"{caller!r} has nothing staked")
            self._settle_and_accrue(frame)
            self._debit_stake(frame, caller, staked)
            frame.push(self._stake_token, staked)
            frame.emit(Unstaked(caller, staked))

            claimed = self._pending.get(caller)
            if claimed > 0:
                self._pay_out(frame, caller, claimed)

        self._log_commit("exit", caller, unstaked=staked, claimed=claimed)
        return staked, claimed

    def set_reward_rate(self, caller: Account, new_rate: int) -> None:
        """Change the emission rate from now on. Controller only."""
        new_rate = require_non_negative("new_rate", new_rate)

        with self._call(caller) as frame:
            require_controller(caller, self._controller)
            frame.checkpoint(self, "_acc")
            self._acc = settle(self._acc, frame.now)
            old_rate = self._acc.reward_rate
            self._acc = replace(self._acc, reward_rate=new_rate)
            frame.emit(RewardRateChanged(caller, old_rate, new_rate))

        logger.info("%s: reward rate %d -> %d", self.name, old_rate, new_rate)

    # -- Internals ---------------------------------------------------------

    def _now(self) -> int:
        now = require_int("clock.now()", self._clock.now())
        if now < self._acc.last_update_time:
            raise InvalidInput(f"clock moved backwards: {now} < {self._acc.last_update_time}")
        return now

    def _call(self, caller: Account):
        caller = require_account("caller", caller)
        return engine_call(self._guard, caller, self.events.extend, clock=self._now)

    def _require_stake(self, account: Account, amount: Amount) -> None:
        held = self._staked.get(account)
        if held < amount:
            raise InsufficientBalance(f"{account!r} has {held} staked, cannot unstake {amount}")

    def _settle_and_accrue(self, frame: CallFrame) -> None:
        frame.checkpoint(self, "_acc")
        self._acc = settle(self._acc, frame.now)
        self._accrue(frame, frame.caller)

    def _accrue(self, frame: CallFrame, account: Account) -> None:
        acc = self._acc.reward_per_token_stored
        paid = self._paid.get(account)
        delta = earned_since(self._staked.get(account), acc, paid)
        if delta:
            frame.adjust(self._pending, account, delta)
        if paid != acc:
            frame.write(self._paid, account, acc)

    def _debit_stake(self, frame: CallFrame, account: Account, amount: Amount) -> None:
        frame.adjust(self._staked, account, -amount)
        self._acc = replace(self._acc, total_staked=self._acc.total_staked - amount)

    def _pay_out(self, frame: CallFrame, account: Account, amount: Amount) -> None:
        # Pending is zeroed before the external push.
        frame.write(self._pending, account, 0)
        frame.push(self._reward_token, amount)
        frame.emit(RewardClaimed(account, amount))

    def _log_commit(self, op: str, caller: Account, **fields: object) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug(
            "%s.%s caller=%r %s total_staked=%d acc=%d t=%d",
            self.name,
            op,
            caller,
            " ".join(f"{k}={v}" for k, v in fields.items()),
            self._acc.total_staked,
            self._acc.reward_per_token_stored,
            self._acc.last_update_time,
        )

    def __repr__(self) -> str:
        return (
            f"RewardEngine(stake={self.stake_asset!r}, reward={self.reward_asset!r}, "
            f"rate={self.reward_rate}, total_staked={self.total_staked})"
        )
