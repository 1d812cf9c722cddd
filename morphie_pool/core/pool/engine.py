"""Staking pool engine.

``StakingPool`` owns every piece of ledger state (staker records, custody
registry, pool totals, reward config) and runs each public operation as one
atomic unit:

1. settle the acting staker's pending reward up to ``now`` (pure, not yet stored),
2. validate every precondition (guards raise typed ``PoolError``s),
3. optionally apply the ledger update to a staged copy and check all
   invariants on it,
4. call the asset services, handing back any custody already moved if a
   later call in the same operation fails,
5. commit record, custody and totals updates (these cannot fail).

Nothing is stored before step 5, so a rejected operation leaves no trace.
The one exception is ``CustodyRollbackError``: when handing custody back
itself fails, the ledger records the tokens that really moved before the
error is raised, so it never disagrees with the collectible asset.
``apply()`` is the non-raising entry point that returns a ``StepResult``.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Sequence

from .custody import CustodyRegistry
from .errors import (
    CustodyRollbackError,
    CustodyTransferError,
    MintDenied,
    NotOwner,
    PoolError,
    PoolInvariantError,
    Unauthorized,
)
from .invariants import check_all
from .ports import NOT_OWNER, AssetCallResult, CollectibleAsset, RewardAsset
from .types import (
    Action,
    ActionParams,
    Event,
    PoolConfig,
    PoolEvent,
    PoolTotals,
    StakerInfo,
    StakerRecord,
    StepResult,
)
from .updates import (
    apply_claim,
    apply_deposit,
    apply_paid,
    apply_staked_delta,
    apply_withdrawal,
    pending_for,
    settle,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def _wall_clock() -> int:
    return int(time.time())


class StakingPool:
    def __init__(
        self,
        collectible: CollectibleAsset,
        reward: RewardAsset,
        config: PoolConfig,
        owner: str,
        *,
        clock: Clock | None = None,
        check_invariants: bool = False,
        custodian: str | None = None,
    ) -> None:
        """
        Args:
            custodian: address the collectible asset reports as the holder of
                staked tokens. When set, every token of a withdrawal must still
                be held there before any of them is handed back.
        """
        if not isinstance(owner, str) or not owner:
            raise ValueError("owner must be a non-empty address string")
        self._collectible = collectible
        self._reward = reward
        self._config = config
        self._owner = owner
        self._clock = clock or _wall_clock
        self._check_invariants = check_invariants
        self._custodian = custodian

        self._records: dict[str, StakerRecord] = {}
        self._custody = CustodyRegistry()
        self._totals = PoolTotals()
        self._events: list[PoolEvent] = []

    # -- State accessors -----------------------------------------------------

    @property
    def config(self) -> PoolConfig:
        return self._config

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def totals(self) -> PoolTotals:
        return self._totals

    @property
    def custody(self) -> CustodyRegistry:
        return self._custody

    @property
    def events(self) -> tuple[PoolEvent, ...]:
        return tuple(self._events)

    def records(self) -> dict[str, StakerRecord]:
        """Copy of every staker record, keyed by address."""
        return dict(self._records)

    def record(self, address: str) -> StakerRecord:
        """Stored record for *address*; an all-zero record if it never staked."""
        return self._records.get(address, StakerRecord())

    # -- Read-only queries ---------------------------------------------------

    def stakers(self, address: str) -> StakerInfo:
        r = self.record(address)
        return StakerInfo(
            address=address,
            balance=r.balance,
            last_update_time=r.last_update_time,
            rewards_outstanding=r.rewards_outstanding,
            rewards_paid=r.rewards_paid,
            settled_lifetime_earned=r.lifetime_earned,
            staked_token_ids=self._custody.staked_tokens(address),
        )

    def earned(self, address: str) -> int:
        """Outstanding reward plus what has accrued since the last settlement."""
        r = self.record(address)
        return r.rewards_outstanding + pending_for(r, self._config, self._clock())

    def lifetime_earned(self, address: str) -> int:
        """Everything ever attributed to *address*: claimed plus claimable now."""
        return self.record(address).rewards_paid + self.earned(address)

    def get_staked_tokens(self, address: str) -> tuple[int, ...]:
        return self._custody.staked_tokens(address)

    def token_owner(self, token_id: int) -> str | None:
        return self._custody.owner_of(token_id)

    def total_staked_morphies(self) -> int:
        return self._totals.total_staked

    def total_rewards_paid(self) -> int:
        return self._totals.total_rewards_paid

    def reward_amount(self) -> int:
        return self._config.reward_unit_amount

    def reward_accrue_duration(self) -> int:
        return self._config.accrual_period_length

    # -- Staking -------------------------------------------------------------

    def stake(self, staker: str, token_id: int) -> PoolEvent:
        return self._stake(staker, (token_id,))

    def stake_batch(self, staker: str, token_ids: Sequence[int]) -> PoolEvent:
        return self._stake(staker, tuple(token_ids))

    def unstake(self, staker: str, token_id: int) -> PoolEvent:
        return self._unstake(staker, (token_id,), Event.UNSTAKED)

    def unstake_batch(self, staker: str, token_ids: Sequence[int]) -> PoolEvent:
        return self._unstake(staker, tuple(token_ids), Event.UNSTAKED)

    def emergency_unstake(self, staker: str, token_id: int) -> PoolEvent:
        """Return custody without touching the reward asset.

        Pending reward is still settled into ``rewards_outstanding`` and kept
        for a later claim.
        """
        return self._unstake(staker, (token_id,), Event.EMERGENCY_UNSTAKED)

    def _stake(self, staker: str, token_ids: tuple[int, ...]) -> PoolEvent:
        now = self._clock()
        settled = settle(self.record(staker), self._config, now)

        self._custody.check_deposits(staker, token_ids)
        for token_id in token_ids:
            if self._collectible.owner_of(token_id) != staker:
                raise NotOwner(staker, token_id)
        self._precheck(lambda: self._deposit(staker, settled, token_ids))

        try:
            self._take_all(staker, token_ids)
        except CustodyRollbackError as exc:
            self._deposit(staker, settled, exc.stranded)
            self._emit(PoolEvent(event=Event.STAKED, staker=staker, timestamp=now, token_ids=exc.stranded))
            logger.error("Recorded stranded deposit of token(s) %s for %s.", list(exc.stranded), staker)
            raise

        self._deposit(staker, settled, token_ids)
        logger.info("Staker %s staked %d token(s) %s.", staker, len(token_ids), list(token_ids))
        return self._emit(PoolEvent(event=Event.STAKED, staker=staker, timestamp=now, token_ids=token_ids))

    def _unstake(self, staker: str, token_ids: tuple[int, ...], kind: Event) -> PoolEvent:
        now = self._clock()
        settled = settle(self.record(staker), self._config, now)

        self._custody.check_withdrawals(staker, token_ids)
        if self._custodian is not None:
            for token_id in token_ids:
                holder = self._collectible.owner_of(token_id)
                if holder != self._custodian:
                    raise CustodyTransferError(token_id, f"held by {holder!r}")
        self._precheck(lambda: self._withdraw(staker, settled, token_ids))

        try:
            self._release_all(staker, token_ids)
        except CustodyRollbackError as exc:
            self._withdraw(staker, settled, exc.stranded)
            self._emit(PoolEvent(event=kind, staker=staker, timestamp=now, token_ids=exc.stranded))
            logger.error("Recorded stranded withdrawal of token(s) %s for %s.", list(exc.stranded), staker)
            raise

        self._withdraw(staker, settled, token_ids)
        if kind is Event.EMERGENCY_UNSTAKED:
            logger.warning("Staker %s emergency-unstaked token(s) %s.", staker, list(token_ids))
        else:
            logger.info("Staker %s unstaked %d token(s) %s.", staker, len(token_ids), list(token_ids))
        return self._emit(PoolEvent(event=kind, staker=staker, timestamp=now, token_ids=token_ids))

    # -- Rewards -------------------------------------------------------------

    def claim_rewards(self, staker: str) -> PoolEvent:
        now = self._clock()
        settled = settle(self.record(staker), self._config, now)
        amount = settled.rewards_outstanding

        def commit() -> None:
            self._store(staker, apply_claim(settled))
            self._totals = apply_paid(self._totals, amount)

        self._precheck(commit)
        if amount > 0:
            result = self._reward.credit_reward(staker, amount)
            if not result.ok:
                logger.warning("Reward credit of %s to %s denied: %s", amount, staker, result.error)
                raise MintDenied(staker, amount, result.error)

        commit()
        logger.info("Staker %s claimed %s reward units.", staker, amount)
        return self._emit(PoolEvent(event=Event.REWARDS_CLAIMED, staker=staker, timestamp=now, amount=amount))

    # -- Administration ------------------------------------------------------

    def set_reward_params(self, caller: str, reward_unit_amount: int, accrual_period_length: int) -> PoolEvent:
        """Replace the reward config. Stakers are not re-settled."""
        if caller != self._owner:
            raise Unauthorized(caller)
        new_config = PoolConfig(reward_unit_amount, accrual_period_length)

        def commit() -> None:
            self._config = new_config

        self._precheck(commit)
        old = self._config
        commit()
        logger.info(
            "Reward params changed from %s/%ss to %s/%ss.",
            old.reward_unit_amount, old.accrual_period_length,
            new_config.reward_unit_amount, new_config.accrual_period_length,
        )
        return self._emit(
            PoolEvent(
                event=Event.REWARD_PARAMS_UPDATED,
                staker=caller,
                timestamp=self._clock(),
                reward_unit_amount=new_config.reward_unit_amount,
                accrual_period_length=new_config.accrual_period_length,
            )
        )

    # -- Non-raising dispatch -------------------------------------------------

    def apply(self, params: ActionParams) -> StepResult:
        """Execute one action. Returns a rejection instead of raising ``PoolError``."""
        handler = _DISPATCH.get(params.action)
        if handler is None:
            return StepResult(accepted=False, rejection=f"unknown_action:{params.action}")
        try:
            event = handler(self, params)
        except PoolError as exc:
            return StepResult(accepted=False, rejection=f"{exc.code}:{exc}")
        return StepResult(accepted=True, event=event)

    # -- Internals -----------------------------------------------------------

    def _deposit(self, staker: str, settled: StakerRecord, token_ids: tuple[int, ...]) -> None:
        self._custody.record_deposits(staker, token_ids)
        self._records[staker] = apply_deposit(settled, len(token_ids))
        self._totals = apply_staked_delta(self._totals, len(token_ids))

    def _withdraw(self, staker: str, settled: StakerRecord, token_ids: tuple[int, ...]) -> None:
        self._custody.record_withdrawals(staker, token_ids)
        self._store(staker, apply_withdrawal(settled, len(token_ids)))
        self._totals = apply_staked_delta(self._totals, -len(token_ids))

    def _store(self, staker: str, record: StakerRecord) -> None:
        # Records are created by staking only.
        if staker in self._records:
            self._records[staker] = record

    def _precheck(self, commit: Callable[[], None]) -> None:
        """Run *commit* on a staged copy of the ledger and check the invariants there."""
        if not self._check_invariants:
            return
        live = (self._records, self._custody, self._totals, self._config)
        self._records = dict(self._records)
        self._custody = self._custody.copy()
        try:
            commit()
            violations = check_all(self)
        finally:
            self._records, self._custody, self._totals, self._config = live
        if violations:
            logger.error("Invariant violations, operation rejected: %s", violations)
            raise PoolInvariantError(violations)

    def _emit(self, event: PoolEvent) -> PoolEvent:
        self._events.append(event)
        return event

    def _take_all(self, owner: str, token_ids: Iterable[int]) -> None:
        moved: list[int] = []
        for token_id in token_ids:
            result = self._collectible.take_custody(owner, token_id)
            if not result.ok:
                logger.warning("Custody of token %s from %s refused: %s", token_id, owner, result.error)
                stranded = self._undo("return", moved, lambda t: self._collectible.return_custody(owner, t))
                if stranded:
                    raise CustodyRollbackError(token_id, result.error, stranded)
                if result.error == NOT_OWNER:
                    raise NotOwner(owner, token_id)
                raise CustodyTransferError(token_id, result.error)
            moved.append(token_id)

    def _release_all(self, to: str, token_ids: Iterable[int]) -> None:
        moved: list[int] = []
        for token_id in token_ids:
            result = self._collectible.return_custody(to, token_id)
            if not result.ok:
                logger.warning("Return of token %s to %s refused: %s", token_id, to, result.error)
                stranded = self._undo("retake", moved, lambda t: self._collectible.take_custody(to, t))
                if stranded:
                    raise CustodyRollbackError(token_id, result.error, stranded)
                raise CustodyTransferError(token_id, result.error)
            moved.append(token_id)

    @staticmethod
    def _undo(what: str, moved: list[int], call: Callable[[int], AssetCallResult]) -> tuple[int, ...]:
        """Reverse *moved* newest first; returns the ids that could not be moved back."""
        stranded: list[int] = []
        for token_id in reversed(moved):
            result = call(token_id)
            if not result.ok:
                logger.error("Compensating %s of token %s failed: %s", what, token_id, result.error)
                stranded.append(token_id)
        return tuple(reversed(stranded))

    def __repr__(self) -> str:
        return (
            f"StakingPool(stakers={len(self._records)}, staked={self._totals.total_staked}, "
            f"paid={self._totals.total_rewards_paid})"
        )


_DISPATCH: dict[Action, Callable[[StakingPool, ActionParams], PoolEvent]] = {
    Action.STAKE: lambda pool, p: pool.stake(p.caller, p.token_id),
    Action.STAKE_BATCH: lambda pool, p: pool.stake_batch(p.caller, p.token_ids),
    Action.UNSTAKE: lambda pool, p: pool.unstake(p.caller, p.token_id),
    Action.UNSTAKE_BATCH: lambda pool, p: pool.unstake_batch(p.caller, p.token_ids),
    Action.EMERGENCY_UNSTAKE: lambda pool, p: pool.emergency_unstake(p.caller, p.token_id),
    Action.CLAIM_REWARDS: lambda pool, p: pool.claim_rewards(p.caller),
    Action.SET_REWARD_PARAMS: lambda pool, p: pool.set_reward_params(
        p.caller, p.reward_unit_amount, p.accrual_period_length,
    ),
}
