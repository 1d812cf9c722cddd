"""Record transition functions for the staking pool.

Each function returns a new ``StakerRecord`` / ``PoolTotals``; nothing here
touches the custody registry or the asset services. Updates evaluate
against the PRE-state and are applied with ``dataclasses.replace()``.
"""

from __future__ import annotations

from dataclasses import replace

from ..accrual import elapsed_since, pending_reward
from .types import PoolConfig, PoolTotals, StakerRecord


def pending_for(record: StakerRecord, config: PoolConfig, now: int) -> int:
    """Reward accrued since ``record.last_update_time`` and not yet settled."""
    return pending_reward(
        record.balance,
        config.reward_unit_amount,
        elapsed_since(record.last_update_time, now),
        config.accrual_period_length,
    )


def settle(record: StakerRecord, config: PoolConfig, now: int) -> StakerRecord:
    """Move pending reward into ``rewards_outstanding`` and advance the timestamp."""
    return replace(
        record,
        rewards_outstanding=record.rewards_outstanding + pending_for(record, config, now),
        last_update_time=now,
    )


def apply_deposit(record: StakerRecord, count: int) -> StakerRecord:
    return replace(record, balance=record.balance + count)


def apply_withdrawal(record: StakerRecord, count: int) -> StakerRecord:
    if count > record.balance:
        raise ValueError(f"withdrawal of {count} exceeds balance {record.balance}")
    return replace(record, balance=record.balance - count)


def apply_claim(record: StakerRecord) -> StakerRecord:
    return replace(
        record,
        rewards_outstanding=0,
        rewards_paid=record.rewards_paid + record.rewards_outstanding,
    )


def apply_staked_delta(totals: PoolTotals, delta: int) -> PoolTotals:
    return replace(totals, total_staked=totals.total_staked + delta)


def apply_paid(totals: PoolTotals, amount: int) -> PoolTotals:
    return replace(totals, total_rewards_paid=totals.total_rewards_paid + amount)
