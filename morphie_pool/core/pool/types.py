"""Data types for the staking pool.

Value types are frozen dataclasses; the engine replaces them instead of
mutating them, so a failed operation can never leave a half-updated record.

Units/conventions:
- addresses are plain strings, compared exactly,
- token ids are non-negative ints,
- reward amounts are integer base units of the reward token (1e18 per MEMO),
- timestamps and periods are integer seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from .errors import InvalidParameter

ZERO_ADDRESS = "0x" + "00" * 20


@unique
class Action(Enum):
    """One member per public mutating operation."""
    STAKE = "stake"
    STAKE_BATCH = "stake_batch"
    UNSTAKE = "unstake"
    UNSTAKE_BATCH = "unstake_batch"
    EMERGENCY_UNSTAKE = "emergency_unstake"
    CLAIM_REWARDS = "claim_rewards"
    SET_REWARD_PARAMS = "set_reward_params"


@unique
class Event(Enum):
    """One member per emitted pool event."""
    STAKED = "Staked"
    UNSTAKED = "Unstaked"
    EMERGENCY_UNSTAKED = "EmergencyUnstaked"
    REWARDS_CLAIMED = "RewardsClaimed"
    REWARD_PARAMS_UPDATED = "RewardParamsUpdated"


@dataclass(frozen=True)
class PoolConfig:
    """Reward parameters: ``reward_unit_amount`` per token per ``accrual_period_length`` seconds."""

    reward_unit_amount: int
    accrual_period_length: int

    def __post_init__(self) -> None:
        for name in ("reward_unit_amount", "accrual_period_length"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidParameter(f"{name} must be an int, got {type(value).__name__}")
            if value <= 0:
                raise InvalidParameter(f"{name} must be positive: {value}")


@dataclass(frozen=True)
class StakerRecord:
    """Per-address accrual record. Created on first stake, never deleted."""

    balance: int = 0
    last_update_time: int = 0
    rewards_outstanding: int = 0
    rewards_paid: int = 0

    @property
    def lifetime_earned(self) -> int:
        return self.rewards_paid + self.rewards_outstanding


@dataclass(frozen=True)
class PoolTotals:
    """Pool-wide aggregates kept in lock-step with the staker records."""

    total_staked: int = 0
    total_rewards_paid: int = 0


@dataclass(frozen=True)
class StakerInfo:
    """Read-only view of a staker, as returned by ``StakingPool.stakers()``.

    ``settled_lifetime_earned`` is ``rewards_paid + rewards_outstanding`` as
    stored. ``StakingPool.lifetime_earned()`` also counts reward accrued since
    ``last_update_time``, so it is never smaller.
    """

    address: str
    balance: int
    last_update_time: int
    rewards_outstanding: int
    rewards_paid: int
    settled_lifetime_earned: int
    staked_token_ids: tuple[int, ...]


@dataclass(frozen=True)
class PoolEvent:
    """Log entry emitted by a successful mutating operation."""

    event: Event
    staker: str
    timestamp: int
    token_ids: tuple[int, ...] = ()
    amount: int = 0
    reward_unit_amount: int = 0
    accrual_period_length: int = 0


@dataclass(frozen=True)
class ActionParams:
    """Parameters for ``StakingPool.apply``. Unused fields keep their defaults."""

    action: Action
    caller: str
    token_id: int = 0                     # stake / unstake / emergency_unstake
    token_ids: tuple[int, ...] = ()       # stake_batch / unstake_batch
    reward_unit_amount: int = 0           # set_reward_params
    accrual_period_length: int = 0        # set_reward_params


@dataclass(frozen=True)
class StepResult:
    """Result of a single ``StakingPool.apply`` call."""

    accepted: bool
    event: PoolEvent | None = None
    rejection: str | None = None
