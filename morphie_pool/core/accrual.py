"""Pure reward-accrual arithmetic for the staking pool.

Every function is stateless and operates on plain Python ints.

Rounding is part of the contract: a settlement computes
``balance * reward_unit_amount * elapsed // accrual_period_length`` with the
multiplication first and exactly one truncating division. Settling more often
truncates more often, so the cumulative total depends on the settlement
schedule (see ``accrue_over_schedule``).
"""

from __future__ import annotations

from typing import Iterable


def _require_non_negative(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


def elapsed_since(last_update_time: int, now: int) -> int:
    """Seconds between the last settlement and *now*.

    A clock that runs backwards violates the environment contract; this is
    reported, never clamped.
    """
    elapsed = now - last_update_time
    if elapsed < 0:
        raise ValueError(f"time went backwards: now={now} < last_update_time={last_update_time}")
    return elapsed


def pending_reward(
    balance: int,
    reward_unit_amount: int,
    elapsed: int,
    accrual_period_length: int,
) -> int:
    """Reward earned by *balance* tokens over *elapsed* seconds.

    ``floor(balance * reward_unit_amount * elapsed / accrual_period_length)``.
    """
    _require_non_negative("balance", balance)
    _require_non_negative("reward_unit_amount", reward_unit_amount)
    _require_non_negative("elapsed", elapsed)
    if accrual_period_length <= 0:
        raise ValueError(f"accrual_period_length must be positive: {accrual_period_length}")
    return (balance * reward_unit_amount * elapsed) // accrual_period_length


def accrue_over_schedule(
    balance: int,
    reward_unit_amount: int,
    accrual_period_length: int,
    start: int,
    checkpoints: Iterable[int],
) -> int:
    """Total reward when settling at each checkpoint in turn, starting at *start*.

    Models a staker whose balance does not change but whose record is settled
    at every checkpoint (e.g. by repeated zero-amount claims). Checkpoints
    must be non-decreasing. With a single checkpoint this equals
    ``pending_reward(balance, reward_unit_amount, end - start, period)``.
    """
    total = 0
    last = start
    for checkpoint in checkpoints:
        elapsed = elapsed_since(last, checkpoint)
        total += pending_reward(balance, reward_unit_amount, elapsed, accrual_period_length)
        last = checkpoint
    return total
