"""Invariant checkers for the staking pool.

Each function returns True when the invariant holds, and ``check_all()``
returns the list of violated invariant IDs (empty = all pass).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .engine import StakingPool


def inv_total_staked_matches_balances(p: StakingPool) -> bool:
    return p.totals.total_staked == sum(r.balance for r in p.records().values())


def inv_total_staked_matches_custody(p: StakingPool) -> bool:
    return p.totals.total_staked == len(p.custody)


def inv_balance_matches_custody_list(p: StakingPool) -> bool:
    return all(r.balance == p.custody.count(addr) for addr, r in p.records().items())


def inv_custody_index_consistent(p: StakingPool) -> bool:
    return p.custody.verify_index()


def inv_custodians_have_records(p: StakingPool) -> bool:
    records = p.records()
    return all(owner in records for owner in p.custody.all_custody().values())


def inv_total_paid_matches_records(p: StakingPool) -> bool:
    return p.totals.total_rewards_paid == sum(r.rewards_paid for r in p.records().values())


def inv_records_non_negative(p: StakingPool) -> bool:
    return all(
        r.balance >= 0 and r.rewards_outstanding >= 0 and r.rewards_paid >= 0
        for r in p.records().values()
    )


def inv_config_positive(p: StakingPool) -> bool:
    return p.config.reward_unit_amount > 0 and p.config.accrual_period_length > 0


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[StakingPool], bool]] = {
    "inv_total_staked_matches_balances": inv_total_staked_matches_balances,
    "inv_total_staked_matches_custody": inv_total_staked_matches_custody,
    "inv_balance_matches_custody_list": inv_balance_matches_custody_list,
    "inv_custody_index_consistent": inv_custody_index_consistent,
    "inv_custodians_have_records": inv_custodians_have_records,
    "inv_total_paid_matches_records": inv_total_paid_matches_records,
    "inv_records_non_negative": inv_records_non_negative,
    "inv_config_positive": inv_config_positive,
}


def check_all(pool: StakingPool) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(pool)
    ]
