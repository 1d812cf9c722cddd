"""Plain-dict snapshots of a ``StakingPool``.

The snapshot is deterministic: stakers are sorted by address and each token
list keeps the registry's order. It is meant for inspection and test
assertions; no on-disk format is implied.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, TYPE_CHECKING

from .types import StakerRecord

if TYPE_CHECKING:
    from .engine import StakingPool

# Auto-derived from StakerRecord field definitions (single source of truth).
RECORD_FIELD_NAMES: tuple[str, ...] = tuple(f.name for f in fields(StakerRecord))


def record_to_dict(record: StakerRecord) -> dict[str, int]:
    return {name: getattr(record, name) for name in RECORD_FIELD_NAMES}


def pool_to_dict(pool: StakingPool) -> dict[str, Any]:
    """Serialize config, totals, staker records and custody lists."""
    records = pool.records()
    return {
        "owner": pool.owner,
        "config": {
            "reward_unit_amount": pool.config.reward_unit_amount,
            "accrual_period_length": pool.config.accrual_period_length,
        },
        "totals": {
            "total_staked": pool.totals.total_staked,
            "total_rewards_paid": pool.totals.total_rewards_paid,
        },
        "stakers": {
            address: {
                **record_to_dict(records[address]),
                "staked_token_ids": list(pool.custody.staked_tokens(address)),
            }
            for address in sorted(records)
        },
    }
