"""`pool`: custody-and-reward ledger for staked morphies.

- integer-only accrual with one truncating division per settlement,
- immutable staker records and pool totals (frozen dataclasses),
- fail-closed guards; every operation commits fully or not at all.

Public API:
- `StakingPool(collectible, reward, config, owner, clock=..., check_invariants=...)`
- `StakingPool.apply(params) -> StepResult` (never raises a `PoolError`)
- `check_all(pool) -> list[str]`
"""

from .custody import CustodyRegistry
from .engine import StakingPool
from .errors import (
    CustodyRollbackError,
    CustodyTransferError,
    InvalidParameter,
    MintDenied,
    NotCustodian,
    NotOwner,
    PoolError,
    PoolInvariantError,
    Unauthorized,
)
from .invariants import check_all
from .ports import AssetCallResult, CollectibleAsset, RewardAsset
from .state import pool_to_dict
from .types import (
    ZERO_ADDRESS,
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

__all__ = [
    "StakingPool",
    "CustodyRegistry",
    "check_all",
    "pool_to_dict",
    "AssetCallResult",
    "CollectibleAsset",
    "RewardAsset",
    "ZERO_ADDRESS",
    "Action",
    "ActionParams",
    "Event",
    "PoolConfig",
    "PoolEvent",
    "PoolTotals",
    "StakerInfo",
    "StakerRecord",
    "StepResult",
    "PoolError",
    "NotOwner",
    "NotCustodian",
    "MintDenied",
    "Unauthorized",
    "InvalidParameter",
    "CustodyTransferError",
    "CustodyRollbackError",
    "PoolInvariantError",
]
