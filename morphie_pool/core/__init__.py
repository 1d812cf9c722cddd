"""
Core staking algorithms
"""

from .accrual import accrue_over_schedule, elapsed_since, pending_reward
from .pool import PoolConfig, StakingPool

__all__ = [
    "accrue_over_schedule",
    "elapsed_since",
    "pending_reward",
    "PoolConfig",
    "StakingPool",
]
