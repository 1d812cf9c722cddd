"""
Wiring for the staking pool: in-memory asset services, clock, settings
"""

from .assets import LocalCollectible, LocalRewardToken
from .clock import ManualClock
from .settings import PoolSettings, build_pool, load_pool_settings, settings_from_mapping

__all__ = [
    "LocalCollectible",
    "LocalRewardToken",
    "ManualClock",
    "PoolSettings",
    "build_pool",
    "load_pool_settings",
    "settings_from_mapping",
]
