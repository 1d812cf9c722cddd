"""
Pool settings loaded from YAML.

Example document::

    owner: "0xowner"
    reward_unit_amount: "5000000000000000000"   # 5 MEMO, base units
    accrual_period_length: 300                  # seconds
    check_invariants: false

Integers may be written as decimal strings so 1e18-scale amounts survive
tooling that round-trips YAML numbers through floats. Validation is
fail-closed: unknown keys and malformed values raise `InvalidParameter`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..core.pool.engine import Clock, StakingPool
from ..core.pool.errors import InvalidParameter
from ..core.pool.ports import CollectibleAsset, RewardAsset
from ..core.pool.types import PoolConfig

_KNOWN_KEYS = frozenset({"owner", "reward_unit_amount", "accrual_period_length", "check_invariants"})


@dataclass(frozen=True)
class PoolSettings:
    owner: str
    config: PoolConfig
    check_invariants: bool = False


def _require_str(obj: Any, *, name: str) -> str:
    if not isinstance(obj, str) or not obj.strip():
        raise InvalidParameter(f"{name} must be a non-empty string")
    return obj.strip()


def _require_int(obj: Any, *, name: str) -> int:
    if isinstance(obj, bool):
        raise InvalidParameter(f"{name} must be an integer, got bool")
    if isinstance(obj, int):
        return obj
    if isinstance(obj, str) and obj.strip().isdigit():
        return int(obj.strip())
    raise InvalidParameter(f"{name} must be an integer or a decimal string, got {obj!r}")


def _require_bool(obj: Any, *, name: str) -> bool:
    if not isinstance(obj, bool):
        raise InvalidParameter(f"{name} must be a boolean")
    return obj


def settings_from_mapping(raw: Mapping[str, Any]) -> PoolSettings:
    if not isinstance(raw, Mapping):
        raise InvalidParameter("pool settings must be a mapping")
    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        raise InvalidParameter(f"unknown pool settings: {', '.join(map(str, unknown))}")

    config = PoolConfig(
        reward_unit_amount=_require_int(raw.get("reward_unit_amount"), name="reward_unit_amount"),
        accrual_period_length=_require_int(raw.get("accrual_period_length"), name="accrual_period_length"),
    )
    return PoolSettings(
        owner=_require_str(raw.get("owner"), name="owner"),
        config=config,
        check_invariants=_require_bool(raw.get("check_invariants", False), name="check_invariants"),
    )


def load_pool_settings(path: Path | str) -> PoolSettings:
    raw = Path(path).read_text(encoding="utf-8")
    return settings_from_mapping(yaml.safe_load(raw))


def build_pool(
    settings: PoolSettings,
    collectible: CollectibleAsset,
    reward: RewardAsset,
    clock: Clock | None = None,
    custodian: str | None = None,
) -> StakingPool:
    return StakingPool(
        collectible,
        reward,
        settings.config,
        settings.owner,
        clock=clock,
        check_invariants=settings.check_invariants,
        custodian=custodian,
    )
