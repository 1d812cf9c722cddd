"""Capability interfaces for the two external asset services.

The pool never implements transfers or token supply itself. It only calls
these services and turns a failed ``AssetCallResult`` into a typed error.
Reference in-memory implementations live in ``morphie_pool.integration.assets``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

# Error string a collectible service reports when the sender does not own the token.
NOT_OWNER = "not_owner"
MINTING_DISABLED = "minting_disabled"


@dataclass(frozen=True)
class AssetCallResult:
    ok: bool
    error: Optional[str] = None


OK = AssetCallResult(ok=True)


def failed(error: str) -> AssetCallResult:
    return AssetCallResult(ok=False, error=error)


class CollectibleAsset(Protocol):
    """Non-fungible token service holding the morphies."""

    def owner_of(self, token_id: int) -> Optional[str]:
        ...

    def take_custody(self, owner: str, token_id: int) -> AssetCallResult:
        """Move *token_id* from *owner* into pool custody."""
        ...

    def return_custody(self, to: str, token_id: int) -> AssetCallResult:
        """Move *token_id* out of pool custody to *to*."""
        ...


class RewardAsset(Protocol):
    """Fungible reward token service (MEMO)."""

    def credit_reward(self, to: str, amount: int) -> AssetCallResult:
        ...

    def balance_of(self, address: str) -> int:
        ...
