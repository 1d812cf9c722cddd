"""
In-memory asset services for the staking pool.

`LocalCollectible` stands in for the morphie NFT contract and
`LocalRewardToken` for the MEMO reward token. They implement the
`CollectibleAsset` / `RewardAsset` capability interfaces and only the
behaviour the pool observes: ownership, operator approval, and a pool
minting switch.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from ..core.pool.ports import (
    MINTING_DISABLED,
    NOT_OWNER,
    OK,
    AssetCallResult,
    failed,
)

NOT_APPROVED = "not_approved"
NOT_IN_CUSTODY = "not_in_custody"
UNKNOWN_TOKEN = "unknown_token"


class LocalCollectible:
    """
    Sequentially minted NFTs: token_id -> owner address.

    The pool address must be approved as an operator by an owner
    (`set_approval_for_all`) before it can take custody of that owner's tokens.
    """

    def __init__(self, pool_address: str) -> None:
        self.pool_address = pool_address
        self._owners: Dict[int, str] = {}
        self._approvals: Set[Tuple[str, str]] = set()
        self._next_id = 0

    def give_away(self, to: str, count: int) -> List[int]:
        """Mint *count* new tokens to *to*; returns their ids."""
        if count <= 0:
            raise ValueError(f"count must be positive: {count}")
        minted = list(range(self._next_id, self._next_id + count))
        for token_id in minted:
            self._owners[token_id] = to
        self._next_id += count
        return minted

    def set_approval_for_all(self, owner: str, operator: str, approved: bool = True) -> None:
        if approved:
            self._approvals.add((owner, operator))
        else:
            self._approvals.discard((owner, operator))

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return (owner, operator) in self._approvals

    def owner_of(self, token_id: int) -> Optional[str]:
        return self._owners.get(token_id)

    def balance_of(self, address: str) -> int:
        return sum(1 for owner in self._owners.values() if owner == address)

    def transfer(self, sender: str, to: str, token_id: int) -> AssetCallResult:
        """Owner-initiated transfer, outside of the pool."""
        if self._owners.get(token_id) != sender:
            return failed(NOT_OWNER)
        self._owners[token_id] = to
        return OK

    def take_custody(self, owner: str, token_id: int) -> AssetCallResult:
        if token_id not in self._owners:
            return failed(UNKNOWN_TOKEN)
        if self._owners[token_id] != owner:
            return failed(NOT_OWNER)
        if not self.is_approved_for_all(owner, self.pool_address):
            return failed(NOT_APPROVED)
        self._owners[token_id] = self.pool_address
        return OK

    def return_custody(self, to: str, token_id: int) -> AssetCallResult:
        if self._owners.get(token_id) != self.pool_address:
            return failed(NOT_IN_CUSTODY)
        self._owners[token_id] = to
        return OK

    def __repr__(self) -> str:
        return f"LocalCollectible({len(self._owners)} tokens)"


class LocalRewardToken:
    """
    Fungible reward balances: address -> amount.

    Minting on behalf of the pool is off until `allow_pool_minting()` is called.
    """

    def __init__(self) -> None:
        self._balances: Dict[str, int] = {}
        self._total_supply = 0
        self.pool_minting_allowed = False

    def allow_pool_minting(self) -> None:
        self.pool_minting_allowed = True

    def disallow_pool_minting(self) -> None:
        self.pool_minting_allowed = False

    def credit_reward(self, to: str, amount: int) -> AssetCallResult:
        if amount < 0:
            raise ValueError(f"amount must be non-negative: {amount}")
        if not self.pool_minting_allowed:
            return failed(MINTING_DISABLED)
        self._balances[to] = self._balances.get(to, 0) + amount
        self._total_supply += amount
        return OK

    def balance_of(self, address: str) -> int:
        return self._balances.get(address, 0)

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def __repr__(self) -> str:
        return f"LocalRewardToken({len(self._balances)} holders, supply={self._total_supply})"
