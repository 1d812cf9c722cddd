"""
Token custody registry.

Tracks which address deposited each token currently held by the pool, plus
an insertion-ordered list of token ids per staker. Removal is O(1): the
removed id is swapped with the last entry of the owner's list, so the order
of the remaining ids is not preserved after a withdrawal.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import NotCustodian, NotOwner

Address = str
TokenId = int


class CustodyRegistry:
    """
    Mapping token_id -> depositor, with a per-depositor enumerable token list.

    Notes:
    - Knows nothing about rewards; balances live in the staker records and
      must equal ``count(staker)``.
    - ``check_*`` methods validate without mutating; ``record_*`` methods
      assume the matching check already passed.
    """

    def __init__(self) -> None:
        self._owner: Dict[TokenId, Address] = {}
        self._tokens: Dict[Address, List[TokenId]] = {}
        self._position: Dict[TokenId, int] = {}

    def owner_of(self, token_id: TokenId) -> Optional[Address]:
        """Custodian of *token_id*, or None if it is not staked."""
        return self._owner.get(token_id)

    def staked_tokens(self, staker: Address) -> Tuple[TokenId, ...]:
        """Snapshot of the staker's token ids."""
        return tuple(self._tokens.get(staker, ()))

    def count(self, staker: Address) -> int:
        return len(self._tokens.get(staker, ()))

    def check_deposits(self, staker: Address, token_ids: Sequence[TokenId]) -> None:
        """
        Validate a deposit batch.

        Raises:
            NotOwner: a token is already in custody, or repeats inside the batch.
        """
        seen: set[TokenId] = set()
        for token_id in token_ids:
            if token_id in self._owner or token_id in seen:
                raise NotOwner(staker, token_id)
            seen.add(token_id)

    def check_withdrawals(self, staker: Address, token_ids: Sequence[TokenId]) -> None:
        """
        Validate a withdrawal batch.

        Raises:
            NotCustodian: a token is not held for *staker*, or repeats inside the batch.
        """
        seen: set[TokenId] = set()
        for token_id in token_ids:
            if self._owner.get(token_id) != staker or token_id in seen:
                raise NotCustodian(staker, token_id)
            seen.add(token_id)

    def record_deposit(self, staker: Address, token_id: TokenId) -> None:
        self.check_deposits(staker, (token_id,))
        tokens = self._tokens.setdefault(staker, [])
        self._owner[token_id] = staker
        self._position[token_id] = len(tokens)
        tokens.append(token_id)

    def record_withdrawal(self, staker: Address, token_id: TokenId) -> None:
        self.check_withdrawals(staker, (token_id,))
        tokens = self._tokens[staker]
        idx = self._position.pop(token_id)
        last = tokens.pop()
        if last != token_id:
            tokens[idx] = last
            self._position[last] = idx
        del self._owner[token_id]

    def record_deposits(self, staker: Address, token_ids: Iterable[TokenId]) -> None:
        for token_id in token_ids:
            self.record_deposit(staker, token_id)

    def record_withdrawals(self, staker: Address, token_ids: Iterable[TokenId]) -> None:
        for token_id in token_ids:
            self.record_withdrawal(staker, token_id)

    def copy(self) -> CustodyRegistry:
        clone = CustodyRegistry()
        clone._owner = dict(self._owner)
        clone._tokens = {staker: list(tokens) for staker, tokens in self._tokens.items()}
        clone._position = dict(self._position)
        return clone

    def all_custody(self) -> Dict[TokenId, Address]:
        """Return a copy of the token -> custodian map."""
        return dict(self._owner)

    def stakers(self) -> List[Address]:
        """Addresses that ever received a deposit, sorted."""
        return sorted(self._tokens)

    def verify_index(self) -> bool:
        """True when the reverse index and the per-staker lists agree."""
        listed = 0
        for staker, tokens in self._tokens.items():
            for idx, token_id in enumerate(tokens):
                if self._owner.get(token_id) != staker or self._position.get(token_id) != idx:
                    return False
            listed += len(tokens)
        return listed == len(self._owner) == len(self._position)

    def __len__(self) -> int:
        return len(self._owner)

    def __repr__(self) -> str:
        return f"CustodyRegistry({len(self._owner)} tokens, {len(self._tokens)} stakers)"
