"""Exception types for the staking pool.

Raised by the ``StakingPool`` operations in ``engine.py``. Callers that prefer
rejection values over exceptions use ``StakingPool.apply()``, which maps each
error to its ``code``.
"""

from __future__ import annotations


class PoolError(Exception):
    """Base class for every rejected pool operation."""

    code = "pool_error"


class NotOwner(PoolError):
    """Raised when the caller does not own the collectible being staked."""

    code = "not_owner"

    def __init__(self, staker: str, token_id: int) -> None:
        self.staker = staker
        self.token_id = token_id
        super().__init__(f"address {staker!r} is not the owner of token {token_id}")


class NotCustodian(PoolError):
    """Raised when the caller did not deposit the token being withdrawn."""

    code = "not_custodian"

    def __init__(self, staker: str, token_id: int) -> None:
        self.staker = staker
        self.token_id = token_id
        super().__init__(f"token {token_id} is not staked by address {staker!r}")


class MintDenied(PoolError):
    """Raised when the reward asset refuses to credit a claim."""

    code = "mint_denied"

    def __init__(self, staker: str, amount: int, reason: str | None = None) -> None:
        self.staker = staker
        self.amount = amount
        self.reason = reason
        super().__init__(f"reward credit of {amount} to {staker!r} denied: {reason or 'unspecified'}")


class Unauthorized(PoolError):
    """Raised when a non-owner calls an owner-only operation."""

    code = "unauthorized"

    def __init__(self, caller: str) -> None:
        self.caller = caller
        super().__init__(f"caller {caller!r} is not the pool owner")


class InvalidParameter(PoolError, ValueError):
    """Raised for a non-positive reward amount or accrual period."""

    code = "invalid_parameter"


class CustodyTransferError(PoolError):
    """Raised when the collectible asset refuses a transfer for a non-ownership reason."""

    code = "custody_transfer"

    def __init__(self, token_id: int, reason: str | None = None) -> None:
        self.token_id = token_id
        self.reason = reason
        super().__init__(f"custody transfer of token {token_id} failed: {reason or 'unspecified'}")


class CustodyRollbackError(CustodyTransferError):
    """Raised when a refused transfer could not be fully undone.

    ``stranded`` lists the token ids left where the partial transfer put them.
    The ledger is reconciled to those moves before this is raised.
    """

    code = "custody_rollback"

    def __init__(self, token_id: int, reason: str | None, stranded: tuple[int, ...]) -> None:
        super().__init__(token_id, reason)
        self.stranded = stranded
        self.args = (f"{self.args[0]}; tokens {list(stranded)} could not be moved back",)


class PoolInvariantError(PoolError):
    """Raised when the post-operation state violates one or more invariants."""

    code = "invariant"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
