"""Tests for morphie_pool/integration/assets.py and clock.py."""

import pytest

from morphie_pool.core.pool.ports import MINTING_DISABLED, NOT_OWNER
from morphie_pool.integration import LocalCollectible, LocalRewardToken, ManualClock
from morphie_pool.integration.assets import NOT_APPROVED, NOT_IN_CUSTODY, UNKNOWN_TOKEN

POOL = "0xpool"
ALICE = "0xa11ce"
BOB = "0xb0b"


class TestLocalCollectible:
    def test_give_away_is_sequential(self):
        nft = LocalCollectible(POOL)
        assert nft.give_away(ALICE, 2) == [0, 1]
        assert nft.give_away(BOB, 1) == [2]
        assert nft.owner_of(2) == BOB
        assert nft.balance_of(ALICE) == 2

    def test_give_away_rejects_non_positive(self):
        with pytest.raises(ValueError):
            LocalCollectible(POOL).give_away(ALICE, 0)

    def test_take_custody_requires_approval(self):
        nft = LocalCollectible(POOL)
        nft.give_away(ALICE, 1)
        assert nft.take_custody(ALICE, 0).error == NOT_APPROVED
        nft.set_approval_for_all(ALICE, POOL)
        assert nft.take_custody(ALICE, 0).ok
        assert nft.owner_of(0) == POOL

    def test_take_custody_checks_owner(self):
        nft = LocalCollectible(POOL)
        nft.give_away(ALICE, 1)
        nft.set_approval_for_all(BOB, POOL)
        assert nft.take_custody(BOB, 0).error == NOT_OWNER
        assert nft.take_custody(BOB, 9).error == UNKNOWN_TOKEN

    def test_revoked_approval(self):
        nft = LocalCollectible(POOL)
        nft.give_away(ALICE, 1)
        nft.set_approval_for_all(ALICE, POOL)
        nft.set_approval_for_all(ALICE, POOL, approved=False)
        assert not nft.is_approved_for_all(ALICE, POOL)
        assert not nft.take_custody(ALICE, 0).ok

    def test_return_custody_only_from_pool(self):
        nft = LocalCollectible(POOL)
        nft.give_away(ALICE, 1)
        assert nft.return_custody(ALICE, 0).error == NOT_IN_CUSTODY
        nft.set_approval_for_all(ALICE, POOL)
        nft.take_custody(ALICE, 0)
        assert nft.return_custody(ALICE, 0).ok
        assert nft.owner_of(0) == ALICE

    def test_owner_transfer(self):
        nft = LocalCollectible(POOL)
        nft.give_away(ALICE, 1)
        assert nft.transfer(BOB, ALICE, 0).error == NOT_OWNER
        assert nft.transfer(ALICE, BOB, 0).ok
        assert nft.owner_of(0) == BOB


class TestLocalRewardToken:
    def test_minting_off_by_default(self):
        memo = LocalRewardToken()
        r = memo.credit_reward(ALICE, 5)
        assert not r.ok
        assert r.error == MINTING_DISABLED
        assert memo.balance_of(ALICE) == 0

    def test_credit_after_allow(self):
        memo = LocalRewardToken()
        memo.allow_pool_minting()
        assert memo.credit_reward(ALICE, 5).ok
        assert memo.credit_reward(ALICE, 7).ok
        assert memo.balance_of(ALICE) == 12
        assert memo.total_supply == 12

    def test_disallow(self):
        memo = LocalRewardToken()
        memo.allow_pool_minting()
        memo.disallow_pool_minting()
        assert not memo.credit_reward(ALICE, 1).ok

    def test_negative_amount_is_a_caller_bug(self):
        memo = LocalRewardToken()
        memo.allow_pool_minting()
        with pytest.raises(ValueError):
            memo.credit_reward(ALICE, -1)


class TestManualClock:
    def test_advance_and_set(self):
        clock = ManualClock(10)
        assert clock() == 10
        assert clock.advance(5) == 15
        assert clock.set(20) == 20
        assert clock.now == 20

    def test_never_moves_backwards(self):
        clock = ManualClock(10)
        with pytest.raises(ValueError):
            clock.advance(-1)
        with pytest.raises(ValueError):
            clock.set(9)
        with pytest.raises(ValueError):
            ManualClock(-1)
