"""Tests for morphie_pool/core/pool/invariants.py: ledger reconciliation checks."""

from dataclasses import replace

import pytest

from morphie_pool.core.pool import Action, ActionParams, PoolConfig, PoolInvariantError, StakingPool, pool_to_dict
from morphie_pool.core.pool.invariants import INVARIANT_REGISTRY, check_all
from morphie_pool.integration import LocalCollectible, LocalRewardToken, ManualClock

POOL = "0xpool"
OWNER = "0xowner"
ALICE = "0xa11ce"
BOB = "0xb0b"


def _staked_pool(check_invariants: bool = False) -> StakingPool:
    clock = ManualClock(100)
    nft = LocalCollectible(POOL)
    memo = LocalRewardToken()
    memo.allow_pool_minting()
    pool = StakingPool(nft, memo, PoolConfig(10, 60), OWNER, clock=clock, check_invariants=check_invariants)
    for who, count in ((ALICE, 3), (BOB, 2)):
        ids = nft.give_away(who, count)
        nft.set_approval_for_all(who, POOL)
        pool.stake_batch(who, ids)
    clock.advance(120)
    pool.claim_rewards(ALICE)
    return pool


class TestHealthyPool:
    def test_fresh_pool_passes_all(self):
        pool = StakingPool(LocalCollectible(POOL), LocalRewardToken(), PoolConfig(1, 1), OWNER)
        assert check_all(pool) == []

    def test_staked_pool_passes_all(self):
        assert check_all(_staked_pool()) == []

    def test_registry_has_8_invariants(self):
        assert len(INVARIANT_REGISTRY) == 8


class TestViolationsDetected:
    def test_total_staked_drift(self):
        pool = _staked_pool()
        pool._totals = replace(pool.totals, total_staked=pool.totals.total_staked + 1)
        violations = check_all(pool)
        assert "inv_total_staked_matches_balances" in violations
        assert "inv_total_staked_matches_custody" in violations

    def test_balance_drift(self):
        pool = _staked_pool()
        pool._records[ALICE] = replace(pool.record(ALICE), balance=2)
        violations = check_all(pool)
        assert "inv_balance_matches_custody_list" in violations
        assert "inv_total_staked_matches_balances" in violations

    def test_paid_drift(self):
        pool = _staked_pool()
        pool._records[BOB] = replace(pool.record(BOB), rewards_paid=1)
        assert "inv_total_paid_matches_records" in check_all(pool)

    def test_negative_outstanding(self):
        pool = _staked_pool()
        pool._records[BOB] = replace(pool.record(BOB), rewards_outstanding=-1)
        assert "inv_records_non_negative" in check_all(pool)

    def test_custodian_without_record(self):
        pool = _staked_pool()
        del pool._records[BOB]
        assert "inv_custodians_have_records" in check_all(pool)


class TestCheckOnCommit:
    def test_corruption_surfaces_on_next_operation(self):
        pool = _staked_pool(check_invariants=True)
        pool._totals = replace(pool.totals, total_rewards_paid=0)
        with pytest.raises(PoolInvariantError) as exc_info:
            pool.claim_rewards(BOB)
        assert "inv_total_paid_matches_records" in exc_info.value.violations

    def test_disabled_by_default(self):
        pool = _staked_pool()
        pool._totals = replace(pool.totals, total_rewards_paid=0)
        pool.claim_rewards(BOB)

    def test_rejected_operation_leaves_pool_and_assets_untouched(self, monkeypatch):
        clock = ManualClock(100)
        nft = LocalCollectible(POOL)
        memo = LocalRewardToken()
        memo.allow_pool_minting()
        pool = StakingPool(nft, memo, PoolConfig(10, 60), OWNER, clock=clock, check_invariants=True)
        ids = nft.give_away(ALICE, 2)
        nft.set_approval_for_all(ALICE, POOL)
        pool.stake(ALICE, ids[0])
        clock.advance(60)
        before = pool_to_dict(pool)
        events = pool.events

        monkeypatch.setitem(INVARIANT_REGISTRY, "inv_always_broken", lambda p: False)
        with pytest.raises(PoolInvariantError) as exc_info:
            pool.stake(ALICE, ids[1])
        assert exc_info.value.violations == ["inv_always_broken"]

        result = pool.apply(ActionParams(Action.CLAIM_REWARDS, ALICE))
        assert not result.accepted
        assert result.rejection.startswith("invariant:")

        assert pool_to_dict(pool) == before
        assert pool.events == events
        assert nft.owner_of(ids[1]) == ALICE
        assert memo.balance_of(ALICE) == 0
