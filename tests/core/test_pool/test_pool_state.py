"""Tests for morphie_pool/core/pool/state.py: deterministic snapshots."""

from morphie_pool.core.pool import PoolConfig, StakerRecord, StakingPool, pool_to_dict
from morphie_pool.core.pool.state import RECORD_FIELD_NAMES, record_to_dict
from morphie_pool.integration import LocalCollectible, LocalRewardToken, ManualClock

POOL = "0xpool"
OWNER = "0xowner"


def _pool_with_two_stakers() -> StakingPool:
    clock = ManualClock(50)
    nft = LocalCollectible(POOL)
    memo = LocalRewardToken()
    pool = StakingPool(nft, memo, PoolConfig(3, 10), OWNER, clock=clock)
    for who in ("0xzed", "0xamy"):
        ids = nft.give_away(who, 3)
        nft.set_approval_for_all(who, POOL)
        pool.stake_batch(who, ids)
        clock.advance(10)
    pool.unstake("0xzed", 0)
    return pool


class TestRecordFields:
    def test_names(self):
        assert RECORD_FIELD_NAMES == ("balance", "last_update_time", "rewards_outstanding", "rewards_paid")

    def test_record_to_dict(self):
        r = StakerRecord(balance=2, last_update_time=7, rewards_outstanding=3, rewards_paid=4)
        assert record_to_dict(r) == {
            "balance": 2,
            "last_update_time": 7,
            "rewards_outstanding": 3,
            "rewards_paid": 4,
        }
        assert r.lifetime_earned == 7


class TestPoolToDict:
    def test_empty_pool(self):
        pool = StakingPool(LocalCollectible(POOL), LocalRewardToken(), PoolConfig(1, 2), OWNER)
        assert pool_to_dict(pool) == {
            "owner": OWNER,
            "config": {"reward_unit_amount": 1, "accrual_period_length": 2},
            "totals": {"total_staked": 0, "total_rewards_paid": 0},
            "stakers": {},
        }

    def test_stakers_sorted_and_lists_in_registry_order(self):
        snap = pool_to_dict(_pool_with_two_stakers())
        assert list(snap["stakers"]) == ["0xamy", "0xzed"]
        assert snap["stakers"]["0xzed"]["staked_token_ids"] == [2, 1]
        assert snap["stakers"]["0xamy"]["staked_token_ids"] == [3, 4, 5]
        assert snap["totals"]["total_staked"] == 5

    def test_settlement_is_visible(self):
        snap = pool_to_dict(_pool_with_two_stakers())
        zed = snap["stakers"]["0xzed"]
        # 3 tokens * 3 units * 20s / 10s, settled by the unstake at t=70
        assert zed["rewards_outstanding"] == 18
        assert zed["last_update_time"] == 70
        assert zed["balance"] == 2

    def test_deterministic(self):
        assert pool_to_dict(_pool_with_two_stakers()) == pool_to_dict(_pool_with_two_stakers())
