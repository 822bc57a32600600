"""
领取记录Repository测试 - 使用SQLite测试库
"""

import pytest
from datetime import datetime, timezone

from promoradar.repositories.usage_repository import UsageRepository


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.mark.asyncio
class TestUsageRepository:
    """领取记录Repository测试类"""

    async def test_counts(self, db_session, factory):
        """测试按用户、按时间段、按活动计数"""
        await factory.brand()
        alice = await factory.user("alice")
        bob = await factory.user("bob")
        promo = await factory.promotion()

        repo = UsageRepository(db_session)
        await repo.add_usage(alice.user_id, promo.promo_id, used_at=utc(2025, 3, 1, 2))
        await repo.add_usage(alice.user_id, promo.promo_id, used_at=utc(2025, 3, 1, 20))
        await repo.add_usage(bob.user_id, promo.promo_id, used_at=utc(2025, 3, 2, 1))
        await repo.commit()

        assert await repo.count_for_user(alice.user_id, promo.promo_id) == 2
        assert await repo.count_for_user(bob.user_id, promo.promo_id) == 1
        assert await repo.count_for_promotion(promo.promo_id) == 3
        assert await repo.count_distinct_users(promo.promo_id) == 2
        # 区间左闭右开
        assert await repo.count_between(promo.promo_id, utc(2025, 3, 1, 2), utc(2025, 3, 1, 20)) == 1
        assert await repo.count_between(promo.promo_id, utc(2025, 3, 1), utc(2025, 3, 3)) == 3

    async def test_rollback_discards_flushed_usage(self, db_session, factory):
        """测试回滚后领取记录不保留"""
        await factory.brand()
        user = await factory.user()
        promo = await factory.promotion()
        # 回滚会让会话中的对象过期，先取出ID
        user_id, promo_id = user.user_id, promo.promo_id

        repo = UsageRepository(db_session)
        await repo.add_usage(user_id, promo_id)
        assert await repo.count_for_promotion(promo_id) == 1
        await repo.rollback()

        assert await repo.count_for_promotion(promo_id) == 0

    async def test_daily_usage_uses_report_timezone(self, db_session, factory):
        """测试按UTC+8自然日统计，升序且没有领取的日期不出现"""
        await factory.brand()
        user = await factory.user()
        promo = await factory.promotion()

        repo = UsageRepository(db_session)
        # 2025-03-01 23:30 (+8)
        await repo.add_usage(user.user_id, promo.promo_id, used_at=utc(2025, 3, 1, 15, 30))
        # 2025-03-02 00:10 (+8)
        await repo.add_usage(user.user_id, promo.promo_id, used_at=utc(2025, 3, 1, 16, 10))
        await repo.add_usage(user.user_id, promo.promo_id, used_at=utc(2025, 3, 2, 3))
        # 2025-03-05
        await repo.add_usage(user.user_id, promo.promo_id, used_at=utc(2025, 3, 5, 3))
        # 统计窗口之前
        await repo.add_usage(user.user_id, promo.promo_id, used_at=utc(2025, 2, 1, 3))
        await repo.commit()

        daily = await repo.daily_usage(promo.promo_id, since=utc(2025, 2, 28, 16))

        assert [(item.date, item.count) for item in daily] == [
            ("2025-03-01", 1),
            ("2025-03-02", 2),
            ("2025-03-05", 1),
        ]

    async def test_list_usage_orders_by_last_used(self, db_session, factory):
        """测试用户领取汇总按最近领取时间倒序"""
        await factory.brand()
        user = await factory.user()
        older = await factory.promotion(title="早餐优惠")
        newer = await factory.promotion(title="晚餐优惠")

        repo = UsageRepository(db_session)
        await repo.add_usage(user.user_id, older.promo_id, used_at=utc(2025, 3, 1, 1))
        await repo.add_usage(user.user_id, older.promo_id, used_at=utc(2025, 3, 2, 1))
        await repo.add_usage(user.user_id, newer.promo_id, used_at=utc(2025, 3, 3, 1))
        await repo.commit()

        usage = await repo.list_usage(user.user_id)

        assert [item.promo_id for item in usage] == [newer.promo_id, older.promo_id]
        assert usage[1].count == 2
        assert usage[1].last_used == utc(2025, 3, 2, 1)
        assert await repo.list_usage(user.user_id + 100) == []

    async def test_usage_for_promotion(self, db_session, factory):
        await factory.brand()
        user = await factory.user()
        promo = await factory.promotion()

        repo = UsageRepository(db_session)
        assert await repo.usage_for_promotion(user.user_id, promo.promo_id) is None

        await repo.add_usage(user.user_id, promo.promo_id, used_at=utc(2025, 3, 1, 1))
        summary = await repo.usage_for_promotion(user.user_id, promo.promo_id)
        assert summary.count == 1
        assert summary.last_used == utc(2025, 3, 1, 1)

    async def test_rankings_share_rank_on_ties(self, db_session, factory):
        """测试排行榜并列名次（1, 1, 3）"""
        await factory.brand()
        alice = await factory.user("alice")
        bob = await factory.user("bob")
        carol = await factory.user("carol")
        promo = await factory.promotion()

        repo = UsageRepository(db_session)
        for user, times in ((alice, 2), (bob, 2), (carol, 1)):
            for _ in range(times):
                await repo.add_usage(user.user_id, promo.promo_id)
        await repo.commit()

        rankings = await repo.user_rankings()

        assert [(item.username, item.total_usage, item.rank) for item in rankings] == [
            ("alice", 2, 1),
            ("bob", 2, 1),
            ("carol", 1, 3),
        ]

        limited = await repo.user_rankings(limit=1)
        assert len(limited) == 1
        assert limited[0].username == "alice"
