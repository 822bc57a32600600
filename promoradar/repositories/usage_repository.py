"""
领取记录数据库操作层
"""

from collections import Counter
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, and_, desc, func
from sqlalchemy.ext.asyncio import AsyncSession

from promoradar.core.timezone import ensure_utc, local_date, utcnow
from promoradar.models.promotion import DailyUsage
from promoradar.models.usage import PromotionUsageSummary, UserRanking
from promoradar.models.database.usage_db import PromotionUsageDB
from promoradar.models.database.user_db import UserDB


class UsageRepository:
    """领取记录数据库操作类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_usage(self, user_id: int, promo_id: int, used_at: Optional[datetime] = None) -> PromotionUsageDB:
        """插入一条领取记录"""
        usage = PromotionUsageDB(
            user_id=user_id,
            promo_id=promo_id,
            used_at=ensure_utc(used_at) if used_at else utcnow()
        )
        self.db.add(usage)
        await self.db.flush()  # 获取生成的ID
        return usage

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

    async def count_for_user(self, user_id: int, promo_id: int) -> int:
        """用户对某活动的领取次数"""
        result = await self.db.execute(
            select(func.count(PromotionUsageDB.usage_id)).where(
                and_(
                    PromotionUsageDB.user_id == user_id,
                    PromotionUsageDB.promo_id == promo_id
                )
            )
        )
        return result.scalar() or 0

    async def count_between(self, promo_id: int, start: datetime, end: datetime) -> int:
        """[start, end) 内某活动的领取次数"""
        result = await self.db.execute(
            select(func.count(PromotionUsageDB.usage_id)).where(
                and_(
                    PromotionUsageDB.promo_id == promo_id,
                    PromotionUsageDB.used_at >= start,
                    PromotionUsageDB.used_at < end
                )
            )
        )
        return result.scalar() or 0

    async def count_for_promotion(self, promo_id: int) -> int:
        """某活动的累计领取次数"""
        result = await self.db.execute(
            select(func.count(PromotionUsageDB.usage_id)).where(PromotionUsageDB.promo_id == promo_id)
        )
        return result.scalar() or 0

    async def count_distinct_users(self, promo_id: int) -> int:
        result = await self.db.execute(
            select(func.count(func.distinct(PromotionUsageDB.user_id))).where(
                PromotionUsageDB.promo_id == promo_id
            )
        )
        return result.scalar() or 0

    async def daily_usage(self, promo_id: int, since: datetime) -> List[DailyUsage]:
        """
        按自然日统计领取次数

        日期按报表时区划分，升序返回，没有领取的日期不出现
        """
        result = await self.db.execute(
            select(PromotionUsageDB.used_at).where(
                and_(
                    PromotionUsageDB.promo_id == promo_id,
                    PromotionUsageDB.used_at >= since
                )
            )
        )
        buckets = Counter(local_date(used_at).isoformat() for used_at in result.scalars().all())
        return [DailyUsage(date=day, count=count) for day, count in sorted(buckets.items())]

    async def usage_for_promotion(self, user_id: int, promo_id: int) -> Optional[PromotionUsageSummary]:
        """用户对单个活动的领取汇总，没有领取过时返回None"""
        result = await self.db.execute(
            select(
                func.count(PromotionUsageDB.usage_id).label("count"),
                func.max(PromotionUsageDB.used_at).label("last_used")
            ).where(
                and_(
                    PromotionUsageDB.user_id == user_id,
                    PromotionUsageDB.promo_id == promo_id
                )
            )
        )
        row = result.one()
        if not row.count:
            return None
        return PromotionUsageSummary(
            promo_id=promo_id,
            count=row.count,
            last_used=self._as_datetime(row.last_used)
        )

    async def list_usage(self, user_id: int) -> List[PromotionUsageSummary]:
        """用户领取过的所有活动，按最近领取时间倒序"""
        last_used = func.max(PromotionUsageDB.used_at).label("last_used")
        result = await self.db.execute(
            select(
                PromotionUsageDB.promo_id,
                func.count(PromotionUsageDB.usage_id).label("count"),
                last_used
            ).where(
                PromotionUsageDB.user_id == user_id
            ).group_by(PromotionUsageDB.promo_id).order_by(desc(last_used), PromotionUsageDB.promo_id)
        )
        return [
            PromotionUsageSummary(
                promo_id=row.promo_id,
                count=row.count,
                last_used=self._as_datetime(row.last_used)
            )
            for row in result.fetchall()
        ]

    async def user_rankings(self, limit: int = 100) -> List[UserRanking]:
        """
        用户领取次数排行

        次数相同的用户共享名次（1, 1, 3）
        """
        total = func.count(PromotionUsageDB.usage_id).label("total_usage")
        result = await self.db.execute(
            select(
                PromotionUsageDB.user_id,
                UserDB.username,
                total
            ).outerjoin(
                UserDB, UserDB.user_id == PromotionUsageDB.user_id
            ).group_by(
                PromotionUsageDB.user_id, UserDB.username
            ).order_by(desc(total), PromotionUsageDB.user_id).limit(limit)
        )

        rankings: List[UserRanking] = []
        current_rank = 0
        previous_total = None
        for index, row in enumerate(result.fetchall()):
            if row.total_usage != previous_total:
                current_rank = index + 1
                previous_total = row.total_usage
            rankings.append(UserRanking(
                user_id=row.user_id,
                username=row.username or f"用户 {row.user_id}",
                total_usage=row.total_usage,
                rank=current_rank
            ))
        return rankings

    @staticmethod
    def _as_datetime(value) -> Optional[datetime]:
        # SQLite 上聚合函数返回字符串
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        return ensure_utc(value)
