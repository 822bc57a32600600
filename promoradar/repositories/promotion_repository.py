"""
优惠活动数据库操作层
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from promoradar.core.timezone import ensure_utc, utcnow
from promoradar.models.common import normalize_brand_key
from promoradar.models.promotion import (
    Promotion, PromotionCreate, PromotionExclusion, PromotionFilter, PromotionStatus
)
from promoradar.models.database.promotion_db import PromotionDB, PromotionStoreExclusionDB

# 公开目录中可见的状态，草稿只在后台可见
PUBLIC_STATUSES = (PromotionStatus.PUBLISHED.value, PromotionStatus.CANCELED.value)


def contains_pattern(keyword: str) -> str:
    """LIKE包含匹配的模式，关键字中的 % 和 _ 按字面匹配"""
    escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PromotionRepository:
    """优惠活动数据库操作类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, promo_id: int) -> Optional[PromotionDB]:
        """根据活动ID获取活动"""
        result = await self.db.execute(
            select(PromotionDB).where(PromotionDB.promo_id == promo_id)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, promo_id: int) -> Optional[PromotionDB]:
        """
        获取活动并加行锁（SELECT ... FOR UPDATE）

        同一活动的并发领取在此处排队，锁持有到事务结束
        """
        result = await self.db.execute(
            select(PromotionDB)
            .where(PromotionDB.promo_id == promo_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_public(
        self,
        promo_filter: Optional[PromotionFilter] = None,
        current_time: Optional[datetime] = None
    ) -> List[PromotionDB]:
        """公开活动列表，按条件过滤"""
        promo_filter = promo_filter or PromotionFilter()
        conditions = [PromotionDB.status.in_(PUBLIC_STATUSES)]

        if promo_filter.search:
            keyword = contains_pattern(promo_filter.search.strip())
            conditions.append(or_(
                PromotionDB.title.ilike(keyword, escape="\\"),
                PromotionDB.description.ilike(keyword, escape="\\")
            ))
        if promo_filter.brand_names:
            conditions.append(PromotionDB.brand_name.in_(promo_filter.brand_names))
        if promo_filter.event_tags:
            conditions.append(PromotionDB.event_tag.in_(promo_filter.event_tags))
        if promo_filter.promo_types:
            conditions.append(PromotionDB.promo_type.in_(promo_filter.promo_types))
        if promo_filter.need_membership is not None:
            conditions.append(PromotionDB.need_membership == promo_filter.need_membership)
        if promo_filter.only_active:
            now = ensure_utc(current_time) if current_time else utcnow()
            conditions.append(PromotionDB.start_datetime <= now)
            conditions.append(PromotionDB.end_datetime > now)

        result = await self.db.execute(
            select(PromotionDB).where(and_(*conditions)).order_by(PromotionDB.end_datetime, PromotionDB.promo_id)
        )
        return result.scalars().all()

    async def list_by_brand(self, brand_name: str) -> List[PromotionDB]:
        """品牌的所有活动（含草稿），供后台使用"""
        result = await self.db.execute(
            select(PromotionDB)
            .where(PromotionDB.brand_name == normalize_brand_key(brand_name))
            .order_by(PromotionDB.promo_id.desc())
        )
        return result.scalars().all()

    async def create(self, payload: PromotionCreate, creator_id: int) -> PromotionDB:
        """创建活动，状态固定为草稿"""
        promotion = PromotionDB(
            brand_name=payload.brand_name,
            title=payload.title,
            description=payload.description or "",
            promo_type=payload.promo_type,
            event_tag=payload.event_tag,
            start_datetime=payload.start_datetime,
            end_datetime=payload.end_datetime,
            stacking_rule=payload.stacking_rule,
            need_membership=payload.need_membership,
            need_code=payload.need_code,
            per_user_limit=payload.per_user_limit,
            global_quota=payload.global_quota,
            daily_quota=payload.daily_quota,
            creator_id=creator_id,
            status=PromotionStatus.DRAFT.value,
            last_updated=utcnow()
        )
        self.db.add(promotion)
        await self.db.flush()
        return promotion

    async def commit(self) -> None:
        await self.db.commit()

    async def update(self, promotion: PromotionDB, updates: Dict[str, Any]) -> PromotionDB:
        """部分更新活动字段"""
        if not updates:
            return promotion
        for field, value in updates.items():
            setattr(promotion, field, value)
        promotion.last_updated = utcnow()
        await self.db.flush()
        return promotion

    async def set_status(self, promotion: PromotionDB, status: PromotionStatus) -> PromotionDB:
        promotion.status = status.value
        promotion.last_updated = utcnow()
        await self.db.flush()
        return promotion

    async def list_exclusions(self, promo_id: int) -> List[PromotionStoreExclusionDB]:
        result = await self.db.execute(
            select(PromotionStoreExclusionDB)
            .where(PromotionStoreExclusionDB.promo_id == promo_id)
            .order_by(PromotionStoreExclusionDB.store_id)
        )
        return result.scalars().all()

    async def list_all_exclusions(self) -> List[PromotionStoreExclusionDB]:
        result = await self.db.execute(
            select(PromotionStoreExclusionDB).order_by(
                PromotionStoreExclusionDB.promo_id, PromotionStoreExclusionDB.store_id
            )
        )
        return result.scalars().all()

    async def replace_exclusions(self, promo_id: int, store_ids: List[int]) -> List[PromotionStoreExclusionDB]:
        """整体替换活动的不适用门市"""
        await self.db.execute(
            delete(PromotionStoreExclusionDB).where(PromotionStoreExclusionDB.promo_id == promo_id)
        )
        # 去重并保持顺序
        for store_id in dict.fromkeys(store_ids):
            self.db.add(PromotionStoreExclusionDB(promo_id=promo_id, store_id=store_id))
        await self.db.flush()
        return await self.list_exclusions(promo_id)

    def to_model(self, db_promotion: PromotionDB) -> Promotion:
        """转换为Pydantic模型"""
        return Promotion(
            promo_id=db_promotion.promo_id,
            brand_name=db_promotion.brand_name,
            title=db_promotion.title,
            description=db_promotion.description or "",
            promo_type=db_promotion.promo_type,
            event_tag=db_promotion.event_tag,
            start_datetime=db_promotion.start_datetime,
            end_datetime=db_promotion.end_datetime,
            stacking_rule=db_promotion.stacking_rule,
            need_membership=bool(db_promotion.need_membership),
            need_code=bool(db_promotion.need_code),
            per_user_limit=db_promotion.per_user_limit or 0,
            global_quota=db_promotion.global_quota,
            daily_quota=db_promotion.daily_quota,
            creator_id=db_promotion.creator_id,
            last_updated=db_promotion.last_updated,
            status=db_promotion.status
        )

    def to_exclusion_model(self, db_exclusion: PromotionStoreExclusionDB) -> PromotionExclusion:
        return PromotionExclusion(
            promo_id=db_exclusion.promo_id,
            store_id=db_exclusion.store_id,
            reason=db_exclusion.reason
        )
