"""
优惠活动业务服务层
提供公开目录查询以及领取（名额校验 + 记录）逻辑
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from promoradar.core.config import settings
from promoradar.core.exceptions import (
    NotFoundException, PersistenceException, QuotaExceededException, ValidationException
)
from promoradar.core.timezone import day_bounds, ensure_utc, utcnow
from promoradar.models.brand import BrandSummary
from promoradar.models.catalog import ClaimResult, PromotionDataset, PromotionDetail
from promoradar.models.promotion import (
    Promotion, PromotionFilter, PromotionStatus, QuotaSnapshot, remaining_quota
)
from promoradar.repositories.brand_repository import BrandRepository
from promoradar.repositories.promotion_repository import PromotionRepository
from promoradar.repositories.store_repository import StoreRepository
from promoradar.repositories.usage_repository import UsageRepository
from promoradar.services.claim_locks import ClaimLockRegistry, claim_locks
from promoradar.services.common_cache import catalog_cache
from promoradar.services.promotion_filters import SortBy, sort_promotions

logger = logging.getLogger(__name__)

DATASET_CACHE_KEY = "dataset"


async def invalidate_dataset_cache() -> None:
    """后台有任何写操作后清除目录缓存"""
    await catalog_cache.delete(DATASET_CACHE_KEY)


class PromotionService:
    """优惠活动业务服务"""

    def __init__(
        self,
        promotion_repo: PromotionRepository,
        store_repo: StoreRepository,
        brand_repo: BrandRepository,
        usage_repo: UsageRepository,
        locks: Optional[ClaimLockRegistry] = None
    ):
        self.promotion_repo = promotion_repo
        self.store_repo = store_repo
        self.brand_repo = brand_repo
        self.usage_repo = usage_repo
        self.locks = locks or claim_locks
        self.cache = catalog_cache
        self.cache_ttl = settings.dataset_cache_ttl

    async def list_promotions(
        self,
        promo_filter: Optional[PromotionFilter] = None,
        sort_by: Optional[SortBy] = None
    ) -> List[Promotion]:
        """公开活动列表"""
        db_promotions = await self.promotion_repo.list_public(promo_filter)
        promotions = [self.promotion_repo.to_model(db_promo) for db_promo in db_promotions]
        if sort_by is None:
            return promotions

        brand_names = {}
        if SortBy(sort_by) == SortBy.BRAND:
            brands = await self.brand_repo.list_all()
            brand_names = {brand.brand_name: brand.display_name for brand in brands}
        return sort_promotions(promotions, sort_by, brand_names)

    async def get_detail(self, promo_id: int) -> PromotionDetail:
        """活动详情，草稿对外不可见"""
        db_promotion = await self.promotion_repo.get_by_id(promo_id)
        if not db_promotion or db_promotion.status == PromotionStatus.DRAFT.value:
            raise NotFoundException("优惠活动不存在")

        stores = await self.store_repo.list_by_brand(db_promotion.brand_name)
        exclusions = await self.promotion_repo.list_exclusions(promo_id)
        return PromotionDetail(
            promotion=self.promotion_repo.to_model(db_promotion),
            stores=[self.store_repo.to_model(store) for store in stores],
            exclusions=[self.promotion_repo.to_exclusion_model(item) for item in exclusions]
        )

    async def get_dataset(self, use_cache: bool = True) -> Dict[str, Any]:
        """前端目录数据（活动、门市、不适用门市、品牌）"""
        if use_cache:
            cached = await self.cache.get(DATASET_CACHE_KEY)
            if cached:
                return cached

        db_promotions = await self.promotion_repo.list_public()
        stores = await self.store_repo.list_all()
        exclusions = await self.promotion_repo.list_all_exclusions()
        brands = await self.brand_repo.list_all()
        categories = await self.brand_repo.list_categories()

        dataset = PromotionDataset(
            promotions=[self.promotion_repo.to_model(item) for item in db_promotions],
            stores=[self.store_repo.to_model(item) for item in stores],
            exclusions=[self.promotion_repo.to_exclusion_model(item) for item in exclusions],
            brands=[
                BrandSummary.from_brand(
                    brand.brand_name,
                    self.brand_repo.to_model(brand),
                    categories.get(brand.brand_name, [])
                )
                for brand in brands
            ]
        )
        payload = dataset.model_dump(mode="json", by_alias=True)

        if use_cache:
            await self.cache.set(DATASET_CACHE_KEY, payload, ttl=self.cache_ttl)

        return payload

    async def claim(self, user_id: int, promo_id: int, now: Optional[datetime] = None) -> ClaimResult:
        """
        领取活动

        在同一事务内完成：锁定活动行 -> 校验时间窗 -> 依次校验个人上限、每日名额、总名额
        -> 插入领取记录 -> 提交。任何失败都会回滚，不会留下领取记录。

        Raises:
            NotFoundException: 活动不存在或未发布
            ValidationException: 当前不在活动时间内
            QuotaExceededException: 名额已满，quota_type 标明是哪一项
            PersistenceException: 数据库读写失败
        """
        moment = ensure_utc(now) if now else utcnow()

        async with self.locks.lock_for(promo_id):
            try:
                db_promotion = await self.promotion_repo.get_for_update(promo_id)
                if not db_promotion or db_promotion.status != PromotionStatus.PUBLISHED.value:
                    raise NotFoundException("优惠活动不存在")

                promotion = self.promotion_repo.to_model(db_promotion)
                if not promotion.is_active_at(moment):
                    raise ValidationException("不在活动时间内")

                if promotion.per_user_limit > 0:
                    user_count = await self.usage_repo.count_for_user(user_id, promo_id)
                    if user_count >= promotion.per_user_limit:
                        raise QuotaExceededException(QuotaExceededException.PER_USER)

                day_start, day_end = day_bounds(moment)
                today_used = await self.usage_repo.count_between(promo_id, day_start, day_end)
                if promotion.daily_quota is not None and today_used >= promotion.daily_quota:
                    raise QuotaExceededException(QuotaExceededException.DAILY)

                total_used = await self.usage_repo.count_for_promotion(promo_id)
                if promotion.global_quota is not None and total_used >= promotion.global_quota:
                    raise QuotaExceededException(QuotaExceededException.GLOBAL)

                await self.usage_repo.add_usage(user_id, promo_id, used_at=moment)
                usage = await self.usage_repo.usage_for_promotion(user_id, promo_id)
                await self.usage_repo.commit()

            except QuotaExceededException as e:
                await self.usage_repo.rollback()
                logger.info(f"领取被拒绝 promo_id={promo_id} user_id={user_id} quota_type={e.quota_type}")
                raise
            except SQLAlchemyError as e:
                await self.usage_repo.rollback()
                logger.error(f"领取记录写入失败 promo_id={promo_id} user_id={user_id}: {e}")
                raise PersistenceException("领取记录写入失败，请稍后重试") from e
            except Exception as e:
                await self.usage_repo.rollback()
                logger.warning(f"领取失败 promo_id={promo_id} user_id={user_id}: {e}")
                raise

        logger.info(f"领取成功 promo_id={promo_id} user_id={user_id}")
        return ClaimResult(
            success=True,
            usage=usage,
            quota=QuotaSnapshot(
                global_quota=promotion.global_quota,
                daily_quota=promotion.daily_quota,
                per_user_limit=promotion.per_user_limit,
                total_used=total_used + 1,
                today_used=today_used + 1,
                remaining=remaining_quota(promotion.global_quota, total_used + 1)
            )
        )
