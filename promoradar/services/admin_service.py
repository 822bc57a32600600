"""
品牌后台业务服务层
品牌、门市、活动生命周期、不适用门市以及名额统计，所有操作都要求调用者是对应品牌的管理员
"""

import logging
from datetime import datetime
from typing import List, Optional

from promoradar.core.config import settings
from promoradar.core.exceptions import (
    ConflictException, ForbiddenException, NotFoundException, ValidationException
)
from promoradar.core.timezone import ensure_utc, trailing_window_start, utcnow
from promoradar.models.behavior import AdminAction
from promoradar.models.brand import Brand, BrandCreate, BrandSummary, BrandUpdate
from promoradar.models.common import normalize_brand_key
from promoradar.models.promotion import (
    Promotion, PromotionCreate, PromotionExclusion, PromotionQuotaReport, PromotionStatus,
    PromotionUpdate, QuotaStats, remaining_quota
)
from promoradar.models.store import Store, StoreCreate, StoreUpdate
from promoradar.repositories.behavior_repository import BehaviorRepository, behavior_repository
from promoradar.repositories.brand_repository import AdminBrandRepository, BrandRepository
from promoradar.repositories.promotion_repository import PromotionRepository
from promoradar.repositories.store_repository import StoreRepository
from promoradar.repositories.usage_repository import UsageRepository
from promoradar.repositories.user_repository import UserRepository
from promoradar.services.promotion_service import invalidate_dataset_cache

logger = logging.getLogger(__name__)

# 可以显式清空的字段
NULLABLE_PROMOTION_FIELDS = {"stacking_rule", "global_quota", "daily_quota"}
NULLABLE_BRAND_FIELDS = {"logo_url", "secondary_color"}
NULLABLE_STORE_FIELDS = {"lat", "lng", "region"}


def _partial_updates(payload, nullable_fields) -> dict:
    """部分更新：只取请求中出现的字段，不可为空的字段忽略null"""
    return {
        field: value for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in nullable_fields
    }


class AdminService:
    """品牌后台业务服务"""

    def __init__(
        self,
        promotion_repo: PromotionRepository,
        store_repo: StoreRepository,
        brand_repo: BrandRepository,
        admin_brand_repo: AdminBrandRepository,
        user_repo: UserRepository,
        usage_repo: UsageRepository,
        behavior_repo: Optional[BehaviorRepository] = None
    ):
        self.promotion_repo = promotion_repo
        self.store_repo = store_repo
        self.brand_repo = brand_repo
        self.admin_brand_repo = admin_brand_repo
        self.user_repo = user_repo
        self.usage_repo = usage_repo
        self.behavior_repo = behavior_repo or behavior_repository

    async def _commit_and_invalidate(self) -> None:
        """先提交再清除目录缓存，各仓库共用同一会话"""
        await self.promotion_repo.commit()
        await invalidate_dataset_cache()

    async def ensure_brand_admin(self, user_id: int, brand_name: str) -> None:
        if not await self.admin_brand_repo.is_admin_for_brand(user_id, brand_name):
            logger.warning(f"越权操作 user_id={user_id} brand={brand_name}")
            raise ForbiddenException("无权操作此品牌")

    # ---------- 品牌 ----------

    async def list_managed_brands(self, user_id: int) -> List[BrandSummary]:
        """调用者管理的品牌，缺少品牌资料时使用默认展示信息"""
        brand_keys = await self.admin_brand_repo.find_brands_by_admin(user_id)
        if not brand_keys:
            return []

        brands = await self.brand_repo.get_by_keys(brand_keys)
        categories = await self.brand_repo.list_categories()
        summaries = []
        for key in brand_keys:
            normalized = normalize_brand_key(key)
            db_brand = brands.get(normalized)
            if db_brand is None:
                logger.warning(f"品牌 {key} 的资料未找到")
            summaries.append(BrandSummary.from_brand(
                key,
                self.brand_repo.to_model(db_brand) if db_brand else None,
                categories.get(normalized, [])
            ))
        return summaries

    async def create_brand(self, user_id: int, payload: BrandCreate) -> Brand:
        """创建品牌，创建者自动成为品牌管理员"""
        if await self.brand_repo.get_by_key(payload.key):
            raise ConflictException("品牌代号已存在")

        db_brand = await self.brand_repo.create(payload)
        await self.admin_brand_repo.add_admin(user_id, payload.key)

        user = await self.user_repo.get_by_id(user_id)
        if user and not user.is_admin:
            await self.user_repo.set_admin_flag(user, True)

        await self._commit_and_invalidate()
        logger.info(f"品牌创建成功 brand={payload.key} user_id={user_id}")
        return self.brand_repo.to_model(db_brand)

    async def update_brand(self, user_id: int, brand_key: str, payload: BrandUpdate) -> Brand:
        await self.ensure_brand_admin(user_id, brand_key)
        db_brand = await self.brand_repo.get_by_key(brand_key)
        if not db_brand:
            raise NotFoundException("品牌不存在")

        db_brand = await self.brand_repo.update(db_brand, _partial_updates(payload, NULLABLE_BRAND_FIELDS))
        await self._commit_and_invalidate()
        return self.brand_repo.to_model(db_brand)

    # ---------- 门市 ----------

    async def list_stores(self, user_id: int, brand_name: str) -> List[Store]:
        await self.ensure_brand_admin(user_id, brand_name)
        stores = await self.store_repo.list_by_brand(brand_name)
        return [self.store_repo.to_model(store) for store in stores]

    async def create_store(self, user_id: int, payload: StoreCreate) -> Store:
        await self.ensure_brand_admin(user_id, payload.brand_name)
        if not await self.brand_repo.get_by_key(payload.brand_name):
            raise NotFoundException(f"品牌 {payload.brand_name} 不存在")

        db_store = await self.store_repo.create(payload)
        await self.behavior_repo.log_admin_action(
            admin_id=user_id,
            action=AdminAction.EDIT_STORE.value,
            brand_name=payload.brand_name,
            store_id=db_store.store_id
        )
        await self._commit_and_invalidate()
        return self.store_repo.to_model(db_store)

    async def update_store(self, user_id: int, store_id: int, payload: StoreUpdate) -> Store:
        """更新门市；变更所属品牌时，原品牌和目标品牌都需要有管理权限"""
        db_store = await self.store_repo.get_by_id(store_id)
        if not db_store:
            raise NotFoundException("门市不存在")

        updates = _partial_updates(payload, NULLABLE_STORE_FIELDS)
        target_brand = updates.get("brand_name") or db_store.brand_name
        await self.ensure_brand_admin(user_id, db_store.brand_name)
        if target_brand != db_store.brand_name:
            await self.ensure_brand_admin(user_id, target_brand)
            if not await self.brand_repo.get_by_key(target_brand):
                raise NotFoundException(f"品牌 {target_brand} 不存在")

        db_store = await self.store_repo.update(db_store, updates)
        await self.behavior_repo.log_admin_action(
            admin_id=user_id,
            action=AdminAction.EDIT_STORE.value,
            brand_name=target_brand,
            store_id=store_id
        )
        await self._commit_and_invalidate()
        return self.store_repo.to_model(db_store)

    # ---------- 活动 ----------

    async def list_promotions(self, user_id: int, brand_name: str) -> List[Promotion]:
        await self.ensure_brand_admin(user_id, brand_name)
        promotions = await self.promotion_repo.list_by_brand(brand_name)
        return [self.promotion_repo.to_model(promo) for promo in promotions]

    async def create_promotion(self, user_id: int, payload: PromotionCreate) -> Promotion:
        """创建活动，状态一律为草稿"""
        await self.ensure_brand_admin(user_id, payload.brand_name)
        if not await self.brand_repo.get_by_key(payload.brand_name):
            raise NotFoundException(f"品牌 {payload.brand_name} 不存在")

        db_promotion = await self.promotion_repo.create(payload, creator_id=user_id)
        await self.behavior_repo.log_admin_action(
            admin_id=user_id,
            action=AdminAction.CREATE_PROMO.value,
            brand_name=payload.brand_name,
            promo_id=db_promotion.promo_id
        )
        await self._commit_and_invalidate()
        logger.info(f"活动创建成功 promo_id={db_promotion.promo_id} brand={payload.brand_name}")
        return self.promotion_repo.to_model(db_promotion)

    async def _get_promotion(self, promo_id: int):
        db_promotion = await self.promotion_repo.get_by_id(promo_id)
        if not db_promotion:
            raise NotFoundException("活动不存在")
        return db_promotion

    async def update_promotion(self, user_id: int, promo_id: int, payload: PromotionUpdate) -> Promotion:
        """只有草稿可以修改，状态不能通过更新接口变更"""
        db_promotion = await self._get_promotion(promo_id)
        if db_promotion.status != PromotionStatus.DRAFT.value:
            raise ValidationException("已发布或已取消的活动不可修改")
        await self.ensure_brand_admin(user_id, db_promotion.brand_name)

        updates = _partial_updates(payload, NULLABLE_PROMOTION_FIELDS)
        start = updates.get("start_datetime", ensure_utc(db_promotion.start_datetime))
        end = updates.get("end_datetime", ensure_utc(db_promotion.end_datetime))
        if end <= start:
            raise ValidationException("结束时间必须晚于开始时间")

        db_promotion = await self.promotion_repo.update(db_promotion, updates)
        await self.behavior_repo.log_admin_action(
            admin_id=user_id,
            action=AdminAction.UPDATE_PROMO.value,
            brand_name=db_promotion.brand_name,
            promo_id=promo_id
        )
        await self._commit_and_invalidate()
        return self.promotion_repo.to_model(db_promotion)

    async def publish_promotion(self, user_id: int, promo_id: int) -> Promotion:
        db_promotion = await self._get_promotion(promo_id)
        if db_promotion.status != PromotionStatus.DRAFT.value:
            raise ValidationException("活动已发布或已取消")
        await self.ensure_brand_admin(user_id, db_promotion.brand_name)

        db_promotion = await self.promotion_repo.set_status(db_promotion, PromotionStatus.PUBLISHED)
        await self._commit_and_invalidate()
        logger.info(f"活动已发布 promo_id={promo_id}")
        return self.promotion_repo.to_model(db_promotion)

    async def cancel_promotion(self, user_id: int, promo_id: int) -> Promotion:
        """取消活动；已取消的活动原样返回"""
        db_promotion = await self._get_promotion(promo_id)
        if db_promotion.status == PromotionStatus.CANCELED.value:
            return self.promotion_repo.to_model(db_promotion)
        await self.ensure_brand_admin(user_id, db_promotion.brand_name)

        db_promotion = await self.promotion_repo.set_status(db_promotion, PromotionStatus.CANCELED)
        await self.behavior_repo.log_admin_action(
            admin_id=user_id,
            action=AdminAction.DELETE_PROMO.value,
            brand_name=db_promotion.brand_name,
            promo_id=promo_id
        )
        await self._commit_and_invalidate()
        logger.info(f"活动已取消 promo_id={promo_id}")
        return self.promotion_repo.to_model(db_promotion)

    # ---------- 不适用门市 ----------

    async def get_exclusions(self, user_id: int, promo_id: int) -> List[PromotionExclusion]:
        db_promotion = await self._get_promotion(promo_id)
        await self.ensure_brand_admin(user_id, db_promotion.brand_name)
        exclusions = await self.promotion_repo.list_exclusions(promo_id)
        return [self.promotion_repo.to_exclusion_model(item) for item in exclusions]

    async def set_exclusions(self, user_id: int, promo_id: int, store_ids: List[int]) -> List[PromotionExclusion]:
        """整体替换不适用门市，门市必须属于活动所在品牌"""
        db_promotion = await self._get_promotion(promo_id)
        await self.ensure_brand_admin(user_id, db_promotion.brand_name)

        stores = await self.store_repo.list_by_brand(db_promotion.brand_name)
        valid_ids = {store.store_id for store in stores}
        invalid_ids = [store_id for store_id in store_ids if store_id not in valid_ids]
        if invalid_ids:
            raise ValidationException(f"无效的门市 ID: {', '.join(str(i) for i in invalid_ids)}")

        exclusions = await self.promotion_repo.replace_exclusions(promo_id, store_ids)
        await self._commit_and_invalidate()
        return [self.promotion_repo.to_exclusion_model(item) for item in exclusions]

    # ---------- 名额统计 ----------

    async def get_quota_report(
        self,
        user_id: int,
        promo_id: int,
        now: Optional[datetime] = None
    ) -> PromotionQuotaReport:
        """累计领取、去重用户数、剩余名额以及近N天按日统计"""
        db_promotion = await self._get_promotion(promo_id)
        await self.ensure_brand_admin(user_id, db_promotion.brand_name)

        moment = ensure_utc(now) if now else utcnow()
        total_used = await self.usage_repo.count_for_promotion(promo_id)
        distinct_users = await self.usage_repo.count_distinct_users(promo_id)
        daily = await self.usage_repo.daily_usage(
            promo_id, since=trailing_window_start(moment, settings.usage_report_days)
        )

        return PromotionQuotaReport(
            promotion=self.promotion_repo.to_model(db_promotion),
            stats=QuotaStats(
                global_quota=db_promotion.global_quota,
                daily_quota=db_promotion.daily_quota,
                total_used=total_used,
                distinct_users=distinct_users,
                remaining=remaining_quota(db_promotion.global_quota, total_used),
                daily=daily
            )
        )
