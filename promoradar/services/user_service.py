"""
用户个人数据业务服务层
个人主页、关注品牌、收藏活动、领取记录与排行
"""

from typing import List, Optional

from promoradar.core.exceptions import NotFoundException, ValidationException
from promoradar.models.usage import PromotionUsageSummary, UserRanking
from promoradar.models.user import UserProfileResponse
from promoradar.repositories.brand_repository import AdminBrandRepository
from promoradar.repositories.favorite_repository import FavoriteBrandRepository, FavoritePromotionRepository
from promoradar.repositories.usage_repository import UsageRepository
from promoradar.repositories.user_repository import UserRepository


def _sanitize_brand_name(name: Optional[str]) -> str:
    return (name or "").strip()


def _valid_promo_id(promo_id: Optional[int]) -> bool:
    return isinstance(promo_id, int) and promo_id > 0


class UserService:
    """用户个人数据服务"""

    def __init__(
        self,
        user_repo: UserRepository,
        favorite_brand_repo: FavoriteBrandRepository,
        favorite_promotion_repo: FavoritePromotionRepository,
        admin_brand_repo: AdminBrandRepository,
        usage_repo: UsageRepository
    ):
        self.user_repo = user_repo
        self.favorite_brand_repo = favorite_brand_repo
        self.favorite_promotion_repo = favorite_promotion_repo
        self.admin_brand_repo = admin_brand_repo
        self.usage_repo = usage_repo

    async def get_profile(self, user_id: int) -> UserProfileResponse:
        db_user = await self.user_repo.get_by_id(user_id)
        if not db_user:
            raise NotFoundException("用户不存在")

        return UserProfileResponse(
            user=self.user_repo.to_model(db_user),
            brand_favorites=await self.favorite_brand_repo.find_by_user(user_id),
            promotion_favorites=await self.favorite_promotion_repo.find_by_user(user_id),
            admin_brands=await self.admin_brand_repo.find_brands_by_admin(user_id),
            usage=await self.usage_repo.list_usage(user_id)
        )

    # 关注品牌

    async def list_brand_favorites(self, user_id: int) -> List[str]:
        return await self.favorite_brand_repo.find_by_user(user_id)

    async def add_brand_favorite(self, user_id: int, brand_name: Optional[str]) -> List[str]:
        normalized = _sanitize_brand_name(brand_name)
        if not normalized:
            raise ValidationException("品牌名称不能为空")
        await self.favorite_brand_repo.add(user_id, normalized)
        return await self.favorite_brand_repo.find_by_user(user_id)

    async def remove_brand_favorite(self, user_id: int, brand_name: Optional[str]) -> List[str]:
        normalized = _sanitize_brand_name(brand_name)
        if normalized:
            await self.favorite_brand_repo.remove(user_id, normalized)
        return await self.favorite_brand_repo.find_by_user(user_id)

    async def clear_brand_favorites(self, user_id: int) -> List[str]:
        await self.favorite_brand_repo.clear(user_id)
        return await self.favorite_brand_repo.find_by_user(user_id)

    # 收藏活动

    async def list_promotion_favorites(self, user_id: int) -> List[int]:
        return await self.favorite_promotion_repo.find_by_user(user_id)

    async def add_promotion_favorite(self, user_id: int, promo_id: Optional[int]) -> List[int]:
        if not _valid_promo_id(promo_id):
            raise ValidationException("活动ID无效")
        await self.favorite_promotion_repo.add(user_id, promo_id)
        return await self.favorite_promotion_repo.find_by_user(user_id)

    async def remove_promotion_favorite(self, user_id: int, promo_id: Optional[int]) -> List[int]:
        """无效ID不做处理，直接返回当前列表"""
        if _valid_promo_id(promo_id):
            await self.favorite_promotion_repo.remove(user_id, promo_id)
        return await self.favorite_promotion_repo.find_by_user(user_id)

    async def clear_promotion_favorites(self, user_id: int) -> List[int]:
        await self.favorite_promotion_repo.clear(user_id)
        return await self.favorite_promotion_repo.find_by_user(user_id)

    # 管理品牌与领取记录

    async def admin_brands(self, user_id: int) -> List[str]:
        return await self.admin_brand_repo.find_brands_by_admin(user_id)

    async def promotion_usage(self, user_id: int) -> List[PromotionUsageSummary]:
        return await self.usage_repo.list_usage(user_id)

    async def user_rankings(self, limit: int = 100) -> List[UserRanking]:
        return await self.usage_repo.user_rankings(limit=max(1, min(limit, 500)))
