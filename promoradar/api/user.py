from typing import List

from fastapi import APIRouter, Depends, Query

from promoradar.api.deps import get_current_user_id, get_user_service
from promoradar.models.usage import PromotionUsageSummary, UserRanking
from promoradar.models.user import BrandFavoriteRequest, PromotionFavoriteRequest, UserProfileResponse
from promoradar.services.user_service import UserService

router = APIRouter(prefix="/api/user", tags=["用户"])


@router.get("/profile", response_model=UserProfileResponse)
async def get_profile(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    """个人主页数据"""
    return await service.get_profile(user_id)


@router.get("/favorites/brands", response_model=List[str])
async def list_brand_favorites(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return await service.list_brand_favorites(user_id)


@router.post("/favorites/brands", response_model=List[str])
async def add_brand_favorite(
    payload: BrandFavoriteRequest,
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return await service.add_brand_favorite(user_id, payload.brand_name)


@router.delete("/favorites/brands", response_model=List[str])
async def clear_brand_favorites(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return await service.clear_brand_favorites(user_id)


@router.delete("/favorites/brands/{brand_name}", response_model=List[str])
async def remove_brand_favorite(
    brand_name: str,
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return await service.remove_brand_favorite(user_id, brand_name)


@router.get("/favorites/promotions", response_model=List[int])
async def list_promotion_favorites(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return await service.list_promotion_favorites(user_id)


@router.post("/favorites/promotions", response_model=List[int])
async def add_promotion_favorite(
    payload: PromotionFavoriteRequest,
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return await service.add_promotion_favorite(user_id, payload.promo_id)


@router.delete("/favorites/promotions", response_model=List[int])
async def clear_promotion_favorites(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return await service.clear_promotion_favorites(user_id)


@router.delete("/favorites/promotions/{promo_id}", response_model=List[int])
async def remove_promotion_favorite(
    promo_id: str,
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    # 非数字ID不报错，直接返回当前列表
    parsed = int(promo_id) if promo_id.isdigit() else None
    return await service.remove_promotion_favorite(user_id, parsed)


@router.get("/admin-brands", response_model=List[str])
async def list_admin_brands(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return await service.admin_brands(user_id)


@router.get("/promotion-usage", response_model=List[PromotionUsageSummary])
async def list_promotion_usage(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    return await service.promotion_usage(user_id)


@router.get("/rankings", response_model=List[UserRanking])
async def user_rankings(
    limit: int = Query(100, ge=1, le=500),
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    """领取次数排行"""
    return await service.user_rankings(limit)
