from typing import List

from fastapi import APIRouter, Depends, Query

from promoradar.api.deps import get_admin_service, get_current_user_id
from promoradar.models.brand import Brand, BrandCreate, BrandSummary, BrandUpdate
from promoradar.models.promotion import (
    ExclusionUpdate, Promotion, PromotionCreate, PromotionExclusion, PromotionQuotaReport, PromotionUpdate
)
from promoradar.models.store import Store, StoreCreate, StoreUpdate
from promoradar.services.admin_service import AdminService

router = APIRouter(prefix="/api/admin", tags=["品牌后台"])


# 品牌

@router.get("/brands", response_model=List[BrandSummary])
async def list_brands(
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    """当前用户管理的品牌"""
    return await service.list_managed_brands(user_id)


@router.post("/brands", response_model=Brand, status_code=201)
async def create_brand(
    payload: BrandCreate,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.create_brand(user_id, payload)


@router.put("/brands/{brand_key}", response_model=Brand)
async def update_brand(
    brand_key: str,
    payload: BrandUpdate,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.update_brand(user_id, brand_key, payload)


# 门市

@router.get("/stores", response_model=List[Store])
async def list_stores(
    brand_name: str = Query(..., alias="brandName", min_length=1),
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.list_stores(user_id, brand_name)


@router.post("/stores", response_model=Store, status_code=201)
async def create_store(
    payload: StoreCreate,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.create_store(user_id, payload)


@router.put("/stores/{store_id}", response_model=Store)
async def update_store(
    store_id: int,
    payload: StoreUpdate,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.update_store(user_id, store_id, payload)


# 活动

@router.get("/promotions", response_model=List[Promotion])
async def list_promotions(
    brand_name: str = Query(..., alias="brandName", min_length=1),
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    """品牌的全部活动（含草稿）"""
    return await service.list_promotions(user_id, brand_name)


@router.post("/promotions", response_model=Promotion, status_code=201)
async def create_promotion(
    payload: PromotionCreate,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.create_promotion(user_id, payload)


@router.put("/promotions/{promo_id}", response_model=Promotion)
async def update_promotion(
    promo_id: int,
    payload: PromotionUpdate,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.update_promotion(user_id, promo_id, payload)


@router.post("/promotions/{promo_id}/publish", response_model=Promotion)
async def publish_promotion(
    promo_id: int,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.publish_promotion(user_id, promo_id)


@router.post("/promotions/{promo_id}/cancel", response_model=Promotion)
async def cancel_promotion(
    promo_id: int,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.cancel_promotion(user_id, promo_id)


@router.get("/promotions/{promo_id}/quota", response_model=PromotionQuotaReport)
async def get_promotion_quota(
    promo_id: int,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    """名额使用统计"""
    return await service.get_quota_report(user_id, promo_id)


@router.get("/promotions/{promo_id}/exclusions", response_model=List[PromotionExclusion])
async def get_exclusions(
    promo_id: int,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    return await service.get_exclusions(user_id, promo_id)


@router.put("/promotions/{promo_id}/exclusions", response_model=List[PromotionExclusion])
async def set_exclusions(
    promo_id: int,
    payload: ExclusionUpdate,
    user_id: int = Depends(get_current_user_id),
    service: AdminService = Depends(get_admin_service)
):
    """整体替换不适用门市"""
    return await service.set_exclusions(user_id, promo_id, payload.store_ids)
