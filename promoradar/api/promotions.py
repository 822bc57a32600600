import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from starlette.datastructures import QueryParams

from promoradar.api.deps import get_current_user_id, get_promotion_service
from promoradar.models.catalog import ClaimResult, PromotionDetail
from promoradar.models.promotion import Promotion, PromotionFilter
from promoradar.services.promotion_filters import SortBy
from promoradar.services.promotion_service import PromotionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/promotions", tags=["优惠活动"])


def _list_param(query: QueryParams, name: str) -> List[str]:
    """支持 ?a=x&a=y 以及 ?a=x,y 两种写法"""
    values = []
    for raw in query.getlist(name):
        values.extend(part.strip() for part in raw.split(",") if part.strip())
    return values


def _bool_param(query: QueryParams, name: str) -> Optional[bool]:
    raw = query.get(name)
    if raw is None:
        return None
    lowered = raw.strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    return None


def parse_promotion_filter(query: QueryParams) -> PromotionFilter:
    """解析查询条件，格式不正确时按无条件处理"""
    try:
        return PromotionFilter(
            search=query.get("search") or None,
            brand_names=_list_param(query, "brandNames"),
            event_tags=_list_param(query, "eventTags"),
            promo_types=_list_param(query, "promoTypes"),
            only_active=bool(_bool_param(query, "onlyActive")),
            need_membership=_bool_param(query, "needMembership")
        )
    except ValidationError as e:
        logger.info(f"活动查询条件无效，忽略过滤: {e}")
        return PromotionFilter()


def parse_sort_by(query: QueryParams) -> Optional[SortBy]:
    raw = query.get("sortBy")
    if not raw:
        return None
    try:
        return SortBy(raw)
    except ValueError:
        return None


@router.get("", response_model=List[Promotion])
async def list_promotions(request: Request, service: PromotionService = Depends(get_promotion_service)):
    """公开活动列表"""
    query = request.query_params
    return await service.list_promotions(parse_promotion_filter(query), parse_sort_by(query))


@router.get("/dataset")
async def get_dataset(service: PromotionService = Depends(get_promotion_service)):
    """前端目录数据（带缓存）"""
    return await service.get_dataset()


@router.get("/{promo_id}", response_model=PromotionDetail)
async def get_promotion(promo_id: int, service: PromotionService = Depends(get_promotion_service)):
    """活动详情"""
    return await service.get_detail(promo_id)


@router.post("/{promo_id}/claim", response_model=ClaimResult)
async def claim_promotion(
    promo_id: int,
    user_id: int = Depends(get_current_user_id),
    service: PromotionService = Depends(get_promotion_service)
):
    """领取活动"""
    return await service.claim(user_id, promo_id)
