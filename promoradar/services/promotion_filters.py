"""
活动过滤与排序
纯函数实现，客户端目录和服务端列表接口共用
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from promoradar.core.timezone import ensure_utc, utcnow
from promoradar.models.common import normalize_brand_key
from promoradar.models.promotion import Promotion, PromotionStatus


class SortBy(str, Enum):
    """排序方式"""
    SOONEST_END = "soonest_end"  # 最快结束
    NEWEST = "newest"            # 最新开始
    BRAND = "brand"              # 品牌名称


class PromotionFilters(BaseModel):
    """过滤条件状态"""

    search: str = ""
    brand_keys: List[str] = Field(default_factory=list)
    event_tags: List[str] = Field(default_factory=list)
    promo_types: List[str] = Field(default_factory=list)
    only_active: bool = True
    need_membership: Optional[bool] = None  # None 表示不限
    sort_by: SortBy = SortBy.SOONEST_END

    def reset(self) -> "PromotionFilters":
        return PromotionFilters()


def _display_name(promotion: Promotion, brand_names: Optional[Dict[str, str]]) -> str:
    key = normalize_brand_key(promotion.brand_name)
    if brand_names and key in brand_names:
        return brand_names[key]
    return promotion.brand_name


def matches(
    promotion: Promotion,
    filters: PromotionFilters,
    brand_names: Optional[Dict[str, str]] = None,
    now: Optional[datetime] = None
) -> bool:
    """单个活动是否满足过滤条件，已取消的活动一律不满足"""
    if promotion.status == PromotionStatus.CANCELED:
        return False

    keyword = filters.search.strip().lower()
    if keyword:
        haystack = " ".join([
            promotion.title,
            promotion.description or "",
            promotion.brand_name,
            _display_name(promotion, brand_names),
        ]).lower()
        if keyword not in haystack:
            return False

    if filters.brand_keys:
        wanted = {normalize_brand_key(key) for key in filters.brand_keys}
        if normalize_brand_key(promotion.brand_name) not in wanted:
            return False

    if filters.event_tags and promotion.event_tag not in filters.event_tags:
        return False

    if filters.promo_types and promotion.promo_type not in filters.promo_types:
        return False

    if filters.only_active:
        moment = ensure_utc(now) if now else utcnow()
        if not promotion.is_active_at(moment):
            return False

    if filters.need_membership is not None and promotion.need_membership != filters.need_membership:
        return False

    return True


def filter_promotions(
    promotions: Iterable[Promotion],
    filters: PromotionFilters,
    brand_names: Optional[Dict[str, str]] = None,
    now: Optional[datetime] = None
) -> List[Promotion]:
    return [promo for promo in promotions if matches(promo, filters, brand_names, now)]


def sort_promotions(
    promotions: Iterable[Promotion],
    sort_by: SortBy = SortBy.SOONEST_END,
    brand_names: Optional[Dict[str, str]] = None
) -> List[Promotion]:
    """排序，相同排序键保持原有顺序"""
    items = list(promotions)
    sort_by = SortBy(sort_by)
    if sort_by == SortBy.NEWEST:
        return sorted(items, key=lambda promo: promo.start_datetime, reverse=True)
    if sort_by == SortBy.BRAND:
        return sorted(items, key=lambda promo: _display_name(promo, brand_names).casefold())
    return sorted(items, key=lambda promo: promo.end_datetime)


def prioritize_followed(promotions: Iterable[Promotion], followed_brands: Iterable[str]) -> List[Promotion]:
    """关注品牌的活动排在前面，两组内部顺序不变"""
    followed = {normalize_brand_key(brand) for brand in followed_brands}
    items = list(promotions)
    if not followed:
        return items
    first = [promo for promo in items if normalize_brand_key(promo.brand_name) in followed]
    rest = [promo for promo in items if normalize_brand_key(promo.brand_name) not in followed]
    return first + rest


def apply_filters(
    promotions: Iterable[Promotion],
    filters: PromotionFilters,
    followed_brands: Iterable[str] = (),
    brand_names: Optional[Dict[str, str]] = None,
    now: Optional[datetime] = None
) -> List[Promotion]:
    """过滤 -> 排序 -> 关注品牌优先"""
    filtered = filter_promotions(promotions, filters, brand_names, now)
    ordered = sort_promotions(filtered, filters.sort_by, brand_names)
    return prioritize_followed(ordered, followed_brands)
