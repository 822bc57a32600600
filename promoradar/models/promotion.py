"""
优惠活动相关数据模型
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from promoradar.core.timezone import ensure_utc
from promoradar.models.common import CamelModel, normalize_brand_key


class PromoType(str, Enum):
    """优惠类型枚举"""
    BUY1GET1 = "Buy1Get1"
    DISCOUNT = "Discount"
    SECOND_CUP = "Second_Cup"
    SPECIAL_PRICE = "Special_Price"
    GIFT_WITH_PURCHASE = "Gift_With_Purchase"
    LIMITED_OFFER = "Limited_Offer"
    SEASONAL = "Seasonal"
    OTHER = "Other"


class EventTag(str, Enum):
    """活动标签枚举"""
    HALLOWEEN = "Halloween"
    CHRISTMAS = "Christmas"
    NEW_YEAR = "New_Year"
    SEASONAL = "Seasonal"
    LIMITED_TIME = "Limited_Time"
    MEMBER_EXCLUSIVE = "Member_Exclusive"
    PAYMENT_PROMO = "Payment_Promo"
    FOOD_WASTE_REDUCTION = "Food_Waste_Reduction"
    DISCOUNT_FESTIVAL = "Discount_Festival"
    NEW_PRODUCT = "New_Product"
    WEEKEND_DEAL = "Weekend_Deal"
    MCDELIVERY = "McDelivery"
    BREAKFAST = "Breakfast"
    OTHER = "Other"


class StackingRule(str, Enum):
    """叠加规则枚举"""
    CANNOT_STACK = "Cannot_Stack"
    STACK_WITH_MEMBER = "Stack_With_Member"
    STACK_WITH_DISCOUNT = "Stack_With_Discount"
    STACK_WITH_POINTS = "Stack_With_Points"
    STACK_ALL = "Stack_All"
    STORE_SPECIFIC = "Store_Specific"
    OTHER = "Other"


class PromotionStatus(str, Enum):
    """活动状态枚举：Draft -> Published -> Canceled"""
    DRAFT = "Draft"
    PUBLISHED = "Published"
    CANCELED = "Canceled"


class Promotion(CamelModel):
    """优惠活动模型"""

    promo_id: int = Field(..., description="活动ID")
    brand_name: str = Field(..., description="品牌代号")
    title: str = Field(..., description="活动标题")
    description: str = Field(default="", description="活动描述")
    promo_type: PromoType = Field(..., description="优惠类型")
    event_tag: EventTag = Field(..., description="活动标签")
    start_datetime: datetime = Field(..., description="开始时间")
    end_datetime: datetime = Field(..., description="结束时间（不含）")
    stacking_rule: Optional[StackingRule] = Field(None, description="叠加规则")
    need_membership: bool = Field(default=False, description="是否需要会员")
    need_code: bool = Field(default=False, description="是否需要优惠码")
    per_user_limit: int = Field(default=0, ge=0, description="单用户领取上限，0为不限")
    global_quota: Optional[int] = Field(None, description="总名额，空为不限")
    daily_quota: Optional[int] = Field(None, description="每日名额，空为不限")
    creator_id: Optional[int] = Field(None, description="创建人")
    last_updated: Optional[datetime] = Field(None, description="最后更新时间")
    status: PromotionStatus = Field(default=PromotionStatus.DRAFT, description="活动状态")

    @field_validator("start_datetime", "end_datetime", "last_updated")
    @classmethod
    def as_utc(cls, v):
        return ensure_utc(v)

    def is_active_at(self, moment: datetime) -> bool:
        """moment 是否落在 [start, end) 内"""
        return self.start_datetime <= moment < self.end_datetime


class PromotionCreate(CamelModel):
    """创建活动请求"""

    brand_name: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")
    promo_type: PromoType
    event_tag: EventTag
    start_datetime: datetime
    end_datetime: datetime
    stacking_rule: Optional[StackingRule] = None
    need_membership: bool = False
    need_code: bool = False
    per_user_limit: int = Field(default=0, ge=0)
    global_quota: Optional[int] = Field(None, ge=1)
    daily_quota: Optional[int] = Field(None, ge=1)

    @field_validator("brand_name")
    @classmethod
    def normalize_brand(cls, v):
        key = normalize_brand_key(v)
        if not key:
            raise ValueError("品牌代号不能为空")
        return key

    @field_validator("start_datetime", "end_datetime")
    @classmethod
    def as_utc(cls, v):
        return ensure_utc(v)

    @model_validator(mode="after")
    def validate_period(self):
        """验证活动时间"""
        if self.end_datetime <= self.start_datetime:
            raise ValueError("结束时间必须晚于开始时间")
        return self


class PromotionUpdate(CamelModel):
    """更新活动请求（部分更新，不能修改状态和品牌）"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    promo_type: Optional[PromoType] = None
    event_tag: Optional[EventTag] = None
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    stacking_rule: Optional[StackingRule] = None
    need_membership: Optional[bool] = None
    need_code: Optional[bool] = None
    per_user_limit: Optional[int] = Field(None, ge=0)
    global_quota: Optional[int] = Field(None, ge=1)
    daily_quota: Optional[int] = Field(None, ge=1)

    @field_validator("start_datetime", "end_datetime")
    @classmethod
    def as_utc(cls, v):
        return ensure_utc(v)

    @model_validator(mode="after")
    def validate_period(self):
        if self.start_datetime and self.end_datetime and self.end_datetime <= self.start_datetime:
            raise ValueError("结束时间必须晚于开始时间")
        return self


class PromotionExclusion(CamelModel):
    """活动不适用门市"""

    promo_id: int
    store_id: int
    reason: Optional[str] = None


class ExclusionUpdate(CamelModel):
    """整体替换活动的不适用门市"""

    store_ids: List[int] = Field(default_factory=list)


class PromotionFilter(CamelModel):
    """公开活动列表查询条件"""

    search: Optional[str] = None
    brand_names: List[str] = Field(default_factory=list)
    event_tags: List[str] = Field(default_factory=list)
    promo_types: List[str] = Field(default_factory=list)
    only_active: bool = False
    need_membership: Optional[bool] = None

    @field_validator("brand_names")
    @classmethod
    def normalize_brands(cls, v):
        return [normalize_brand_key(name) for name in v if normalize_brand_key(name)]


class QuotaSnapshot(CamelModel):
    """领取后的名额快照"""

    global_quota: Optional[int] = None
    daily_quota: Optional[int] = None
    per_user_limit: int = 0
    total_used: int = 0
    today_used: int = 0
    remaining: Optional[int] = None


class DailyUsage(CamelModel):
    """按天统计的领取次数"""

    date: str
    count: int


class QuotaStats(CamelModel):
    """活动名额统计"""

    global_quota: Optional[int] = None
    daily_quota: Optional[int] = None
    total_used: int = 0
    distinct_users: int = 0
    remaining: Optional[int] = None
    daily: List[DailyUsage] = Field(default_factory=list)


class PromotionQuotaReport(CamelModel):
    promotion: Promotion
    stats: QuotaStats


def remaining_quota(global_quota: Optional[int], total_used: int) -> Optional[int]:
    """剩余总名额，不限总量时为None"""
    if global_quota is None:
        return None
    return max(global_quota - total_used, 0)
