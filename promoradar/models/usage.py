"""
领取记录相关数据模型
"""

from datetime import datetime
from typing import Optional
from pydantic import Field

from promoradar.models.common import CamelModel


class PromotionUsageSummary(CamelModel):
    """用户对某个活动的领取汇总"""

    promo_id: int = Field(..., description="活动ID")
    count: int = Field(..., ge=0, description="领取次数")
    last_used: Optional[datetime] = Field(None, description="最近一次领取时间")


class UserRanking(CamelModel):
    """用户领取排行"""

    user_id: int
    username: str
    total_usage: int
    rank: int
