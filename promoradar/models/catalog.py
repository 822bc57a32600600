"""
公开目录接口的组合返回模型
"""

from typing import List, Optional
from pydantic import Field

from promoradar.models.common import CamelModel
from promoradar.models.brand import BrandSummary
from promoradar.models.promotion import Promotion, PromotionExclusion, QuotaSnapshot
from promoradar.models.store import Store
from promoradar.models.usage import PromotionUsageSummary


class PromotionDetail(CamelModel):
    """活动详情：活动本身、品牌门市以及不适用门市"""

    promotion: Promotion
    stores: List[Store] = Field(default_factory=list)
    exclusions: List[PromotionExclusion] = Field(default_factory=list)


class PromotionDataset(CamelModel):
    """前端一次性加载的目录数据"""

    promotions: List[Promotion] = Field(default_factory=list)
    stores: List[Store] = Field(default_factory=list)
    exclusions: List[PromotionExclusion] = Field(default_factory=list)
    brands: List[BrandSummary] = Field(default_factory=list)


class ClaimResult(CamelModel):
    """领取结果"""

    success: bool = True
    usage: Optional[PromotionUsageSummary] = None
    quota: QuotaSnapshot
