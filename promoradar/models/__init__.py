"""
数据模型包初始化文件
"""

from .common import CamelModel, normalize_brand_key
from .promotion import (
    Promotion,
    PromotionCreate,
    PromotionUpdate,
    PromotionExclusion,
    PromotionFilter,
    PromotionStatus,
    PromoType,
    EventTag,
    StackingRule,
    QuotaSnapshot,
    QuotaStats,
)
from .store import Store, StoreCreate, StoreUpdate
from .brand import Brand, BrandCreate, BrandUpdate, BrandSummary
from .user import User
from .usage import PromotionUsageSummary, UserRanking
from .catalog import PromotionDetail, PromotionDataset, ClaimResult

__all__ = [
    "CamelModel",
    "normalize_brand_key",
    "Promotion",
    "PromotionCreate",
    "PromotionUpdate",
    "PromotionExclusion",
    "PromotionFilter",
    "PromotionStatus",
    "PromoType",
    "EventTag",
    "StackingRule",
    "QuotaSnapshot",
    "QuotaStats",
    "Store",
    "StoreCreate",
    "StoreUpdate",
    "Brand",
    "BrandCreate",
    "BrandUpdate",
    "BrandSummary",
    "User",
    "PromotionUsageSummary",
    "UserRanking",
    "PromotionDetail",
    "PromotionDataset",
    "ClaimResult",
]
