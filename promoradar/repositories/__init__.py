"""
仓库包初始化文件 - 数据库访问层
"""

from .promotion_repository import PromotionRepository
from .usage_repository import UsageRepository
from .store_repository import StoreRepository
from .brand_repository import BrandRepository, AdminBrandRepository
from .user_repository import UserRepository
from .favorite_repository import FavoriteBrandRepository, FavoritePromotionRepository
from .behavior_repository import BehaviorRepository, behavior_repository

__all__ = [
    "PromotionRepository",
    "UsageRepository",
    "StoreRepository",
    "BrandRepository",
    "AdminBrandRepository",
    "UserRepository",
    "FavoriteBrandRepository",
    "FavoritePromotionRepository",
    "BehaviorRepository",
    "behavior_repository",
]
