"""
数据库模型包初始化文件
"""

from .user_db import UserDB, FavoriteBrandDB, FavoritePromotionDB
from .brand_db import BrandDB, BrandCategoryDB, AdminBrandDB
from .store_db import StoreDB
from .promotion_db import PromotionDB, PromotionStoreExclusionDB
from .usage_db import PromotionUsageDB

__all__ = [
    "UserDB",
    "FavoriteBrandDB",
    "FavoritePromotionDB",
    "BrandDB",
    "BrandCategoryDB",
    "AdminBrandDB",
    "StoreDB",
    "PromotionDB",
    "PromotionStoreExclusionDB",
    "PromotionUsageDB",
]
