"""
服务包初始化文件
"""

from .common_cache import SimpleCache, catalog_cache
from .claim_locks import ClaimLockRegistry, claim_locks
from .promotion_service import PromotionService, invalidate_dataset_cache
from .admin_service import AdminService
from .user_service import UserService
from .auth_service import AuthService
from .tracking_service import TrackingService

__all__ = [
    "SimpleCache",
    "catalog_cache",
    "ClaimLockRegistry",
    "claim_locks",
    "PromotionService",
    "invalidate_dataset_cache",
    "AdminService",
    "UserService",
    "AuthService",
    "TrackingService",
]
