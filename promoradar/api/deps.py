"""
路由依赖：数据库会话、当前用户、服务实例
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from promoradar.core.database import get_db_session
from promoradar.core.exceptions import AuthenticationException
from promoradar.core.security import decode_access_token
from promoradar.repositories.brand_repository import AdminBrandRepository, BrandRepository
from promoradar.repositories.favorite_repository import FavoriteBrandRepository, FavoritePromotionRepository
from promoradar.repositories.promotion_repository import PromotionRepository
from promoradar.repositories.store_repository import StoreRepository
from promoradar.repositories.usage_repository import UsageRepository
from promoradar.repositories.user_repository import UserRepository
from promoradar.services.admin_service import AdminService
from promoradar.services.auth_service import AuthService
from promoradar.services.promotion_service import PromotionService
from promoradar.services.tracking_service import TrackingService
from promoradar.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> int:
    """需要登录的接口：从Bearer令牌中取用户ID"""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("请先登录")
    payload = decode_access_token(credentials.credentials)
    return payload["userId"]


async def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[int]:
    """可选登录：令牌缺失或无效时按访客处理"""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return decode_access_token(credentials.credentials)["userId"]
    except AuthenticationException:
        return None


def get_promotion_service(db: AsyncSession = Depends(get_db_session)) -> PromotionService:
    return PromotionService(
        promotion_repo=PromotionRepository(db),
        store_repo=StoreRepository(db),
        brand_repo=BrandRepository(db),
        usage_repo=UsageRepository(db)
    )


def get_admin_service(db: AsyncSession = Depends(get_db_session)) -> AdminService:
    return AdminService(
        promotion_repo=PromotionRepository(db),
        store_repo=StoreRepository(db),
        brand_repo=BrandRepository(db),
        admin_brand_repo=AdminBrandRepository(db),
        user_repo=UserRepository(db),
        usage_repo=UsageRepository(db)
    )


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(
        user_repo=UserRepository(db),
        favorite_brand_repo=FavoriteBrandRepository(db),
        favorite_promotion_repo=FavoritePromotionRepository(db),
        admin_brand_repo=AdminBrandRepository(db),
        usage_repo=UsageRepository(db)
    )


def get_auth_service(db: AsyncSession = Depends(get_db_session)) -> AuthService:
    return AuthService(UserRepository(db))


def get_tracking_service() -> TrackingService:
    return TrackingService()
