"""
用户相关数据模型
"""

from datetime import datetime
from typing import List, Optional
from pydantic import EmailStr, Field

from promoradar.models.common import CamelModel
from promoradar.models.usage import PromotionUsageSummary


class User(CamelModel):
    """用户公开信息（不含密码哈希）"""

    user_id: int
    username: str
    email: str
    is_admin: bool = False
    created_at: Optional[datetime] = None


class SignupRequest(CamelModel):
    username: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class AuthResponse(CamelModel):
    """登录/注册成功返回"""

    token: str
    user: User


class BrandFavoriteRequest(CamelModel):
    brand_name: Optional[str] = None


class PromotionFavoriteRequest(CamelModel):
    promo_id: Optional[int] = None


class UserProfileResponse(CamelModel):
    """个人主页数据"""

    user: User
    brand_favorites: List[str] = Field(default_factory=list)
    promotion_favorites: List[int] = Field(default_factory=list)
    admin_brands: List[str] = Field(default_factory=list)
    usage: List[PromotionUsageSummary] = Field(default_factory=list)
