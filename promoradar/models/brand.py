"""
品牌相关数据模型
"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator

from promoradar.models.common import CamelModel, normalize_brand_key

DEFAULT_PRIMARY_COLOR = "#4B5563"
DEFAULT_TEXT_COLOR = "#111827"


class Brand(CamelModel):
    """品牌模型"""

    brand_name: str = Field(..., description="品牌代号（标准化）")
    display_name: str = Field(..., description="显示名称")
    category: Optional[str] = Field(None, description="主分类")
    logo_url: Optional[str] = Field(None, description="Logo地址")
    primary_color: Optional[str] = Field(DEFAULT_PRIMARY_COLOR, description="主色")
    secondary_color: Optional[str] = Field(None, description="辅色")
    text_color: Optional[str] = Field(DEFAULT_TEXT_COLOR, description="文字颜色")
    created_at: Optional[datetime] = None


class BrandCreate(CamelModel):
    """创建品牌请求"""

    key: str = Field(..., min_length=1, max_length=100, description="品牌代号")
    display_name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    text_color: Optional[str] = None

    @field_validator("key")
    @classmethod
    def normalize_key(cls, v):
        key = normalize_brand_key(v)
        if not key:
            raise ValueError("品牌代号不能为空")
        return key


class BrandUpdate(CamelModel):
    """更新品牌请求"""

    display_name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    text_color: Optional[str] = None


class BrandSummary(CamelModel):
    """前端展示用的品牌信息"""

    key: str
    display_name: str
    logo: Optional[str] = None
    primary_color: str = DEFAULT_PRIMARY_COLOR
    secondary_color: Optional[str] = None
    text_color: str = DEFAULT_TEXT_COLOR
    categories: List[str] = Field(default_factory=list)

    @classmethod
    def from_brand(cls, key: str, brand: Optional[Brand], categories: List[str]) -> "BrandSummary":
        """从品牌资料构建，缺少资料时使用默认值"""
        if brand is None:
            return cls(key=key, display_name=key, categories=categories)
        return cls(
            key=key,
            display_name=brand.display_name,
            logo=brand.logo_url,
            primary_color=brand.primary_color or DEFAULT_PRIMARY_COLOR,
            secondary_color=brand.secondary_color,
            text_color=brand.text_color or DEFAULT_TEXT_COLOR,
            categories=categories,
        )
