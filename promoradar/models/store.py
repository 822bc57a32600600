"""
门市相关数据模型
"""

from typing import Optional
from pydantic import Field, field_validator

from promoradar.models.common import CamelModel, normalize_brand_key


class Store(CamelModel):
    """门市模型"""

    store_id: int = Field(..., description="门市ID")
    brand_name: str = Field(..., description="品牌代号")
    name: str = Field(..., description="门市名称")
    address: str = Field(default="", description="地址")
    lat: Optional[float] = Field(None, description="纬度")
    lng: Optional[float] = Field(None, description="经度")
    region: Optional[str] = Field(None, description="区域")
    is_active: bool = Field(default=True, description="是否营业")


class StoreCreate(CamelModel):
    """创建门市请求"""

    brand_name: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(default="", max_length=500)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    region: Optional[str] = Field(None, max_length=100)

    @field_validator("brand_name")
    @classmethod
    def normalize_brand(cls, v):
        key = normalize_brand_key(v)
        if not key:
            raise ValueError("品牌代号不能为空")
        return key


class StoreUpdate(CamelModel):
    """更新门市请求"""

    brand_name: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, max_length=500)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    region: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None

    @field_validator("brand_name")
    @classmethod
    def normalize_brand(cls, v):
        if v is None:
            return None
        return normalize_brand_key(v) or None
