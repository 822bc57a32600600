"""
模型公共部分
"""

from typing import Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


def normalize_brand_key(value: Optional[str]) -> str:
    """品牌代号标准化：去掉首尾空白并转小写，品牌比较一律使用标准化后的值"""
    return (value or "").strip().lower()


class CamelModel(BaseModel):
    """接口模型基类，JSON字段统一为camelCase，同时接受snake_case输入"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True
