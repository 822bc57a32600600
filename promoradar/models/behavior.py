"""
行为日志数据模型
"""

from enum import Enum
from typing import List, Optional
from pydantic import Field, field_validator

from promoradar.models.common import CamelModel


class UserBehaviorAction(str, Enum):
    CLICK_PROMO = "click_promo"
    VIEW_PROMO = "view_promo"
    SEARCH = "search"
    FILTER = "filter"
    OPEN_MAP = "open_map"
    OPEN_BRAND = "open_brand"
    SCROLL_LIST = "scroll_list"


class AdminAction(str, Enum):
    CREATE_PROMO = "create_promo"
    UPDATE_PROMO = "update_promo"
    DELETE_PROMO = "delete_promo"
    EDIT_STORE = "edit_store"


class TrackRequest(CamelModel):
    """前端上报的行为事件"""

    action: UserBehaviorAction
    promo_id: Optional[str] = Field(None, max_length=50)
    brand_name: Optional[str] = Field(None, max_length=100)
    search_keyword: Optional[str] = Field(None, max_length=200)
    tags: Optional[List[str]] = None

    @field_validator("promo_id", mode="before")
    @classmethod
    def coerce_promo_id(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v
