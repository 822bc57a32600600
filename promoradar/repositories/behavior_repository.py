"""
行为日志写入（MongoDB）
写入失败只记录日志，不影响主流程
"""

import logging
from typing import Any, Dict, List, Optional

from promoradar.core.mongodb import MongoManager, mongo_manager
from promoradar.core.timezone import utcnow

logger = logging.getLogger(__name__)

USER_BEHAVIOR_COLLECTION = "users_behavior"
ADMIN_ACTION_COLLECTION = "admin_actions"


def _compact(document: Dict[str, Any]) -> Dict[str, Any]:
    """去掉空字段，空列表同样不写入"""
    return {
        key: value for key, value in document.items()
        if value is not None and value != []
    }


class BehaviorRepository:
    """行为日志操作类"""

    def __init__(self, manager: Optional[MongoManager] = None):
        self.manager = manager or mongo_manager

    async def log_user_behavior(
        self,
        user_id: str,
        action: str,
        promo_id: Optional[str] = None,
        brand_name: Optional[str] = None,
        search_keyword: Optional[str] = None,
        tags: Optional[List[str]] = None
    ) -> bool:
        document = _compact({
            "user_id": user_id,
            "action": action,
            "promo_id": promo_id,
            "brand_name": brand_name,
            "search_keyword": search_keyword,
            "tags": tags,
            "timestamp": utcnow(),
        })
        return await self._insert(USER_BEHAVIOR_COLLECTION, document)

    async def log_admin_action(
        self,
        admin_id: int,
        action: str,
        brand_name: Optional[str] = None,
        promo_id: Optional[int] = None,
        store_id: Optional[int] = None
    ) -> bool:
        document = _compact({
            "admin_id": str(admin_id),
            "action": action,
            "brand_name": brand_name,
            "promo_id": str(promo_id) if promo_id is not None else None,
            "store_id": str(store_id) if store_id is not None else None,
            "timestamp": utcnow(),
        })
        return await self._insert(ADMIN_ACTION_COLLECTION, document)

    async def _insert(self, collection: str, document: Dict[str, Any]) -> bool:
        try:
            inserted_id = await self.manager.insert_document(collection, document)
            return inserted_id is not None
        except Exception as e:
            logger.error(f"写入行为日志失败 {collection}: {e}")
            return False


# 全局行为日志仓库实例
behavior_repository = BehaviorRepository()
