from typing import Any, Dict, Optional

import structlog
from pymongo import AsyncMongoClient

from promoradar.core.config import settings

logger = structlog.get_logger()


class MongoManager:
    """
    文档数据库管理器
    核心功能：
    - 连接管理和健康检查
    - 行为日志 / 管理员操作日志写入

    未配置 mongodb_uri 时不建立连接，写入操作直接跳过
    """

    def __init__(self):
        self.client: Optional[AsyncMongoClient] = None
        self.db = None
        self.collections = {
            "users_behavior": "用户行为日志",
            "admin_actions": "管理员操作日志",
        }

    @property
    def enabled(self) -> bool:
        return self.db is not None

    async def init_mongodb(self) -> None:
        """初始化MongoDB连接"""
        if not settings.mongodb_uri:
            logger.info("未配置MongoDB，行为日志功能关闭")
            return

        try:
            self.client = AsyncMongoClient(
                settings.mongodb_uri,
                serverSelectionTimeoutMS=5000,
                tz_aware=True,
            )
            await self.client.admin.command("ping")
            self.db = self.client[settings.mongodb_db_name]
            logger.info("MongoDB连接成功", database=settings.mongodb_db_name)
        except Exception as e:
            # 日志库不可用不影响主流程
            logger.error("MongoDB连接失败，行为日志功能关闭",
                         error=str(e),
                         error_type=type(e).__name__)
            await self.close_mongodb()

    async def close_mongodb(self) -> None:
        """关闭MongoDB连接"""
        if self.client:
            await self.client.close()
            logger.info("MongoDB连接已关闭")
        self.client = None
        self.db = None

    async def insert_document(self, collection_name: str, document: Dict[str, Any]) -> Optional[str]:
        """写入一条文档，未启用时返回None"""
        if not self.enabled:
            return None
        result = await self.db[collection_name].insert_one(document)
        return str(result.inserted_id)

    async def health_check(self) -> Dict[str, Any]:
        if not self.client:
            return {"status": "disabled", "message": "客户端未初始化"}
        try:
            await self.client.admin.command("ping")
            return {"status": "healthy", "message": "连接正常"}
        except Exception as e:
            return {"status": "error", "message": f"连接失败: {str(e)}"}


# 全局MongoDB管理器实例
mongo_manager = MongoManager()
