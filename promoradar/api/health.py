from fastapi import APIRouter
import logging

from promoradar.core.config import settings
from promoradar.core.redis import redis_manager
from promoradar.core.mongodb import mongo_manager
from promoradar.core.database import database_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["健康检查"])


@router.get("")
async def health_check():
    """基础健康检查接口"""
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment
    }


@router.get("/database")
async def database_health():
    """
    存储连接健康检查

    整体状态只取决于关系数据库；Redis和MongoDB不可用时服务降级运行
    """
    health_status = {
        "postgresql": False,
        "redis": False,
        "mongodb": False,
        "overall": False,
        "details": {}
    }

    pg_status = await database_service.health_check()
    health_status["postgresql"] = pg_status["status"] == "healthy"
    health_status["details"]["postgresql"] = pg_status["message"]

    if redis_manager.redis_pool:
        health_status["redis"] = await redis_manager.ping()
        health_status["details"]["redis"] = "连接正常" if health_status["redis"] else "连接失败"
    else:
        health_status["details"]["redis"] = "连接池未初始化"

    mongo_status = await mongo_manager.health_check()
    health_status["mongodb"] = mongo_status["status"] == "healthy"
    health_status["details"]["mongodb"] = mongo_status["message"]

    health_status["overall"] = health_status["postgresql"]

    if not health_status["overall"]:
        logger.warning(f"数据库连接检查失败: {health_status['details']}")
    else:
        logger.info("数据库连接检查通过")
    return health_status
