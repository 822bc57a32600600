from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from promoradar.core.config import settings
from promoradar.core.redis import redis_manager, get_redis_client
from promoradar.core.mongodb import mongo_manager
from promoradar.core.database import init_database, close_database
from promoradar.services.common_cache import catalog_cache
from promoradar.api.health import router as health_router
from promoradar.api.auth import router as auth_router
from promoradar.api.promotions import router as promotions_router
from promoradar.api.user import router as user_router
from promoradar.api.admin import router as admin_router
from promoradar.api.tracking import router as tracking_router
from promoradar.api.exceptions import (
    validation_exception_handler,
    http_exception_handler,
    database_exception_handler,
    general_exception_handler,
    business_exception_handler,
    BusinessException
)

# 简化日志配置
import logging

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info(f"正在启动 {settings.app_name}")

    try:
        # 初始化数据库连接
        await init_database()
        logger.info("PostgreSQL数据库初始化成功")
    except Exception as e:
        logger.error(f"应用启动失败: {e}")
        raise

    # 缓存不可用时直接读数据库
    try:
        await redis_manager.init_redis()
    except Exception as e:
        logger.warning(f"Redis不可用，目录缓存关闭: {e}")
    catalog_cache.bind(get_redis_client())

    await mongo_manager.init_mongodb()

    logger.info("应用启动完成")

    yield

    logger.info("正在关闭应用")
    await close_database()
    await redis_manager.close_redis()
    await mongo_manager.close_mongodb()
    logger.info("应用关闭完成")


def create_app() -> FastAPI:
    """创建FastAPI应用"""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="PromoRadar - 品牌优惠活动目录、品牌后台与领取名额管理",
        debug=settings.debug,
        lifespan=lifespan
    )

    # CORS中间件
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 注册路由
    application.include_router(health_router)
    application.include_router(auth_router)
    application.include_router(promotions_router)
    application.include_router(user_router)
    application.include_router(admin_router)
    application.include_router(tracking_router)

    # 注册异常处理器
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(SQLAlchemyError, database_exception_handler)
    application.add_exception_handler(BusinessException, business_exception_handler)
    application.add_exception_handler(Exception, general_exception_handler)

    @application.get("/")
    async def root():
        """根路径"""
        return {
            "message": f"欢迎使用 {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health",
        }

    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "promoradar.main:app",
        host="0.0.0.0",
        port=4000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
