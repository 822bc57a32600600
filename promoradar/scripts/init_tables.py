"""
数据库表初始化脚本
按ORM定义建表，并补充名额相关的检查约束（仅PostgreSQL）

运行方式:
python -m promoradar.scripts.init_tables
"""

import asyncio
import logging
from sqlalchemy import text

from promoradar.core.database import init_database, create_tables, close_database

logger = logging.getLogger(__name__)

CHECK_CONSTRAINTS = [
    ("promotions", "chk_promotion_period", "end_datetime > start_datetime"),
    ("promotions", "chk_per_user_limit", "per_user_limit >= 0"),
    ("promotions", "chk_global_quota", "global_quota IS NULL OR global_quota >= 1"),
    ("promotions", "chk_daily_quota", "daily_quota IS NULL OR daily_quota >= 1"),
    ("promotions", "chk_promotion_status", "status IN ('Draft', 'Published', 'Canceled')"),
]


async def _create_check_constraints() -> None:
    """创建检查约束，已存在的跳过"""
    from promoradar.core.database import engine as db_engine

    if db_engine.dialect.name != "postgresql":
        logger.info(f"{db_engine.dialect.name} 不创建额外约束")
        return

    for table, name, expression in CHECK_CONSTRAINTS:
        async with db_engine.begin() as conn:
            exists = await conn.execute(
                text("SELECT 1 FROM pg_constraint WHERE conname = :name"),
                {"name": name}
            )
            if exists.fetchone():
                continue
            await conn.execute(text(f"ALTER TABLE {table} ADD CONSTRAINT {name} CHECK ({expression})"))
            logger.info(f"约束 {name} 创建成功")


async def init_tables() -> None:
    try:
        await init_database()
        logger.info("开始创建数据表...")
        await create_tables()
        await _create_check_constraints()
        logger.info("数据库初始化完成")
    except Exception as e:
        logger.error(f"创建数据表失败: {e}")
        raise
    finally:
        await close_database()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(init_tables())
