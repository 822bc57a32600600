"""
测试配置文件 - pytest fixtures和共用配置
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from promoradar.core.database import Base
from promoradar.core.security import hash_password
from promoradar.models.database import (
    UserDB, BrandDB, BrandCategoryDB, AdminBrandDB, StoreDB, PromotionDB
)
from promoradar.services import promotion_service as promotion_service_module
from promoradar.services.claim_locks import ClaimLockRegistry


@pytest_asyncio.fixture(scope="function")
async def test_db_engine(tmp_path):
    """测试数据库引擎 - 每个测试一个SQLite文件库"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,  # 设为True可以看到SQL语句
        poolclass=NullPool
    )

    # 创建表结构
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_db_engine):
    """测试会话工厂，并发测试中每个协程各自开会话"""
    return async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncSession:
    """测试数据库会话"""
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@pytest.fixture(autouse=True)
def fresh_claim_locks(monkeypatch):
    """每个测试使用新的锁注册表，避免asyncio.Lock跨事件循环复用"""
    registry = ClaimLockRegistry()
    monkeypatch.setattr(promotion_service_module, "claim_locks", registry)
    return registry


class DataFactory:
    """测试数据构造器，写入后立即提交"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._seq = 0

    async def _save(self, *objects):
        self.session.add_all(objects)
        await self.session.commit()
        return objects[0]

    async def user(self, username: Optional[str] = None, email: Optional[str] = None,
                   password: str = "secret123", is_admin: bool = False) -> UserDB:
        self._seq += 1
        username = username or f"user{self._seq}"
        return await self._save(UserDB(
            username=username,
            email=(email or f"{username}@example.com").lower(),
            password_hash=hash_password(password),
            is_admin=is_admin
        ))

    async def brand(self, key: str = "starbucks", display_name: str = "Starbucks",
                    category: str = "Coffee") -> BrandDB:
        brand = BrandDB(brand_name=key, display_name=display_name, category=category)
        await self._save(brand, BrandCategoryDB(brand_name=key, category=category))
        return brand

    async def admin(self, user: UserDB, brand_key: str) -> AdminBrandDB:
        return await self._save(AdminBrandDB(user_id=user.user_id, brand_name=brand_key))

    async def store(self, brand_key: str = "starbucks", name: str = "Main St",
                    is_active: bool = True, region: str = "Taipei") -> StoreDB:
        return await self._save(StoreDB(
            brand_name=brand_key,
            name=name,
            address=f"{name} 1号",
            lat=25.03,
            lng=121.56,
            region=region,
            is_active=is_active
        ))

    async def promotion(self, brand_key: str = "starbucks", status: str = "Published",
                        start: Optional[datetime] = None, end: Optional[datetime] = None,
                        **fields) -> PromotionDB:
        now = datetime.now(timezone.utc)
        values = dict(
            brand_name=brand_key,
            title="第二杯半价",
            description="指定饮品第二杯半价",
            promo_type="Second_Cup",
            event_tag="Weekend_Deal",
            start_datetime=start or now - timedelta(days=1),
            end_datetime=end or now + timedelta(days=30),
            need_membership=False,
            need_code=False,
            per_user_limit=0,
            global_quota=None,
            daily_quota=None,
            status=status,
        )
        values.update(fields)
        return await self._save(PromotionDB(**values))


@pytest_asyncio.fixture
async def factory(db_session) -> DataFactory:
    """测试数据构造器"""
    return DataFactory(db_session)
