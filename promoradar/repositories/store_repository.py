"""
门市数据库操作层
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promoradar.models.common import normalize_brand_key
from promoradar.models.store import Store, StoreCreate
from promoradar.models.database.store_db import StoreDB


class StoreRepository:
    """门市数据库操作类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, store_id: int) -> Optional[StoreDB]:
        result = await self.db.execute(
            select(StoreDB).where(StoreDB.store_id == store_id)
        )
        return result.scalar_one_or_none()

    async def list_by_brand(self, brand_name: str) -> List[StoreDB]:
        """品牌下的所有门市（含停业）"""
        result = await self.db.execute(
            select(StoreDB)
            .where(StoreDB.brand_name == normalize_brand_key(brand_name))
            .order_by(StoreDB.store_id)
        )
        return result.scalars().all()

    async def list_all(self) -> List[StoreDB]:
        result = await self.db.execute(select(StoreDB).order_by(StoreDB.store_id))
        return result.scalars().all()

    async def create(self, payload: StoreCreate) -> StoreDB:
        store = StoreDB(
            brand_name=payload.brand_name,
            name=payload.name,
            address=payload.address,
            lat=payload.lat,
            lng=payload.lng,
            region=payload.region,
            is_active=True
        )
        self.db.add(store)
        await self.db.flush()
        return store

    async def update(self, store: StoreDB, updates: Dict[str, Any]) -> StoreDB:
        for field, value in updates.items():
            setattr(store, field, value)
        await self.db.flush()
        return store

    def to_model(self, db_store: StoreDB) -> Store:
        return Store(
            store_id=db_store.store_id,
            brand_name=db_store.brand_name,
            name=db_store.name,
            address=db_store.address or "",
            lat=db_store.lat,
            lng=db_store.lng,
            region=db_store.region,
            is_active=bool(db_store.is_active)
        )
