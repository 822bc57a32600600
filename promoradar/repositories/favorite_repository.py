"""
收藏（关注品牌 / 收藏活动）数据库操作层
"""

from typing import List

from sqlalchemy import select, delete, and_
from sqlalchemy.ext.asyncio import AsyncSession

from promoradar.models.database.user_db import FavoriteBrandDB, FavoritePromotionDB


class FavoriteBrandRepository:
    """关注品牌数据库操作类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_user(self, user_id: int) -> List[str]:
        """按关注时间先后返回品牌名称"""
        result = await self.db.execute(
            select(FavoriteBrandDB.brand_name)
            .where(FavoriteBrandDB.user_id == user_id)
            .order_by(FavoriteBrandDB.created_at, FavoriteBrandDB.brand_name)
        )
        return list(result.scalars().all())

    async def add(self, user_id: int, brand_name: str) -> None:
        """已关注时不做处理"""
        existing = await self.db.get(FavoriteBrandDB, (user_id, brand_name))
        if existing is None:
            self.db.add(FavoriteBrandDB(user_id=user_id, brand_name=brand_name))
            await self.db.flush()

    async def remove(self, user_id: int, brand_name: str) -> None:
        await self.db.execute(
            delete(FavoriteBrandDB).where(
                and_(FavoriteBrandDB.user_id == user_id, FavoriteBrandDB.brand_name == brand_name)
            )
        )

    async def clear(self, user_id: int) -> None:
        await self.db.execute(delete(FavoriteBrandDB).where(FavoriteBrandDB.user_id == user_id))


class FavoritePromotionRepository:
    """收藏活动数据库操作类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_user(self, user_id: int) -> List[int]:
        result = await self.db.execute(
            select(FavoritePromotionDB.promo_id)
            .where(FavoritePromotionDB.user_id == user_id)
            .order_by(FavoritePromotionDB.created_at, FavoritePromotionDB.promo_id)
        )
        return list(result.scalars().all())

    async def add(self, user_id: int, promo_id: int) -> None:
        existing = await self.db.get(FavoritePromotionDB, (user_id, promo_id))
        if existing is None:
            self.db.add(FavoritePromotionDB(user_id=user_id, promo_id=promo_id))
            await self.db.flush()

    async def remove(self, user_id: int, promo_id: int) -> None:
        await self.db.execute(
            delete(FavoritePromotionDB).where(
                and_(FavoritePromotionDB.user_id == user_id, FavoritePromotionDB.promo_id == promo_id)
            )
        )

    async def clear(self, user_id: int) -> None:
        await self.db.execute(delete(FavoritePromotionDB).where(FavoritePromotionDB.user_id == user_id))
