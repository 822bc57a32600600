"""
品牌及品牌管理员数据库操作层
"""

from collections import defaultdict
from typing import Any, Dict, List, Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from promoradar.models.brand import Brand, BrandCreate, DEFAULT_PRIMARY_COLOR, DEFAULT_TEXT_COLOR
from promoradar.models.common import normalize_brand_key
from promoradar.models.database.brand_db import BrandDB, BrandCategoryDB, AdminBrandDB


class BrandRepository:
    """品牌数据库操作类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_key(self, brand_name: str) -> Optional[BrandDB]:
        """根据品牌代号获取品牌（大小写不敏感）"""
        result = await self.db.execute(
            select(BrandDB).where(BrandDB.brand_name == normalize_brand_key(brand_name))
        )
        return result.scalar_one_or_none()

    async def get_by_keys(self, brand_names: List[str]) -> Dict[str, BrandDB]:
        keys = [normalize_brand_key(name) for name in brand_names]
        if not keys:
            return {}
        result = await self.db.execute(select(BrandDB).where(BrandDB.brand_name.in_(keys)))
        return {brand.brand_name: brand for brand in result.scalars().all()}

    async def list_all(self) -> List[BrandDB]:
        result = await self.db.execute(select(BrandDB).order_by(BrandDB.brand_name))
        return result.scalars().all()

    async def list_categories(self) -> Dict[str, List[str]]:
        """品牌代号 -> 分类列表"""
        result = await self.db.execute(
            select(BrandCategoryDB).order_by(BrandCategoryDB.brand_name, BrandCategoryDB.id)
        )
        categories: Dict[str, List[str]] = defaultdict(list)
        for row in result.scalars().all():
            categories[normalize_brand_key(row.brand_name)].append(row.category)
        return dict(categories)

    async def create(self, payload: BrandCreate) -> BrandDB:
        """创建品牌，主分类同时写入分类表"""
        brand = BrandDB(
            brand_name=payload.key,
            display_name=payload.display_name,
            category=payload.category,
            logo_url=payload.logo_url,
            primary_color=payload.primary_color or DEFAULT_PRIMARY_COLOR,
            secondary_color=payload.secondary_color,
            text_color=payload.text_color or DEFAULT_TEXT_COLOR
        )
        self.db.add(brand)
        self.db.add(BrandCategoryDB(brand_name=payload.key, category=payload.category))
        await self.db.flush()
        return brand

    async def update(self, brand: BrandDB, updates: Dict[str, Any]) -> BrandDB:
        for field, value in updates.items():
            setattr(brand, field, value)
        if updates.get("category"):
            await self._ensure_category(brand.brand_name, updates["category"])
        await self.db.flush()
        return brand

    async def _ensure_category(self, brand_name: str, category: str) -> None:
        result = await self.db.execute(
            select(BrandCategoryDB).where(
                and_(BrandCategoryDB.brand_name == brand_name, BrandCategoryDB.category == category)
            )
        )
        if result.scalar_one_or_none() is None:
            self.db.add(BrandCategoryDB(brand_name=brand_name, category=category))

    def to_model(self, db_brand: BrandDB) -> Brand:
        return Brand(
            brand_name=db_brand.brand_name,
            display_name=db_brand.display_name,
            category=db_brand.category,
            logo_url=db_brand.logo_url,
            primary_color=db_brand.primary_color,
            secondary_color=db_brand.secondary_color,
            text_color=db_brand.text_color,
            created_at=db_brand.created_at
        )


class AdminBrandRepository:
    """品牌管理员数据库操作类"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_brands_by_admin(self, user_id: int) -> List[str]:
        result = await self.db.execute(
            select(AdminBrandDB.brand_name)
            .where(AdminBrandDB.user_id == user_id)
            .order_by(AdminBrandDB.created_at, AdminBrandDB.brand_name)
        )
        return list(result.scalars().all())

    async def is_admin_for_brand(self, user_id: int, brand_name: str) -> bool:
        """标准化后比较品牌代号"""
        target = normalize_brand_key(brand_name)
        if not target:
            return False
        brands = await self.find_brands_by_admin(user_id)
        return any(normalize_brand_key(brand) == target for brand in brands)

    async def add_admin(self, user_id: int, brand_name: str) -> None:
        key = normalize_brand_key(brand_name)
        existing = await self.db.get(AdminBrandDB, (user_id, key))
        if existing is None:
            self.db.add(AdminBrandDB(user_id=user_id, brand_name=key))
            await self.db.flush()
