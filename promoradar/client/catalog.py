"""
客户端活动目录
一次性加载 /api/promotions/dataset，在内存中建立索引并做过滤排序
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

import httpx

from promoradar.models.brand import BrandSummary
from promoradar.models.common import normalize_brand_key
from promoradar.models.promotion import Promotion, PromotionExclusion
from promoradar.models.store import Store
from promoradar.services.promotion_filters import PromotionFilters, apply_filters

logger = logging.getLogger(__name__)

DATASET_PATH = "/api/promotions/dataset"


class PromotionCatalog:
    """内存中的活动目录"""

    def __init__(
        self,
        promotions: List[Promotion],
        stores: List[Store],
        exclusions: List[PromotionExclusion],
        brands: List[BrandSummary]
    ):
        self.promotions = promotions
        self.stores = stores
        self.exclusions = exclusions
        self.brands = brands
        self._build_indices()

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PromotionCatalog":
        """从接口返回的JSON构建"""
        return cls(
            promotions=[Promotion.model_validate(item) for item in payload.get("promotions", [])],
            stores=[Store.model_validate(item) for item in payload.get("stores", [])],
            exclusions=[PromotionExclusion.model_validate(item) for item in payload.get("exclusions", [])],
            brands=[BrandSummary.model_validate(item) for item in payload.get("brands", [])]
        )

    @classmethod
    async def fetch(
        cls,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0
    ) -> "PromotionCatalog":
        """
        从服务端加载目录

        Raises:
            httpx.HTTPStatusError: 服务端返回非2xx
        """
        if client is not None:
            response = await client.get(DATASET_PATH)
        else:
            async with httpx.AsyncClient(base_url=base_url, timeout=timeout) as own_client:
                response = await own_client.get(DATASET_PATH)
        response.raise_for_status()

        catalog = cls.from_payload(response.json())
        logger.info(f"目录加载完成: {len(catalog.promotions)} 个活动, {len(catalog.stores)} 个门市")
        return catalog

    def _build_indices(self) -> None:
        self.promotions_by_id: Dict[int, Promotion] = {promo.promo_id: promo for promo in self.promotions}

        self.promotions_by_brand: Dict[str, List[Promotion]] = defaultdict(list)
        for promo in self.promotions:
            self.promotions_by_brand[normalize_brand_key(promo.brand_name)].append(promo)

        self.stores_by_brand: Dict[str, List[Store]] = defaultdict(list)
        for store in self.stores:
            self.stores_by_brand[normalize_brand_key(store.brand_name)].append(store)

        self.exclusions_by_promotion: Dict[int, Set[int]] = defaultdict(set)
        for exclusion in self.exclusions:
            self.exclusions_by_promotion[exclusion.promo_id].add(exclusion.store_id)

        self.brands_by_key: Dict[str, BrandSummary] = {
            normalize_brand_key(brand.key): brand for brand in self.brands
        }

    def get_promotion(self, promo_id: int) -> Optional[Promotion]:
        return self.promotions_by_id.get(promo_id)

    def get_brand(self, brand_name: str) -> Optional[BrandSummary]:
        return self.brands_by_key.get(normalize_brand_key(brand_name))

    def promotions_for_brand(self, brand_name: str) -> List[Promotion]:
        return list(self.promotions_by_brand.get(normalize_brand_key(brand_name), []))

    def applicable_stores(self, promo_id: int) -> List[Store]:
        """活动适用的门市：品牌下营业中的门市去掉不适用门市"""
        promo = self.get_promotion(promo_id)
        if promo is None:
            return []
        excluded = self.exclusions_by_promotion.get(promo_id, set())
        return [
            store for store in self.stores_by_brand.get(normalize_brand_key(promo.brand_name), [])
            if store.is_active and store.store_id not in excluded
        ]

    def brand_display_names(self) -> Dict[str, str]:
        return {key: brand.display_name for key, brand in self.brands_by_key.items()}

    def search(
        self,
        filters: Optional[PromotionFilters] = None,
        followed_brands: Iterable[str] = (),
        now: Optional[datetime] = None
    ) -> List[Promotion]:
        """按过滤条件筛选并排序，关注品牌优先"""
        return apply_filters(
            self.promotions,
            filters or PromotionFilters(),
            followed_brands=followed_brands,
            brand_names=self.brand_display_names(),
            now=now
        )
