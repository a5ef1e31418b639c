"""
Catalog Provider

Read operations never raise: a failed fetch is logged and reported as an
empty result, which callers treat as "catalog unavailable". Admin writes
propagate their errors.
"""
from typing import Any, Dict, List, Optional

from smartcart.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from smartcart.services.models import Product
from smartcart.services.repositories import ProductRepository

logger = get_logger(__name__)


class CatalogService:
    """Product catalog backed by the Supabase `products` table."""

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    async def fetch_all(self) -> List[Product]:
        try:
            return await self.repo.get_all()
        except Exception as e:
            logger.error(f"Error fetching products: {e}", exc_info=True)
            return []

    async def fetch_by_id(self, product_id: str) -> Optional[Product]:
        try:
            return await self.repo.get_by_id(product_id)
        except Exception as e:
            logger.error(f"Error fetching product {sanitize_id_for_logging(product_id)}: {e}", exc_info=True)
            return None

    async def fetch_by_category(self, category: str) -> List[Product]:
        try:
            return await self.repo.get_by_category(category)
        except Exception as e:
            logger.error(
                f"Error fetching products in category {sanitize_string_for_logging(category)}: {e}",
                exc_info=True,
            )
            return []

    async def create(self, data: Dict[str, Any]) -> Product:
        product = await self.repo.create(data)
        logger.info(f"Created product {sanitize_id_for_logging(product.id)} ({sanitize_string_for_logging(product.name)})")
        return product

    async def update(self, product_id: str, data: Dict[str, Any]) -> Optional[Product]:
        product = await self.repo.update(product_id, data)
        if product:
            logger.info(f"Updated product {sanitize_id_for_logging(product_id)}")
        return product

    async def delete(self, product_id: str) -> bool:
        deleted = await self.repo.delete(product_id)
        if deleted:
            logger.info(f"Deleted product {sanitize_id_for_logging(product_id)}")
        return deleted


_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    """Get CatalogService singleton."""
    global _catalog_service
    if _catalog_service is None:
        from smartcart.db import get_supabase_sync
        _catalog_service = CatalogService(ProductRepository(get_supabase_sync()))
    return _catalog_service
