"""Product Repository - Product catalog operations."""
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from smartcart.logging import get_logger, sanitize_id_for_logging
from smartcart.services.models import Product
from .base import BaseRepository

logger = get_logger(__name__)


def _valid_products(rows: List[Dict[str, Any]]) -> List[Product]:
    """Parse rows, skipping (and logging) the ones that are not valid products."""
    products = []
    for row in rows:
        try:
            products.append(Product(**row))
        except ValidationError as e:
            logger.warning(
                f"Skipping invalid product row {sanitize_id_for_logging(row.get('id'))}: "
                f"{e.error_count()} validation errors"
            )
    return products


class ProductRepository(BaseRepository):
    """Product database operations."""

    table_name = "products"

    async def get_all(self) -> List[Product]:
        """Get all products ordered by name."""
        rows = await self._execute(lambda: self.table().select("*").order("name"))
        return _valid_products(rows)

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """Get product by ID."""
        rows = await self._execute(lambda: self.table().select("*").eq("id", product_id).limit(1))
        return Product(**rows[0]) if rows else None

    async def get_by_category(self, category: str) -> List[Product]:
        """Get products in a category."""
        rows = await self._execute(lambda: self.table().select("*").eq("category", category))
        return _valid_products(rows)

    async def create(self, data: Dict[str, Any]) -> Product:
        """Create new product."""
        rows = await self._execute(lambda: self.table().insert(data))
        return Product(**rows[0])

    async def update(self, product_id: str, data: Dict[str, Any]) -> Optional[Product]:
        """Update product."""
        rows = await self._execute(lambda: self.table().update(data).eq("id", product_id))
        return Product(**rows[0]) if rows else None

    async def delete(self, product_id: str) -> bool:
        """Delete product. Returns False if nothing matched."""
        rows = await self._execute(lambda: self.table().delete().eq("id", product_id))
        return bool(rows)
