"""Payment Repository - manual UPI payment records."""
from typing import Any, Dict, List, Optional

from smartcart.services.models import Payment
from .base import BaseRepository


class PaymentRepository(BaseRepository):
    """Payment database operations."""

    table_name = "payments"

    async def create(self, data: Dict[str, Any]) -> Payment:
        rows = await self._execute(lambda: self.table().insert(data))
        return Payment(**rows[0])

    async def get_by_id(self, payment_id: str) -> Optional[Payment]:
        rows = await self._execute(lambda: self.table().select("*").eq("id", payment_id).limit(1))
        return Payment(**rows[0]) if rows else None

    async def list(self, status: Optional[str] = None) -> List[Payment]:
        """List payments, newest first, optionally filtered by status."""
        def build():
            query = self.table().select("*")
            if status:
                query = query.eq("status", status)
            return query.order("created_at", desc=True)

        rows = await self._execute(build)
        return [Payment(**p) for p in rows]

    async def update(self, payment_id: str, data: Dict[str, Any]) -> Optional[Payment]:
        rows = await self._execute(lambda: self.table().update(data).eq("id", payment_id))
        return Payment(**rows[0]) if rows else None
