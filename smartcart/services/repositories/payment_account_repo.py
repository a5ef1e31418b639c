"""Payment Account Repository - UPI accounts receiving payments."""
from typing import Any, Dict, List, Optional

from smartcart.services.models import PaymentAccount
from .base import BaseRepository


class PaymentAccountRepository(BaseRepository):
    """Payment account database operations."""

    table_name = "payment_accounts"

    async def get_all(self) -> List[PaymentAccount]:
        rows = await self._execute(lambda: self.table().select("*"))
        return [PaymentAccount(**a) for a in rows]

    async def get_by_id(self, account_id: str) -> Optional[PaymentAccount]:
        rows = await self._execute(lambda: self.table().select("*").eq("id", account_id).limit(1))
        return PaymentAccount(**rows[0]) if rows else None

    async def get_defaults(self) -> List[PaymentAccount]:
        rows = await self._execute(lambda: self.table().select("*").eq("is_default", True))
        return [PaymentAccount(**a) for a in rows]

    async def create(self, data: Dict[str, Any]) -> PaymentAccount:
        rows = await self._execute(lambda: self.table().insert(data))
        return PaymentAccount(**rows[0])

    async def update(self, account_id: str, data: Dict[str, Any]) -> Optional[PaymentAccount]:
        rows = await self._execute(lambda: self.table().update(data).eq("id", account_id))
        return PaymentAccount(**rows[0]) if rows else None

    async def delete(self, account_id: str) -> bool:
        rows = await self._execute(lambda: self.table().delete().eq("id", account_id))
        return bool(rows)
