"""
Payment Service - manual UPI payments.

Checkout records a `pending` payment and hands the buyer UPI deep links.
An admin later marks the record `completed` or `failed`; nothing here
enforces that order, any status may follow any other.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional
from urllib.parse import quote, urlencode

from smartcart import config
from smartcart.logging import get_logger, sanitize_id_for_logging
from smartcart.services.models import Payment, PaymentAccount, PaymentStatus
from smartcart.services.money import format_amount
from smartcart.services.repositories import PaymentAccountRepository, PaymentRepository

logger = get_logger(__name__)

UPI_PAY_URL = "upi://pay"
GPAY_SEND_URL = "https://pay.google.com/gp/v/send"
DEFAULT_TRANSACTION_NOTE = "Payment for {merchant} order"


def build_upi_links(
    upi_id: str,
    amount: Decimal,
    merchant_name: str | None = None,
    note: str | None = None,
    currency: str | None = None,
) -> dict[str, str]:
    """
    Build the UPI intent URL and its Google Pay web equivalent.

    Args:
        upi_id: Payee VPA (e.g. shop@okhdfcbank)
        amount: Amount to pay, formatted with two decimals
        merchant_name: Payee display name
        note: Transaction note shown in the payer's app
        currency: ISO currency code (UPI only accepts INR)

    Returns:
        {"upi_url": ..., "gpay_url": ...}
    """
    merchant = merchant_name or config.MERCHANT_NAME
    params = {
        "pa": upi_id,
        "pn": merchant,
        "am": format_amount(amount),
        "cu": currency or config.CURRENCY,
        "tn": note or DEFAULT_TRANSACTION_NOTE.format(merchant=merchant),
    }
    # UPI apps reject '+' for spaces and an escaped '@' in the VPA
    query = urlencode(params, quote_via=quote, safe="@")
    return {
        "upi_url": f"{UPI_PAY_URL}?{query}",
        "gpay_url": f"{GPAY_SEND_URL}?{query}",
    }


class PaymentService:
    """Payment records and the UPI accounts that receive them."""

    def __init__(self, payments: PaymentRepository, accounts: PaymentAccountRepository):
        self.payments = payments
        self.accounts = accounts

    # ==================== PAYMENT RECORDS ====================

    async def create_payment(
        self,
        amount: Decimal,
        items: Iterable[dict],
        upi_id: Optional[str] = None,
    ) -> Payment:
        """Record a new pending payment."""
        now = datetime.now(timezone.utc).isoformat()
        payment = await self.payments.create({
            "amount": str(amount),
            "items": list(items),
            "status": PaymentStatus.PENDING.value,
            "upi_id": upi_id,
            "created_at": now,
            "updated_at": now,
        })
        logger.info(f"Created pending payment {sanitize_id_for_logging(payment.id)} for {format_amount(amount)}")
        return payment

    async def get_payment(self, payment_id: str) -> Optional[Payment]:
        return await self.payments.get_by_id(payment_id)

    async def get_payments(self, status: Optional[PaymentStatus] = None) -> List[Payment]:
        return await self.payments.list(status.value if status else None)

    async def update_payment_status(
        self,
        payment_id: str,
        status: PaymentStatus,
        notes: Optional[str] = None,
    ) -> Optional[Payment]:
        """Set a payment's status. Returns None if the payment does not exist."""
        data = {
            "status": status.value,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        if notes is not None:
            data["notes"] = notes

        payment = await self.payments.update(payment_id, data)
        if payment:
            logger.info(f"Payment {sanitize_id_for_logging(payment_id)} -> {status.value}")
        return payment

    # ==================== PAYMENT ACCOUNTS ====================

    async def get_payment_accounts(self) -> List[PaymentAccount]:
        return await self.accounts.get_all()

    async def get_default_payment_account(self) -> Optional[PaymentAccount]:
        defaults = await self.accounts.get_defaults()
        return defaults[0] if defaults else None

    async def _unset_defaults(self, keep_id: Optional[str] = None) -> None:
        for account in await self.accounts.get_defaults():
            if account.id != keep_id:
                await self.accounts.update(account.id, {"is_default": False})

    async def add_payment_account(self, name: str, upi_id: str, is_default: bool = False) -> PaymentAccount:
        """Add an account. A new default replaces the previous one."""
        if is_default:
            await self._unset_defaults()
        account = await self.accounts.create({"name": name, "upi_id": upi_id, "is_default": is_default})
        logger.info(f"Added payment account {sanitize_id_for_logging(account.id)} (default={is_default})")
        return account

    async def update_payment_account(self, account_id: str, updates: dict) -> Optional[PaymentAccount]:
        if updates.get("is_default"):
            await self._unset_defaults(keep_id=account_id)
        return await self.accounts.update(account_id, updates)

    async def delete_payment_account(self, account_id: str) -> bool:
        """Delete an account, promoting another one if it was the default."""
        account = await self.accounts.get_by_id(account_id)
        if account is None:
            return False

        if account.is_default:
            others = [a for a in await self.accounts.get_all() if a.id != account_id]
            if others:
                await self.accounts.update(others[0].id, {"is_default": True})
                logger.info(f"Promoted payment account {sanitize_id_for_logging(others[0].id)} to default")

        return await self.accounts.delete(account_id)

    async def resolve_upi_id(self) -> Optional[str]:
        """UPI id for checkout: default account, else the configured fallback."""
        account = await self.get_default_payment_account()
        if account:
            return account.upi_id
        return config.DEFAULT_UPI_ID or None


_payment_service: Optional[PaymentService] = None


def get_payment_service() -> PaymentService:
    """Get PaymentService singleton."""
    global _payment_service
    if _payment_service is None:
        from smartcart.db import get_supabase_sync
        client = get_supabase_sync()
        _payment_service = PaymentService(PaymentRepository(client), PaymentAccountRepository(client))
    return _payment_service
