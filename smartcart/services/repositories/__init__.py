"""Repositories over Supabase tables."""
from .base import BaseRepository
from .payment_account_repo import PaymentAccountRepository
from .payment_repo import PaymentRepository
from .product_repo import ProductRepository

__all__ = [
    "BaseRepository",
    "PaymentAccountRepository",
    "PaymentRepository",
    "ProductRepository",
]
