"""
Admin Router

Product management, manual payment confirmation and UPI payment accounts.
All routes require the X-Admin-Key header.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from smartcart.auth import verify_admin
from smartcart.errors import (
    ERROR_PAYMENT_ACCOUNT_NOT_FOUND,
    ERROR_PAYMENT_NOT_FOUND,
    ERROR_PRODUCT_NOT_FOUND,
)
from smartcart.logging import get_logger
from smartcart.services.catalog import CatalogService
from smartcart.services.models import PaymentStatus
from smartcart.services.payments import PaymentService
from .deps import get_catalog, get_payments
from .models import (
    CreatePaymentAccountRequest,
    CreateProductRequest,
    UpdatePaymentAccountRequest,
    UpdatePaymentStatusRequest,
    UpdateProductRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(verify_admin)])


# ==================== PRODUCTS ====================

@router.get("/products")
async def admin_get_products(catalog: CatalogService = Depends(get_catalog)):
    products = await catalog.fetch_all()
    return {"products": [p.model_dump(mode="json") for p in products]}


@router.post("/products")
async def admin_create_product(request: CreateProductRequest, catalog: CatalogService = Depends(get_catalog)):
    try:
        product = await catalog.create(request.model_dump(mode="json"))
    except Exception as e:
        logger.error(f"Failed to create product: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create product")
    return {"success": True, "product": product.model_dump(mode="json")}


@router.patch("/products/{product_id}")
async def admin_update_product(
    product_id: str,
    request: UpdateProductRequest,
    catalog: CatalogService = Depends(get_catalog),
):
    updates = request.model_dump(mode="json", exclude_none=True)
    product = await catalog.update(product_id, updates)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return {"success": True, "product": product.model_dump(mode="json")}


@router.delete("/products/{product_id}")
async def admin_delete_product(product_id: str, catalog: CatalogService = Depends(get_catalog)):
    if not await catalog.delete(product_id):
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return {"success": True}


# ==================== PAYMENTS ====================

@router.get("/payments")
async def admin_get_payments(
    status: Optional[PaymentStatus] = None,
    payments: PaymentService = Depends(get_payments),
):
    records = await payments.get_payments(status)
    return {"payments": [p.model_dump(mode="json") for p in records]}


@router.patch("/payments/{payment_id}")
async def admin_update_payment(
    payment_id: str,
    request: UpdatePaymentStatusRequest,
    payments: PaymentService = Depends(get_payments),
):
    """Confirm or reject a manual payment (any status is accepted)."""
    payment = await payments.update_payment_status(payment_id, request.status, request.notes)
    if not payment:
        raise HTTPException(status_code=404, detail=ERROR_PAYMENT_NOT_FOUND)
    return {"success": True, "payment": payment.model_dump(mode="json")}


# ==================== PAYMENT ACCOUNTS ====================

@router.get("/payment-accounts")
async def admin_get_payment_accounts(payments: PaymentService = Depends(get_payments)):
    accounts = await payments.get_payment_accounts()
    return {"accounts": [a.model_dump(mode="json") for a in accounts]}


@router.post("/payment-accounts")
async def admin_add_payment_account(
    request: CreatePaymentAccountRequest,
    payments: PaymentService = Depends(get_payments),
):
    account = await payments.add_payment_account(request.name, request.upi_id, request.is_default)
    return {"success": True, "account": account.model_dump(mode="json")}


@router.patch("/payment-accounts/{account_id}")
async def admin_update_payment_account(
    account_id: str,
    request: UpdatePaymentAccountRequest,
    payments: PaymentService = Depends(get_payments),
):
    account = await payments.update_payment_account(account_id, request.model_dump(exclude_none=True))
    if not account:
        raise HTTPException(status_code=404, detail=ERROR_PAYMENT_ACCOUNT_NOT_FOUND)
    return {"success": True, "account": account.model_dump(mode="json")}


@router.delete("/payment-accounts/{account_id}")
async def admin_delete_payment_account(account_id: str, payments: PaymentService = Depends(get_payments)):
    if not await payments.delete_payment_account(account_id):
        raise HTTPException(status_code=404, detail=ERROR_PAYMENT_ACCOUNT_NOT_FOUND)
    return {"success": True}
