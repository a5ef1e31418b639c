"""
Checkout Router

Manual UPI checkout: records a pending payment for the current cart and
returns UPI deep links. An admin confirms or rejects the payment later.
"""
from fastapi import APIRouter, Depends, HTTPException

from smartcart.cart import CartEngine
from smartcart.errors import ERROR_CART_EMPTY, ERROR_NO_PAYMENT_ACCOUNT, ERROR_PAYMENT_NOT_FOUND
from smartcart.services.payments import PaymentService, build_upi_links
from .deps import get_cart_engine, get_payments

router = APIRouter(tags=["checkout"])


@router.post("/checkout")
async def checkout(
    engine: CartEngine = Depends(get_cart_engine),
    payments: PaymentService = Depends(get_payments),
):
    state = engine.state
    if state.is_empty:
        raise HTTPException(status_code=400, detail=ERROR_CART_EMPTY)

    upi_id = await payments.resolve_upi_id()
    if not upi_id:
        raise HTTPException(status_code=503, detail=ERROR_NO_PAYMENT_ACCOUNT)

    lines = [
        {"id": item.id, "name": item.product.name, "price": str(item.price), "quantity": item.quantity}
        for item in state.items
    ]
    payment = await payments.create_payment(state.total_price, lines, upi_id)

    return {
        "payment": payment.model_dump(mode="json"),
        **build_upi_links(upi_id, state.total_price),
    }


@router.get("/payments/{payment_id}")
async def get_payment_status(payment_id: str, payments: PaymentService = Depends(get_payments)):
    payment = await payments.get_payment(payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail=ERROR_PAYMENT_NOT_FOUND)
    return payment.model_dump(mode="json")
