"""Checkout and purchase history routes.

Checkout is a bare order insert — no payment gateway is involved.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from globalsoft.auth.dependencies import CurrentIdentity, get_current_user
from globalsoft.db.engine import get_db
from globalsoft.schemas.order import CheckoutRequest, CheckoutResponse, OrderRead
from globalsoft.services.order_service import OrderService
from globalsoft.services.product_service import ProductNotFoundError

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.post("/checkout", response_model=CheckoutResponse)
async def checkout(
    body: CheckoutRequest,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: OrderService = Depends(_svc),
):
    try:
        order = await svc.checkout(
            buyer_id=identity.user_id,
            product_id=body.product_id,
            amount=body.amount,
        )
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    return CheckoutResponse(order_id=order.id)


@router.get("/user/orders", response_model=list[OrderRead])
async def list_my_orders(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: OrderService = Depends(_svc),
):
    return await svc.list_orders(identity.user_id)
