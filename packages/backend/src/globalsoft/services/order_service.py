"""Order service — checkout and purchase history.

There is no payment gateway: checkout inserts an order with status
'completed' and that's it.
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from globalsoft.db.models import Order, Product
from globalsoft.services.product_service import ProductNotFoundError

logger = structlog.get_logger()


class OrderService:
    """Business logic for purchases."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def checkout(
        self, buyer_id: int, product_id: int, amount: Optional[float] = None
    ) -> Order:
        """Record a purchase. amount defaults to the product's list price."""
        product = await self.db.get(Product, product_id)
        if not product:
            raise ProductNotFoundError(f"Product {product_id} not found")

        order = Order(
            buyer_id=buyer_id,
            product_id=product_id,
            amount=product.price if amount is None else amount,
        )
        self.db.add(order)
        await self.db.commit()

        logger.info(
            "order.completed",
            order_id=order.id,
            buyer_id=buyer_id,
            product_id=product_id,
            amount=order.amount,
        )
        return order

    async def list_orders(self, buyer_id: int) -> list[Order]:
        """A buyer's purchases, newest first, with the product joined."""
        result = await self.db.execute(
            select(Order)
            .where(Order.buyer_id == buyer_id)
            .options(joinedload(Order.product))
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(result.scalars().all())
