"""Product service — listings, tracking counters, and seller stats.

Every read that leaves this service joins the seller so that
product.seller_name is available to schemas and to the new_product
broadcast payload.
"""

from typing import Optional

import structlog
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from globalsoft.db.models import Order, Product

logger = structlog.get_logger()


class ProductNotFoundError(Exception):
    """Raised when a product id doesn't exist."""


class ProductService:
    """Business logic for product listings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_product(
        self,
        seller_id: int,
        name: str,
        description: str = "",
        price: float = 0.0,
        category: str = "",
        version: str = "",
        screenshots: Optional[str] = None,
        file_url: Optional[str] = None,
        contact_number: Optional[str] = None,
    ) -> Product:
        """Insert a listing and return it re-read with its seller joined."""
        product = Product(
            seller_id=seller_id,
            name=name,
            description=description,
            price=price,
            category=category,
            version=version,
            screenshots=screenshots,
            file_url=file_url,
            contact_number=contact_number,
        )
        self.db.add(product)
        await self.db.commit()

        logger.info("product.created", product_id=product.id, seller_id=seller_id)
        return await self.get_product(product.id)

    async def get_product(self, product_id: int) -> Optional[Product]:
        result = await self.db.execute(
            select(Product)
            .where(Product.id == product_id)
            .options(joinedload(Product.seller))
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def list_products(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        seller_id: Optional[int] = None,
    ) -> list[Product]:
        """Active listings, newest first."""
        query = (
            select(Product)
            .where(Product.status == "active")
            .options(joinedload(Product.seller))
            .order_by(Product.created_at.desc(), Product.id.desc())
        )
        if category:
            query = query.where(Product.category == category)
        if seller_id is not None:
            query = query.where(Product.seller_id == seller_id)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(Product.name.ilike(pattern), Product.description.ilike(pattern))
            )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def record_view(self, product_id: int) -> None:
        await self._bump(product_id, Product.views)

    async def record_click(self, product_id: int) -> None:
        await self._bump(product_id, Product.clicks)

    async def _bump(self, product_id: int, column) -> None:
        result = await self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values({column.key: column + 1})
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ProductNotFoundError(f"Product {product_id} not found")
        await self.db.commit()

    async def seller_stats(self, seller_id: int) -> dict:
        """Dashboard totals for one seller.

        Sales and revenue come from orders; views and clicks are summed
        over products separately so the order join doesn't multiply them.
        """
        products = await self.db.execute(
            select(
                func.count(Product.id),
                func.coalesce(func.sum(Product.views), 0),
                func.coalesce(func.sum(Product.clicks), 0),
            ).where(Product.seller_id == seller_id)
        )
        total_products, total_views, total_clicks = products.one()

        sales = await self.db.execute(
            select(
                func.count(Order.id),
                func.coalesce(func.sum(Order.amount), 0.0),
            )
            .join(Product, Order.product_id == Product.id)
            .where(Product.seller_id == seller_id)
        )
        total_sales, total_revenue = sales.one()

        return {
            "total_products": total_products,
            "total_sales": total_sales,
            "total_revenue": float(total_revenue),
            "total_views": int(total_views),
            "total_clicks": int(total_clicks),
        }
