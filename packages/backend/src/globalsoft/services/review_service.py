"""Review service — product ratings and comments."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from globalsoft.db.models import Product, Review
from globalsoft.services.product_service import ProductNotFoundError

logger = structlog.get_logger()


class ReviewService:
    """Business logic for product reviews."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_review(
        self, product_id: int, user_id: int, rating: int, comment: str = ""
    ) -> Review:
        if not await self.db.get(Product, product_id):
            raise ProductNotFoundError(f"Product {product_id} not found")
        if not 1 <= rating <= 5:
            raise ValueError(f"Invalid rating: {rating}")

        review = Review(
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
        )
        self.db.add(review)
        await self.db.commit()
        logger.info("review.created", review_id=review.id, product_id=product_id)

        result = await self.db.execute(
            select(Review)
            .where(Review.id == review.id)
            .options(joinedload(Review.user))
        )
        return result.scalars().one()

    async def list_reviews(self, product_id: int) -> list[Review]:
        result = await self.db.execute(
            select(Review)
            .where(Review.product_id == product_id)
            .options(joinedload(Review.user))
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(result.scalars().all())
