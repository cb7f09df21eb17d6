"""User service — accounts, credentials, and the seller directory."""

from typing import Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from globalsoft.auth.password import hash_password, verify_password
from globalsoft.db.models import Product, User

logger = structlog.get_logger()


class DuplicateEmailError(Exception):
    """Raised when registering an email that already has an account."""


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_user(
        self, email: str, password: str, name: str, role: str = "buyer"
    ) -> User:
        existing = await self.get_by_email(email)
        if existing:
            raise DuplicateEmailError(f"Email already exists: {email}")

        user = User(
            email=email,
            name=name,
            role=role,
            password_hash=hash_password(password),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration.
            await self.db.rollback()
            raise DuplicateEmailError(f"Email already exists: {email}")

        logger.info("user.registered", user_id=user.id, role=role)
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user if the credentials match, else None."""
        user = await self.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            return None
        return user

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def list_sellers(self) -> list[dict]:
        """Every seller with the number of products they've listed."""
        product_count = (
            select(func.count(Product.id))
            .where(Product.seller_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(User, product_count.label("product_count"))
            .where(User.role == "seller")
            .order_by(User.name)
        )
        return [
            {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "created_at": user.created_at,
                "product_count": count or 0,
            }
            for user, count in result.all()
        ]
