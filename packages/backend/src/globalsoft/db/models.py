"""SQLAlchemy ORM models — single source of truth for the database schema.

Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Tables are created at startup with
Base.metadata.create_all; there are no migrations.

Integer primary keys: the realtime channel identifies users by the
integer id the client asserts in its auth frame.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A marketplace account. The role decides what the user can do:
    sellers list products, buyers purchase them.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="buyer"
    )  # buyer, seller, admin
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    products: Mapped[list["Product"]] = relationship(back_populates="seller")


class Product(Base):
    """A software listing.

    views and clicks are bumped by anonymous tracking endpoints on the
    product page; they feed the seller dashboard stats.
    """

    __tablename__ = "products"
    __table_args__ = (
        Index("ix_products_seller", "seller_id"),
        Index("ix_products_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    seller_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    version: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    screenshots: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    contact_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    clicks: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active"
    )  # active, inactive
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    seller: Mapped["User"] = relationship(back_populates="products")

    @property
    def seller_name(self) -> Optional[str]:
        """Display name of the seller (requires seller to be loaded)."""
        return self.seller.name if self.seller else None


class Order(Base):
    """A completed purchase. There is no payment gateway — checkout is a
    bare insert with status 'completed'.
    """

    __tablename__ = "orders"
    __table_args__ = (Index("ix_orders_buyer", "buyer_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    buyer_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="completed")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    product: Mapped["Product"] = relationship()

    @property
    def product_name(self) -> Optional[str]:
        return self.product.name if self.product else None


class Message(Base):
    """A chat message between two users. Immutable once written.

    sender_id and receiver_id carry no foreign key: both come from the
    realtime channel, and a message to a user id with no account is
    still stored.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_receiver", "receiver_id"),
        Index("ix_messages_sender", "sender_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[int] = mapped_column(Integer, nullable=False)
    receiver_id: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    sender: Mapped[Optional["User"]] = relationship(
        primaryjoin="foreign(Message.sender_id) == User.id",
        viewonly=True,
    )

    @property
    def sender_name(self) -> Optional[str]:
        return self.sender.name if self.sender else None


class Review(Base):
    """A buyer's rating (1-5) and comment on a product."""

    __tablename__ = "reviews"
    __table_args__ = (Index("ix_reviews_product", "product_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    user: Mapped["User"] = relationship()

    @property
    def user_name(self) -> Optional[str]:
        return self.user.name if self.user else None
