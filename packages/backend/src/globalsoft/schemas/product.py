"""Pydantic schemas for product listings and seller stats.

ProductRead is also the payload of the realtime new_product event, so
it carries the joined seller_name.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from globalsoft.schemas.review import ReviewRead


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="")
    price: float = Field(default=0.0, ge=0)
    category: str = Field(default="", max_length=100)
    version: str = Field(default="", max_length=50)
    screenshots: Optional[str] = None
    file_url: Optional[str] = None
    contact_number: Optional[str] = Field(default=None, max_length=50)


class ProductRead(BaseModel):
    id: int
    seller_id: int
    seller_name: Optional[str] = None
    name: str
    description: str
    price: float
    category: str
    version: str
    screenshots: Optional[str] = None
    file_url: Optional[str] = None
    contact_number: Optional[str] = None
    views: int
    clicks: int
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ProductDetail(ProductRead):
    """Product page: the listing plus its reviews."""
    reviews: list[ReviewRead] = []


class ProductCreated(BaseModel):
    id: int


class SellerStats(BaseModel):
    total_products: int
    total_sales: int
    total_revenue: float
    total_views: int
    total_clicks: int
