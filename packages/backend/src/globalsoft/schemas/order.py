"""Pydantic schemas for checkout and purchase history."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CheckoutRequest(BaseModel):
    product_id: int = Field(..., alias="productId")
    amount: Optional[float] = Field(default=None, ge=0)

    model_config = {"populate_by_name": True}


class CheckoutResponse(BaseModel):
    success: bool = True
    order_id: int


class OrderRead(BaseModel):
    id: int
    buyer_id: int
    product_id: int
    product_name: Optional[str] = None
    amount: float
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}
