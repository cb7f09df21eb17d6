"""Product and review API routes.

Browsing is public. Listing a product requires a seller token; once the
insert commits, the relay broadcasts a new_product event to every open
realtime connection before the response goes out.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from globalsoft.auth.dependencies import (
    CurrentIdentity,
    get_current_user,
    require_seller,
)
from globalsoft.db.engine import get_db
from globalsoft.realtime.relay import RealtimeRelay
from globalsoft.realtime.websocket import get_relay
from globalsoft.schemas.product import (
    ProductCreate,
    ProductCreated,
    ProductDetail,
    ProductRead,
)
from globalsoft.schemas.review import ReviewCreate, ReviewRead
from globalsoft.services.product_service import ProductNotFoundError, ProductService
from globalsoft.services.review_service import ReviewService

router = APIRouter(prefix="/products")


def _svc(db: AsyncSession = Depends(get_db)) -> ProductService:
    return ProductService(db)


# ─── Listings ───────────────────────────────────────────

@router.get("", response_model=list[ProductRead])
async def list_products(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    seller_id: Optional[int] = Query(None),
    svc: ProductService = Depends(_svc),
):
    return await svc.list_products(category=category, search=search, seller_id=seller_id)


@router.post("", response_model=ProductCreated, status_code=201)
async def create_product(
    body: ProductCreate,
    identity: CurrentIdentity = Depends(require_seller),
    svc: ProductService = Depends(_svc),
    relay: RealtimeRelay = Depends(get_relay),
):
    """List a new product and announce it to every connected client."""
    product = await svc.create_product(seller_id=identity.user_id, **body.model_dump())

    payload = ProductRead.model_validate(product).model_dump(mode="json")
    await relay.broadcast_new_product(payload)

    return ProductCreated(id=product.id)


@router.get("/{product_id}", response_model=ProductDetail)
async def get_product(
    product_id: int,
    svc: ProductService = Depends(_svc),
):
    """Product page: the listing with its reviews."""
    product = await svc.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    reviews = await ReviewService(svc.db).list_reviews(product_id)
    return ProductDetail(
        **ProductRead.model_validate(product).model_dump(),
        reviews=[ReviewRead.model_validate(r) for r in reviews],
    )


# ─── Tracking counters ──────────────────────────────────

@router.post("/{product_id}/view")
async def record_view(product_id: int, svc: ProductService = Depends(_svc)):
    try:
        await svc.record_view(product_id)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True}


@router.post("/{product_id}/click")
async def record_click(product_id: int, svc: ProductService = Depends(_svc)):
    try:
        await svc.record_click(product_id)
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"success": True}


# ─── Reviews ────────────────────────────────────────────

@router.get("/{product_id}/reviews", response_model=list[ReviewRead])
async def list_reviews(product_id: int, db: AsyncSession = Depends(get_db)):
    return await ReviewService(db).list_reviews(product_id)


@router.post("/{product_id}/reviews", response_model=ReviewRead, status_code=201)
async def add_review(
    product_id: int,
    body: ReviewCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await ReviewService(db).add_review(
            product_id=product_id,
            user_id=identity.user_id,
            rating=body.rating,
            comment=body.comment,
        )
    except ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
