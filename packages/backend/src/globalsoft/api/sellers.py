"""Seller directory and seller dashboard routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from globalsoft.auth.dependencies import CurrentIdentity, get_current_user
from globalsoft.db.engine import get_db
from globalsoft.schemas.product import SellerStats
from globalsoft.schemas.user import SellerRead
from globalsoft.services.product_service import ProductService
from globalsoft.services.user_service import UserService

router = APIRouter()


@router.get("/sellers", response_model=list[SellerRead])
async def list_sellers(db: AsyncSession = Depends(get_db)):
    return await UserService(db).list_sellers()


@router.get("/seller/stats", response_model=SellerStats)
async def seller_stats(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Totals across the current user's listings."""
    return await ProductService(db).seller_stats(identity.user_id)
