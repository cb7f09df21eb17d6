"""API route aggregation.

All routers registered here get mounted in main.py under /api, the
prefix the SPA calls. Auth is per-route: browsing is public, while
checkout, dashboards, listing and messages require a bearer token.
"""

from fastapi import APIRouter

from globalsoft.api.auth import router as auth_router
from globalsoft.api.health import router as health_router
from globalsoft.api.messages import router as messages_router
from globalsoft.api.orders import router as orders_router
from globalsoft.api.products import router as products_router
from globalsoft.api.sellers import router as sellers_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(products_router, tags=["products", "reviews"])
api_router.include_router(sellers_router, tags=["sellers"])
api_router.include_router(orders_router, tags=["orders"])
api_router.include_router(messages_router, tags=["messages"])
