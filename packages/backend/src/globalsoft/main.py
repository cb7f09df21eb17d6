"""FastAPI application factory.

create_app() returns a configured FastAPI instance. Lifespan manages
startup/shutdown (tables, Redis). Middleware, CORS, error handlers,
routers, and the realtime relay are all wired here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from globalsoft import __version__
from globalsoft.api import api_router
from globalsoft.api.errors import register_error_handlers
from globalsoft.config import settings
from globalsoft.realtime import RealtimeRelay

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "globalsoft.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from globalsoft.db.engine import engine, init_models

    await init_models(engine)

    from globalsoft.db.redis import close_redis, init_redis

    if settings.redis_url:
        try:
            await init_redis()
            logger.info("globalsoft.redis_connected", url=settings.redis_url)
        except Exception as e:
            # Redis is optional — only rate limiting depends on it
            logger.warning("globalsoft.redis_unavailable", error=str(e))

    yield

    logger.info(
        "globalsoft.shutdown",
        open_connections=len(app.state.relay.connections),
    )
    await close_redis()
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="GlobalSoft Marketplace",
        description="Software marketplace API with realtime listing and chat relay",
        version=__version__,
        lifespan=lifespan,
    )

    # One relay (and one registry) per app instance.
    app.state.relay = RealtimeRelay()

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from globalsoft.middleware.rate_limit import RateLimitMiddleware
    from globalsoft.middleware.request_id import RequestIdMiddleware
    from globalsoft.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(api_router)

    from globalsoft.realtime.websocket import router as ws_router
    app.include_router(ws_router)

    return app


# Default app instance (used by uvicorn: globalsoft.main:app)
app = create_app()
