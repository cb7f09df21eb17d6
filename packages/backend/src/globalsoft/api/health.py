"""Health check endpoint.

Verifies the server is running and the database is reachable. Redis
is reported but optional: without GLOBALSOFT_REDIS_URL it shows as
"disabled" and doesn't degrade the status.
"""

from fastapi import APIRouter
from sqlalchemy import text

from globalsoft import __version__
from globalsoft.config import settings
from globalsoft.db.engine import engine

router = APIRouter()


@router.get("/health")
async def health_check():
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    if settings.redis_url:
        try:
            from globalsoft.db.redis import get_redis

            await get_redis().ping()
            checks["redis"] = "ok"
        except Exception as e:
            checks["redis"] = f"error: {e}"
    else:
        checks["redis"] = "disabled"

    status = "healthy" if all(
        v in ("ok", "disabled") for k, v in checks.items() if k != "version"
    ) else "degraded"

    return {"status": status, **checks}
