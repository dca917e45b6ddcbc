from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from mbbs.api import deps
from mbbs.core.cache import ModelCache
from mbbs.models.thread import Thread
from mbbs.services.health import check_db

router = APIRouter(prefix="/health", tags=["health"])

@router.get("/liveness")
async def liveness():
    """Process is up; does not touch the database."""
    return {"status": "ok"}

@router.get("/readiness")
async def readiness(
    session: AsyncSession = Depends(deps.get_db),
    cache: ModelCache[Thread] = Depends(deps.thread_cache),
):
    """Database reachable; also reports how many threads are cached."""
    status = "ready" if await check_db(session) else "degraded"
    return {"status": status, "thread_cache": {"size": len(cache), "capacity": cache.max_size}}
