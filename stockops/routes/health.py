import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from stockops.core.exceptions import StoreOperationError
from stockops.dependencies import StoreFactory, get_store_factory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "stockops"}


@router.get("/health/db")
async def database_health(store_factory: StoreFactory = Depends(get_store_factory)):
    """Check database connectivity"""
    try:
        async with store_factory() as store:
            await store.ping()
    except (StoreOperationError, OSError) as e:
        message = e.message if isinstance(e, StoreOperationError) else str(e)
        logger.error(f"Database health check failed: {message}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "error", "error": message},
        )
    return {"status": "healthy", "database": "connected"}
