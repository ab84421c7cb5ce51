"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
Both answer in the standard response envelope.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from shared.config import get_settings
from shared.database import get_mongo_client, get_redis_client
from shared.models import ApiResponse, ok

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=ApiResponse)
async def health_check() -> ApiResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return ok("Service is healthy", {"status": "healthy", "version": get_settings().app_version})


@router.get("/ready", response_model=ApiResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Pings MongoDB and Redis; returns 503 if either is unreachable.
    """
    database = "connected"
    cache = "connected"
    try:
        await get_mongo_client().admin.command("ping")
    except PyMongoError as e:
        logger.warning("Readiness: MongoDB ping failed: %s", e)
        database = "unavailable"
    try:
        await get_redis_client().ping()
    except RedisError as e:
        logger.warning("Readiness: Redis ping failed: %s", e)
        cache = "unavailable"

    ready = database == "connected" and cache == "connected"
    data = {"status": "ready" if ready else "not_ready", "database": database, "cache": cache}
    if not ready:
        body = ApiResponse(message="Service is not ready", data=data, error_code="SERVICE_UNAVAILABLE")
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())
    return ok("Service is ready", data)
