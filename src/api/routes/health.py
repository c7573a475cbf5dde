"""Health check endpoint."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from adapter.mongodb.connection import get_mongodb_client
from api.serialization import format_timestamp

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _mongodb_status() -> dict:
    try:
        client = get_mongodb_client()
        if not client:
            return {"status": "unhealthy", "message": "Connection failed or not configured"}
        client.admin.command('ping')
        return {"status": "healthy", "message": "Connection successful"}
    except PyMongoError as e:
        logger.warning("MongoDB health check failed", extra={"error": str(e)[:200]})
        return {"status": "unhealthy", "message": "Connection error"}


@router.get("")
def health():
    """Report service health; 503 when the database is unreachable."""
    mongodb = _mongodb_status()
    healthy = mongodb["status"] == "healthy"

    return JSONResponse(
        content={
            "status": "healthy" if healthy else "degraded",
            "timestamp": format_timestamp(datetime.now(timezone.utc)),
            "services": {"mongodb": mongodb},
        },
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
