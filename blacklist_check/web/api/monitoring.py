import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import UJSONResponse
from pymongo.errors import PyMongoError

from blacklist_check.db import redis_client

logger = logging.getLogger(__name__)
router = APIRouter(tags=["monitoring"])


@router.get("/health")
async def health_check(request: Request) -> UJSONResponse:
    """
    Checks the health of a project.

    MongoDB is required; Redis is reported but optional since checks
    bypass the cache when it is down.
    """
    mongodb_ok = False
    dao = getattr(request.app.state, "blacklist_dao", None)
    if dao is not None:
        try:
            mongodb_ok = await dao.ping()
        except PyMongoError as e:
            logger.error(f"MongoDB health check failed: {e}")

    redis_ok = await redis_client.health_check()

    return UJSONResponse(
        status_code=status.HTTP_200_OK if mongodb_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if mongodb_ok else "unavailable",
            "mongodb": mongodb_ok,
            "redis": redis_ok,
        },
    )
