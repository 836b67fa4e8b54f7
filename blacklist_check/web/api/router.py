from fastapi.routing import APIRouter

from blacklist_check.web.api import blacklist, monitoring

api_router = APIRouter()
api_router.include_router(monitoring.router)
api_router.include_router(blacklist.router)  # POST /api/v1/blacklist
