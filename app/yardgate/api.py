from fastapi import APIRouter

from app.yardgate.core.config import settings
from app.yardgate.routers.health import router as health_router
from app.yardgate.routers.metrics import router as metrics_router
from app.yardgate.routers.movements import router as movements_router
from app.yardgate.routers.temp_files import router as temp_files_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(movements_router, tags=["movements"])
api_router.include_router(temp_files_router, tags=["uploads"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
