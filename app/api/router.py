from fastapi import APIRouter

from app.api.descriptions import router as descriptions_router
from app.core.config import settings

api_router = APIRouter(prefix="/api")
api_router.include_router(descriptions_router)


@api_router.get("/health")
async def health():
    return {"status": "ok", "version": settings.app_version}
