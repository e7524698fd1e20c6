from fastapi import APIRouter

from qallaroom.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    return {"ok": True, "app": settings.APP_NAME, "port": settings.PORT}
