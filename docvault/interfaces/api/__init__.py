from fastapi import APIRouter

from ...infrastructure.config.settings import get_settings
from .documents import router as documents_router

router = APIRouter(prefix=get_settings().API_PREFIX)
router.include_router(documents_router)


@router.get(
    "/health",
    summary="API Health Check",
    description="Simple health check endpoint for monitoring and container orchestration.",
    responses={
        200: {"description": "API is healthy and responding"},
    },
)
async def health_check():
    """Health check endpoint for Docker health checks."""
    settings = get_settings()
    return {"status": "healthy", "message": f"{settings.APP_NAME} is running", "environment": settings.ENVIRONMENT.value}
