"""
Health check endpoints
"""
from fastapi import APIRouter, Depends

from postboard.core.config import get_settings
from postboard.core.logging_config import LoggingConfig
from postboard.core.services import get_post_service
from postboard.services.post_service import PostService
from postboard.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint

    Returns:
        dict: Health status
    """
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": get_settings().app_name,
    }


@router.get("/health/detailed")
async def detailed_health_check(post_service: PostService = Depends(get_post_service)):
    """
    Detailed health check with post service status

    Returns:
        dict: Health of the app and its post service
    """
    settings = get_settings()
    post_service_ok = await post_service.health_check()
    if not post_service_ok:
        logger.warning("Post service health check failed")

    return {
        "status": "healthy" if post_service_ok else "degraded",
        "timestamp": utc_now().isoformat(),
        "service": settings.app_name,
        "environment": settings.app_env,
        "components": {
            "post_service": {
                "status": "healthy" if post_service_ok else "unhealthy",
                "backend": settings.post_service_backend,
            },
        },
        "log_counts": LoggingConfig.get_metrics(),
    }
