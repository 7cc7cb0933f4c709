"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException as FastAPIHTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from postboard import __version__
from postboard.api.routes import auth, auth_pages, health, pages, posts
from postboard.core.config import Settings, get_settings
from postboard.core.logging_config import LoggingConfig
from postboard.core.middleware import LoggingContextMiddleware
from postboard.core.services import Services, build_services

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = app.state.settings
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    await app.state.services.close()


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    """
    Build the application

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        services: Post service and identity provider (defaults to those selected by settings)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Post board over a hosted identity provider and GraphQL post service",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services or build_services(settings)

    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Log unhandled errors and answer with a JSON 500"""
        if isinstance(exc, FastAPIHTTPException):
            raise exc

        logger.error(
            "Unhandled exception",
            exc_info=exc,
            extra={
                "error": str(exc),
                "error_type": type(exc).__name__,
                "path": request.url.path,
                "method": request.method,
            }
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "type": type(exc).__name__},
        )

    app.include_router(pages.router)
    app.include_router(posts.router)
    app.include_router(auth.router)
    app.include_router(auth_pages.router)
    app.include_router(health.router)

    @app.get("/api")
    async def root():
        """Root API endpoint"""
        return {
            "name": settings.app_name,
            "version": __version__,
            "status": "running",
            "environment": settings.app_env,
            "backend": settings.post_service_backend,
        }

    return app


app = create_app()


def run():
    """Console entry point"""
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "postboard.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
    )


if __name__ == "__main__":
    run()
