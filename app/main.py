"""
FastAPI application for the salon booking service

Serves tenant-scoped availability queries for public booking pages
"""
import logging
from collections import defaultdict
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from app.config.settings import get_settings
from app.core.middleware import correlation_id_middleware, request_logging_middleware
from app.core.monitoring import health_router
from app.api.v1.router import api_v1_router
from app.utils.my_logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


def log_registered_routes(app: FastAPI):
    """Log all registered routes grouped by tag"""
    routes_by_tag = defaultdict(list)
    for route in app.routes:
        if isinstance(route, APIRoute):
            tag = route.tags[0] if route.tags else "other"
            for method in sorted(route.methods):
                routes_by_tag[tag].append((method, route.path, route.name))

    for tag, routes in sorted(routes_by_tag.items()):
        for method, path, name in sorted(routes, key=lambda r: (r[1], r[0])):
            logger.info(f"[{tag}] {method:8} {path} ({name})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging()
    logger.info(f"{settings.APP_NAME} starting up")
    if settings.DEBUG:
        log_registered_routes(app)

    yield

    # Shutdown
    logger.info(f"{settings.APP_NAME} shutting down")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Malformed query parameters are client input errors: report them as 400
    with the offending fields instead of FastAPI's default 422.
    """
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    logger.info(f"[{correlation_id}] Invalid request for {request.url.path}: {exc.errors()}")

    fields = [".".join(str(part) for part in error.get("loc", [])) for error in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={"detail": f"Invalid parameters: {', '.join(fields)}"}
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title="Salon Booking API",
        description="Multi-tenant salon availability and booking",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Last registered is outermost: correlation id is set before logging reads it
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Include routers
    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1", tags=["api"])

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1/",
                "health": "/health",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
