"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers, maps domain exceptions to HTTP
responses and configures uvicorn server.

Dependencies: fastapi, ragcore.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ragcore.api.deps.dependencies import get_service_cache
from ragcore.configs import get_settings
from ragcore.core.exceptions import EmbeddingError, NotFoundError, ProviderError, ValidationError
from ragcore.observability import configure_logging
from ragcore.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import (
    admin_router,
    context_router,
    documents_router,
    health_router,
    search_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    configure_logging(get_settings().log_level)

    # Startup
    cache = get_service_cache()
    _ = cache.embedding_client
    _ = cache.embed_queue
    logger.info(f"{__name__}:lifespan - Service cache pre-warmed")

    yield

    # Shutdown
    await cache.close()
    logger.info(f"{__name__}:lifespan - Embed queue drained, service cache cleared")


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": exc.message})


async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "field": exc.field},
    )


async def provider_handler(request: Request, exc: ProviderError | EmbeddingError) -> JSONResponse:
    logger.error(
        f"{__name__}:provider_handler - Upstream failure",
        extra={"path": request.url.path, "error": str(exc)},
    )
    content = {"detail": exc.message}
    if isinstance(exc, ProviderError):
        content["provider_status"] = exc.status
    return JSONResponse(status_code=502, content=content)


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="RAG Core API",
        description="Collections, embedding pipeline and ACL-aware vector search",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(ProviderError, provider_handler)
    app.add_exception_handler(EmbeddingError, provider_handler)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(search_router, prefix="/api/v1")
    app.include_router(context_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "ragcore.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
