"""
OrgTasks API Main Application

Entry point for the FastAPI application.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from orgtasks.platform.config import settings
from orgtasks.platform.logging import bind_request_context, configure_logging, get_logger
from orgtasks.api.routers import tasks, audit_logs
from orgtasks.api.dependencies_auth import USER_ID_HEADER
from orgtasks.api.dependencies import (
    init_resources,
    close_resources,
    get_postgres_adapter,
)

# Configure logging on import
configure_logging()
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("api_starting", app=settings.APP_NAME, env=settings.APP_ENV)
    try:
        init_resources()
        logger.info("resources_initialized")
    except Exception as e:
        logger.error("resources_init_failed", error=str(e))
        raise

    yield

    logger.info("api_stopping")
    close_resources()
    logger.info("resources_closed")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Multi-tenant task tracking with role-based access and an audit trail",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# OBSERVABILITY
# =============================================================================


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log event of a request with its request id and caller."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    bind_request_context(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        user_id=request.headers.get(USER_ID_HEADER),
    )
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


if settings.METRICS_ENABLED:
    app.mount("/metrics", make_asgi_app())


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/health/live", tags=["Health"])
async def liveness() -> dict:
    """Liveness probe - is the service running?"""
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
async def readiness() -> dict:
    """Readiness probe - can the service reach its database?"""
    postgres_healthy = get_postgres_adapter().health_check()

    return {
        "status": "ready" if postgres_healthy else "not_ready",
        "version": settings.VERSION,
        "checks": {
            "postgres": "healthy" if postgres_healthy else "unhealthy",
        },
    }


# =============================================================================
# API ROUTERS
# =============================================================================

app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["Tasks"])
app.include_router(audit_logs.router, prefix="/api/v1/audit-logs", tags=["Audit Logs"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "orgtasks.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
