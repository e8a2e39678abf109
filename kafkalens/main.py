"""KafkaLens API."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kafkalens.api.dependencies.rbac import (
    create_access_control,
    set_access_control,
)
from kafkalens.api.middleware.auth import AuthMiddleware
from kafkalens.api.middleware.logging import LoggingMiddleware
from kafkalens.api.v1.router import api_router, health_router
from kafkalens.config.settings import settings
from kafkalens.core.exceptions import AccessDeniedError
from kafkalens.core.logging import get_logger, setup_logging
from kafkalens.db.redis import close_redis_connection

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load roles once and tear down the session store on exit."""
    access_control = create_access_control(settings)
    set_access_control(access_control)

    logger.info(
        f"Starting {settings.app_name} v{settings.app_version}",
        extra={
            "environment": settings.environment.value,
            "rbac_enabled": access_control.rbac_enabled,
            "clusters": settings.cluster_names,
        },
    )

    yield

    logger.info("Shutting down")
    set_access_control(None)
    await close_redis_connection()


app = FastAPI(
    title=f"{settings.app_name} API",
    version=settings.app_version,
    description="Multi-cluster Kafka console with role-based access control",
    docs_url=f"{settings.api_prefix}/docs",
    redoc_url=f"{settings.api_prefix}/redoc",
    openapi_url=f"{settings.api_prefix}/openapi.json",
    lifespan=lifespan,
)


@app.exception_handler(AccessDeniedError)
async def access_denied_handler(request: Request, exc: AccessDeniedError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)}
    )


app.add_middleware(LoggingMiddleware)
app.add_middleware(AuthMiddleware)

if settings.origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(health_router, tags=["health"])
app.include_router(api_router, prefix=settings.api_prefix)

if __name__ == "__main__":
    uvicorn.run(
        "kafkalens.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.value.lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
