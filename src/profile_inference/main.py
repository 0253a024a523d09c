"""
FastAPI application entry point for the Profile Inference Layer.
"""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from profile_inference.api.dependencies import get_llm_client, get_prompt_builder
from profile_inference.api.error_handlers import EXCEPTION_HANDLERS
from profile_inference.api.middleware import RequestTracingMiddleware
from profile_inference.api.routes import router
from profile_inference.config import settings
from profile_inference.logging_config import configure_logging
from profile_inference.persistence.redis_client import RedisClient

# Configure structured logging before any other imports
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Value-orientation profiling of user content with structured LLM outputs",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router, tags=["profiles"])


@app.on_event("startup")
async def startup():
    """Application startup - load templates and check the LLM provider."""
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        provider=settings.LLM_PROVIDER,
        mode=settings.ANALYSIS_MODE,
        locale=settings.LOCALE,
    )

    # Fails fast on missing or broken templates
    get_prompt_builder()

    if await get_llm_client().health_check():
        logger.info("LLM provider reachable")
    else:
        logger.warning("LLM provider unreachable", provider=settings.LLM_PROVIDER)

    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown():
    """Application shutdown - close the LLM connection pool and Redis pool."""
    logger.info("Application shutdown")
    await get_llm_client().close()
    await RedisClient.close_pool()
    logger.info("Application shutdown complete")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "profile_inference.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
