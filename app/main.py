"""Job Description Insights Backend - FastAPI Entry Point."""
import sys

# asyncpg is incompatible with Windows ProactorEventLoop (default on Windows).
# Must be set before any asyncio usage.
if sys.platform == "win32":
    import asyncio
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import engine
from app.integrations.ai.embeddings import embedding_service
from app.integrations.vector.registry import register_vector_features
from app.middleware.error_handler import setup_error_handlers
from app.middleware.logging_middleware import LoggingMiddleware
from app.services.insights_service import InsightsService
from app.api.v1 import insights as insights_router
from app.api.v1 import job_descriptions as job_descriptions_router

logger = structlog.get_logger()

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")

# Reduce noise from external libraries
for _name in ("httpx", "httpcore", "openai", "anthropic", "sentence_transformers", "sqlalchemy.engine"):
    logging.getLogger(_name).setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("startup", env=settings.APP_ENV)
    features = register_vector_features()
    app.state.insights = InsightsService(features, embedding_service)
    logger.info("vector_features", available=features.is_available(), missing=features.missing)

    yield

    # Shutdown: close Qdrant client, release embedding model, dispose DB engine
    await features.close()
    embedding_service.handle.reset()
    await engine.dispose()
    logger.info("shutdown")


def create_app() -> FastAPI:
    application = FastAPI(
        title="Job Description Insights API",
        description="Semantic indexing and RAG over job descriptions",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Middleware (order matters: last added = first executed)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS.split(","),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    setup_error_handlers(application)
    application.add_middleware(LoggingMiddleware)

    # API Routers
    application.include_router(insights_router.router, prefix="/api/v1/insights", tags=["Insights"])
    application.include_router(
        job_descriptions_router.router, prefix="/api/v1/job-descriptions", tags=["Job Descriptions"],
    )

    # Health check
    @application.get("/health", tags=["health"])
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
