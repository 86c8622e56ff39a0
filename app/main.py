from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import dependencies
from app.api.assessments import router as assessments_router
from app.api.health import router as health_router
from app.api.metrics_endpoint import router as metrics_router
from app.api.question_bank import router as question_bank_router
from app.api.submissions import router as submissions_router
from app.core.config import SETTINGS
from app.core.logging import setup_logging
from app.db.engine import engine, lifespan_db
from app.db.redis import lifespan_redis
from app.middleware.metrics import MetricsMiddleware
from app.middleware.request_context import RequestContextMiddleware
from app.services.seed_data import seed_question_bank

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Nested so teardown runs in reverse order.
    async with lifespan_db():
        async with lifespan_redis():
            if SETTINGS.is_dev and engine is None:
                # Empty in-memory bank otherwise; give dev something to draw from.
                await seed_question_bank(dependencies.question_repo)
            yield


app = FastAPI(
    title="ats-service",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# Last-added runs first: RequestContext -> Metrics -> CORS -> route.
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(question_bank_router)
app.include_router(assessments_router)
app.include_router(submissions_router)

logger.info(
    "ats-service started  env=%s log_level=%s port=%d docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
)
