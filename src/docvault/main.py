"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.docvault.config import settings
from src.docvault.features.accounts import router as accounts_router
from src.docvault.services.rate_limiter import limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    logger.info(
        "Starting docvault API",
        extra={
            "supabase_url": settings.supabase_url,
            "users_table": settings.users_table,
            "rate_limit_enabled": settings.rate_limit_enabled,
        },
    )
    if not settings.courier_api_key:
        logger.warning("COURIER_API_KEY is not set, verification emails will fail to send")

    yield

    logger.info("docvault API shutdown completed")


app = FastAPI(
    title="docvault API",
    description="Passwordless email-code accounts for the docvault document store",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

origins = settings.cors_origins.split(",")
logger.info(f"Origins : {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(accounts_router, prefix=settings.api_v1_prefix, tags=["auth"])


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    return HealthCheckResponse(status="healthy")
