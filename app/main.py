"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes (short-link API, QR rendering, slug resolution)
- Middleware (logging, CORS)
- Rate limiting and error translation
- Application metadata
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api import endpoints
from app.core.rate_limit import limiter
from app.core.setting import settings
from app.db.session import engine, init_db
from app.middleware.logging import add_logging_middleware, configure_logging

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Redirect Service",
    description="Short links with owner secrets, click counting and QR codes",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and query strings are client errors (400), not 422."""
    logger.warning(f"Validation error at {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def internal_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error at {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Defined before the router so the catch-all route doesn't shadow it
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns:
        Health status of the service
    """
    return {"status": "healthy"}


app.include_router(endpoints.router, tags=["Redirects"])


@app.on_event("startup")
async def startup_event():
    """Create tables when the schema isn't managed by Alembic."""
    if settings.CREATE_TABLES_ON_STARTUP:
        await init_db()


@app.on_event("shutdown")
async def shutdown_event():
    """Release pooled connections."""
    await engine.dispose()
