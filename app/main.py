"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Error rendering for service exceptions
- Startup/shutdown of the shared services

Design Decisions:
- Every error body is {"error": "..."}; store failures and unexpected
  exceptions are logged in full and reported without internal detail
- Fixed routes (/health, /metrics, /docs, /redoc) are registered before the
  catch-all redirect route; their names are reserved as short codes
- The observer and click tracker are created once and kept on app.state
"""

import logging

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from app.api import endpoints
from app.api.dependencies import get_observer
from app.core.exceptions import DatabaseError, URLShortenerException
from app.core.observability import ServiceObserver
from app.core.setting import settings
from app.db.session import async_session_maker, engine, init_models
from app.middleware.logging import add_logging_middleware, setup_logging
from app.services.click_tracker import ClickTracker

logger = logging.getLogger("url_shortener")

setup_logging()

app = FastAPI(
    title="URL Shortener Service",
    description="Short-code allocation and redirect service built with FastAPI",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI documentation
    redoc_url="/redoc",  # ReDoc documentation
)

app.state.observer = ServiceObserver()
app.state.click_tracker = ClickTracker(async_session_maker, observer=app.state.observer)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(URLShortenerException)
async def service_exception_handler(request: Request, exc: URLShortenerException) -> JSONResponse:
    if isinstance(exc, DatabaseError):
        logger.error(
            f"{request.method} {request.url.path} failed: {exc}",
            exc_info=exc.original_error or exc
        )
        message = "Internal server error"
    elif exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        message = str(exc)
    else:
        message = str(exc)
    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {details}"})


# Health endpoints defined before router to match before catch-all route
@app.get("/", tags=["Health"])
async def root():
    """
    Root endpoint for health checks.

    Returns:
        Simple JSON response indicating service is running
    """
    return {
        "message": "URL Shortener Service",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


@app.get("/metrics", tags=["Health"])
async def metrics(observer: ServiceObserver = Depends(get_observer)) -> Response:
    """Prometheus exposition of service events and request latencies."""
    return Response(generate_latest(observer.registry), media_type=CONTENT_TYPE_LATEST)


app.include_router(endpoints.router, tags=["URL Shortener"])


@app.on_event("startup")
async def startup_event():
    """Create tables when configured to."""
    if settings.AUTO_CREATE_TABLES:
        await init_models()
    logger.info(f"URL shortener started (env={settings.ENV_SETTING.value})")


@app.on_event("shutdown")
async def shutdown_event():
    """Finish in-flight click increments, then release the connection pool."""
    tracker: ClickTracker = app.state.click_tracker
    if tracker.pending:
        logger.info(f"Waiting for {tracker.pending} click increments")
    await tracker.drain()
    await engine.dispose()
