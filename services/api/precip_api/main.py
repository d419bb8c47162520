"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from precip_api.config import get_config
from precip_api.dependencies import get_monitor, start_scheduler, stop_scheduler
from precip_api.routers import attributes, commands, health

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Get configuration
config = get_config()

# Prometheus metrics
REQUEST_COUNT = Counter(
    "precipmonitor_api_requests_total",
    "Total API requests",
    ["method", "endpoint", "status"]
)
REQUEST_DURATION = Histogram(
    "precipmonitor_api_request_duration_seconds",
    "API request duration in seconds",
    ["method", "endpoint"]
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Lifespan context manager for startup and shutdown events.

    Startup:
    - Log the monitored location
    - Start the polling and daily jobs

    Shutdown:
    - Stop the scheduler and close the NWS session
    """
    # Startup
    logger.info("Starting PrecipMonitor API")
    monitor = get_monitor()
    logger.info(f"Monitoring airport: {monitor.config.airport_code or 'not configured'}")

    if config.scheduler_enabled:
        start_scheduler()
    else:
        logger.info("Scheduler disabled - refresh via /api/v1/commands/refresh")

    yield

    # Shutdown
    logger.info("Shutting down PrecipMonitor API")
    stop_scheduler()
    monitor.close()


# Initialize FastAPI application
app = FastAPI(
    title=config.api_title,
    version=config.api_version,
    description=config.api_description,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=config.cors_allow_credentials,
    allow_methods=config.cors_allow_methods,
    allow_headers=config.cors_allow_headers,
)


# Request logging and metrics middleware
@app.middleware("http")
async def logging_and_metrics_middleware(request: Request, call_next):
    """
    Middleware to log requests and collect Prometheus metrics.

    Tracks:
    - Request count by method, endpoint, and status
    - Request duration by method and endpoint
    """
    start_time = time.time()
    request_id = f"{int(start_time * 1000)}-{id(request)}"

    logger.info(
        f"Request started: {request.method} {request.url.path} "
        f"[{request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time
    endpoint = request.url.path

    REQUEST_COUNT.labels(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code
    ).inc()

    REQUEST_DURATION.labels(
        method=request.method,
        endpoint=endpoint
    ).observe(duration)

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"[{request_id}] - {response.status_code} - {duration:.3f}s"
    )

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Response-Time"] = f"{duration:.3f}s"

    return response


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unhandled errors.

    Returns:
        500 error with sanitized error message
    """
    logger.error(
        f"Unhandled exception: {request.method} {request.url.path} - {str(exc)}",
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "type": "internal_error",
            "path": str(request.url.path)
        }
    )


# Prometheus metrics endpoint
@app.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Include routers
app.include_router(health.router)
app.include_router(attributes.router)
app.include_router(commands.router)


@app.get("/api/v1/info")
async def api_info():
    """
    Get API version and configuration information.

    Returns:
        API metadata and available endpoints
    """
    return {
        "api": {
            "title": config.api_title,
            "version": config.api_version,
            "description": config.api_description
        },
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "metrics": "/metrics",
            "attributes": "/api/v1/attributes",
            "records": "/api/v1/records",
            "retention": "/api/v1/retention",
            "commands": "/api/v1/commands"
        },
        "commands": [
            "refresh",
            "remove-expired",
            "check-threshold",
            "reset"
        ],
        "scheduler_enabled": config.scheduler_enabled
    }


def run():
    """Console entry point: serve the API with uvicorn."""
    import uvicorn
    uvicorn.run(
        "precip_api.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=config.log_level.lower()
    )


if __name__ == "__main__":
    run()
