# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Pajama Party Platform API.
# It configures the FastAPI application with routers and error handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings, settings
from app.dependencies import request_cors_headers
from app.exceptions import (
    PlatformException,
    platform_exception_handler,
    validation_exception_handler,
)
from app.routers import dreams, event, health, impact, signup, stations

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

PREFLIGHT_METHODS = ("GET", "POST", "OPTIONS")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective configuration on startup. Store clients are created
    lazily by the dependency providers.
    """
    logger.info(f"Starting Pajama Party Platform API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    if not settings.rate_limiting_enabled:
        logger.warning("REDIS_URL is not set: submissions are NOT rate limited")

    yield

    logger.info("Shutting down Pajama Party Platform API")


# Create FastAPI application
app = FastAPI(
    title="Pajama Party Platform API",
    description="""
## Dream train routes for the European Pajama Party

Visitors submit the night-train connections they dream of, find stations,
and follow how much support each destination has gathered.

### Endpoints

| Area | What it does |
|------|--------------|
| **Stations** | Search stations by name, city or country |
| **Dreams** | Submit a dream route, list dreams, aggregate by destination |
| **Impact** | Dashboard counters and popular routes |
| **Event** | Countdown to the synchronized event |
| **Signup** | Register for the event |

### Quick Start

```bash
# Search stations
curl "http://localhost:8000/api/stations/search?q=wien"

# Submit a dream
curl -X POST http://localhost:8000/api/dreams \\
  -H "Content-Type: application/json" \\
  -d '{"originStation": "Berlin Hbf", "destinationCity": "Vienna"}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Stations", "description": "Station directory lookup"},
        {"name": "Dreams", "description": "Dream route submissions and aggregation"},
        {"name": "Impact", "description": "Public dashboard metrics"},
        {"name": "Event", "description": "Event countdown metadata"},
        {"name": "Signup", "description": "Event registration"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Exception Handlers
# =============================================================================
# Error responses carry the same CORS headers as successful ones.

def _with_cors(request: Request, response: Response) -> Response:
    headers = request_cors_headers(request, get_settings(), (request.method,))
    for name, value in headers.items():
        response.headers[name] = value
    return response


@app.exception_handler(PlatformException)
async def handle_platform_exception(request: Request, exc: PlatformException):
    """Handle custom platform exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message} {exc.details}")
    return _with_cors(request, await platform_exception_handler(request, exc))


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request validation failures."""
    return _with_cors(request, await validation_exception_handler(request, exc))


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    """Keep framework errors (404, 405) in the {"error": ...} shape."""
    response = JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": "HTTP_ERROR"},
        headers=getattr(exc, "headers", None),
    )
    return _with_cors(request, response)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    response = JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "code": "INTERNAL_ERROR",
        }
    )
    return _with_cors(request, response)


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

app.include_router(
    stations.router,
    prefix="/api/stations",
    tags=["Stations"]
)

app.include_router(
    dreams.router,
    prefix="/api/dreams",
    tags=["Dreams"]
)

app.include_router(
    impact.router,
    prefix="/api/impact",
    tags=["Impact"]
)

app.include_router(
    event.router,
    prefix="/api/event",
    tags=["Event"]
)

app.include_router(
    signup.router,
    prefix="/api/pajama-party",
    tags=["Signup"]
)


# =============================================================================
# CORS Preflight
# =============================================================================

@app.options("/api/{path:path}", include_in_schema=False)
async def preflight(path: str, request: Request):
    """Answer CORS preflight requests for every API route."""
    headers = request_cors_headers(request, get_settings(), PREFLIGHT_METHODS)
    return Response(status_code=204, headers=headers)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Pajama Party Platform API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
