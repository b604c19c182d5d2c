"""
Main FastAPI application for the Weather Backend.

This module contains the main FastAPI application instance, the startup
and shutdown hooks, and the translation of application errors into JSON
responses.
"""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from weather_backend.config import get_settings
from weather_backend.core.exceptions import WeatherBackendError
from weather_backend.database import engine, init_db
from weather_backend.routers.auth import router as auth_router
from weather_backend.routers.weather import router as weather_router
from weather_backend.utils.logging_config import setup_logging, get_logger

settings = get_settings()

# Initialize logging
setup_logging(settings)
logger = get_logger(__name__)

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Connects to the database (fatal on failure) and opens the shared
    outbound HTTP client; both are released on shutdown.
    """
    # Startup
    logger.info("=" * 60)
    logger.info("Weather Backend - Application starting up")
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")
    logger.info(f"Database: {engine.url.get_backend_name()}")
    logger.info("=" * 60)

    if not settings.OPENWEATHER_API_KEY:
        logger.warning("OPENWEATHER_API_KEY is not set; weather requests will be rejected by the provider")

    try:
        await init_db(engine)
    except Exception:
        logger.critical("Database connection failed, shutting down", exc_info=True)
        await engine.dispose()
        raise

    app.state.http_client = httpx.AsyncClient(timeout=settings.OPENWEATHER_TIMEOUT)

    yield

    # Shutdown
    await app.state.http_client.aclose()
    await engine.dispose()
    logger.info("=" * 60)
    logger.info("Weather Backend - Application shutting down")
    logger.info("=" * 60)


app = FastAPI(
    title="Weather Backend",
    description="User signup/signin and enriched OpenWeatherMap current weather and forecasts",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    """Report an exhausted rate limit as 429 with the limit that was hit."""
    logger.warning(f"{request.method} {request.url.path} -> 429: rate limit {exc.detail}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": "Rate limit exceeded", "error": str(exc.detail)},
    )


@app.exception_handler(WeatherBackendError)
async def weather_backend_exception_handler(request: Request, exc: WeatherBackendError):
    """Convert application errors into `{message[, error]}` bodies."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message} ({exc.error})")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies and query values as 400 with a single message."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query"))
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    message = "Invalid request: " + "; ".join(problems) if problems else "Invalid request"
    logger.warning(f"{request.method} {request.url.path} -> 400: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort for errors no other handler claims."""
    logger.error(f"{request.method} {request.url.path} -> 500: unhandled {exc!r}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error", "error": str(exc)},
    )


# Set up CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials="*" not in settings.BACKEND_CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.get("/")
async def root():
    """
    Root endpoint returning API information.
    """
    return {
        "message": "Welcome to the Weather Backend",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
@limiter.limit("60/minute")  # More generous limit for health checks
async def health_check(request: Request):
    """
    Health check endpoint.

    Rate limit: 60 requests per minute
    """
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router)
app.include_router(weather_router)
