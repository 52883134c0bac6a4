"""
Main FastAPI application entry point.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from book_recommender.api import router as api_router
from book_recommender.core.config import get_settings
from book_recommender.core.database import Base, SessionLocal, engine
from book_recommender.core.exceptions import StoreUnavailableError
from book_recommender.core.logging import get_logger, setup_logging
from book_recommender.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

settings = get_settings()

# Set up logging
setup_logging()
logger = get_logger(__name__)


def init_sentry() -> None:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=0.1 if settings.ENVIRONMENT == "production" else 1.0,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
    )
    logger.info("Sentry initialized successfully")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(
        f"Starting {settings.APP_NAME}",
        extra={
            "extra_fields": {
                "environment": settings.ENVIRONMENT,
                "debug": settings.DEBUG,
                "recommendation_limit": settings.MAX_RECOMMENDATIONS_PER_BOOK,
            }
        },
    )

    # Create any missing tables; migrations own schema changes
    try:
        import book_recommender.models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("Database tables verified/created")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}", exc_info=True)

    if settings.SENTRY_DSN:
        init_sentry()

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}")
    engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Personal book libraries with reader recommendations and multi-criterion ratings",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    lifespan=lifespan,
)

# CORS middleware - must be added first (outermost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Add other middleware
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    """Report data store faults as 503 rather than as empty or negative results."""
    logger.error(
        f"Store unavailable during {request.method} {request.url.path}",
        exc_info=exc,
    )
    return JSONResponse(status_code=503, content={"detail": exc.detail})


@app.get("/health")
def health_check():
    """
    Health check endpoint for load balancers and monitoring.

    Returns basic application health status.
    """
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health/ready")
def readiness_check():
    """
    Readiness check endpoint.

    Verifies the database answers a trivial query.
    """
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "disconnected"
    finally:
        db.close()

    status = "ready" if db_status == "connected" else "not_ready"

    return {
        "status": status,
        "checks": {
            "database": db_status,
        },
    }


# Include API routes
app.include_router(api_router, prefix=settings.API_V1_PREFIX)
