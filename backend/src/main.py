"""FastAPI application entry point for the case intake service."""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from caseintake import __version__
from caseintake.api import register_exception_handlers
from caseintake.api.dependencies import get_session_factory
from caseintake.api.middleware import RequestLoggingMiddleware
from caseintake.config import get_settings
from caseintake.db import SessionFactory, create_engine, create_session_factory, ping
from caseintake.logging import get_logger, setup_logging

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    settings = get_settings()
    logger.info(
        "Starting case intake API",
        extra={
            "environment": settings.environment,
            "debug": settings.api_debug,
        },
    )

    engine = create_engine(settings)
    app.state.session_factory = create_session_factory(engine)

    yield

    logger.info("Shutting down case intake API")
    await engine.dispose()


settings = get_settings()

app = FastAPI(
    title="Case Intake API",
    description="Intake, review and lifecycle tracking of helpline cases",
    version=__version__,
    docs_url="/docs" if settings.expose_docs else None,
    redoc_url="/redoc" if settings.expose_docs else None,
    openapi_url="/openapi.json" if settings.expose_docs else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)


# =========================
# Health Check Endpoints
# =========================


@app.get("/health", tags=["Health"])
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "caseintake-api"}


@app.get("/health/ready", tags=["Health"])
async def readiness_check(
    session_factory: SessionFactory = Depends(get_session_factory),
):
    """Readiness check that verifies database connectivity."""
    try:
        await ping(session_factory)
        database = "healthy"
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        database = f"unhealthy: {e}"

    ready = database == "healthy"
    return JSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ready" if ready else "not_ready",
            "checks": {"database": database},
        },
    )


# =========================
# API Routers
# =========================

from caseintake.api.cases import router as cases_router  # noqa: E402
from caseintake.api.ingestion import router as ingestion_router  # noqa: E402
from caseintake.api.reports import router as reports_router  # noqa: E402

app.include_router(cases_router, prefix="/api/v1", tags=["Cases"])
app.include_router(ingestion_router, prefix="/api/v1", tags=["Ingestion"])
app.include_router(reports_router, prefix="/api/v1", tags=["Reports"])
