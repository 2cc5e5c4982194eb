"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from talent_reports.config import get_settings
from talent_reports.errors import MissingSchemaError, ReportCoreError
from talent_reports.models import ErrorResponse
from talent_reports.routers import (
    health_router,
    reports_router,
    surveys_router,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib and structlog output through one handler."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Talent Assessment Reports...")
    settings = get_settings()
    logger.info(f"Environment: {'DEBUG' if settings.debug else 'PRODUCTION'}")
    yield
    logger.info("Shutting down Talent Assessment Reports...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
        ## Talent Assessment Reports API

        Report computation for talent-assessment programs.

        ### Features:
        - Score-range feedback assignment from the feedback library
        - 360 qualitative feedback aggregated across raters
        - Survey completion summaries per client
        """,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(reports_router)
    app.include_router(surveys_router)

    @app.exception_handler(ReportCoreError)
    async def report_error_handler(request: Request, exc: ReportCoreError):
        if isinstance(exc, MissingSchemaError):
            logger.error(f"Missing schema: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(detail=exc.message, error_code=exc.error_code).model_dump()
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error": str(exc)}
        )

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("talent_reports.main:app", host="0.0.0.0", port=8000, reload=True)
