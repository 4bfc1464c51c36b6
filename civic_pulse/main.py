"""
Civic Pulse Triage - FastAPI Application Entry Point

Decides the priority of citizen-reported civic issues.

DESIGN PRINCIPLES:
- AI assessment is preferred but optional
- Every well-formed issue gets a priority, even when AI and the store are down
- Priority is decided once, at issue creation
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from civic_pulse.core.settings import settings
from civic_pulse.models.issue import InvalidIssueContext
from civic_pulse.routes import health, triage
from civic_pulse.services.ai_priority import get_ai_priority_assessor

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Priority triage for citizen-reported civic issues",
    debug=settings.DEBUG,
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled exceptions with traceback."""
    logger.error(f"🔥 Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Internal server error: {str(exc)}"},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(InvalidIssueContext)
async def invalid_issue_handler(request: Request, exc: InvalidIssueContext):
    logger.warning(f"Invalid issue context on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "errors": jsonable_encoder(exc.errors)},
    )


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    # Resolves the provider once so a missing key is logged at startup
    get_ai_priority_assessor()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}")


app.include_router(health.router)
app.include_router(triage.router)


@app.get("/")
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "triage": "/triage/evaluate",
    }
