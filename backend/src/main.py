# pyright: reportMissingTypeStubs=false
"""
Expediente Clínico Backend API

A FastAPI application handling the record intake of a clinical records
system: patient registration, initial and follow-up consultations with
image attachments, and vital-sign assessments.

Features:
- JWT bearer authentication
- PostgreSQL database with SQLAlchemy ORM
- Image attachments stored on DigitalOcean Spaces
"""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import assessments, consultations, patients, system
from core.config import LOCAL_UPLOAD_DIR, is_development
from core.constants import CORS_ORIGINS
from core.exceptions import IntakeError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)
logger.info("🏥 Expediente Clínico API starting...")

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("🚀 Starting Expediente Clínico Backend API")
    yield
    logger.info("🛑 Shutting down Expediente Clínico Backend API")


# Create FastAPI application
app = FastAPI(
    title="Expediente Clínico Backend",
    description="Clinical records intake: patients, consultations and vital-sign assessments",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc",  # ReDoc
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(
    patients.router,
    prefix="/api/pacientes",
    tags=["patients"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        404: {"description": "Resource not found"},
        500: {"description": "Internal server error"},
    },
)
app.include_router(
    consultations.router,
    prefix="/api/consultas",
    tags=["consultations"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        500: {"description": "Internal server error"},
    },
)
app.include_router(
    assessments.router,
    prefix="/api/valoraciones",
    tags=["assessments"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        500: {"description": "Internal server error"},
    },
)
app.include_router(
    system.router,
    prefix="/api",
    tags=["system"],
)

# Locally stored attachments (used when Spaces is not configured)
app.mount("/static", StaticFiles(directory=LOCAL_UPLOAD_DIR, check_dir=False), name="static")


@app.get(
    "/",
    summary="Root endpoint",
    description="Returns basic API information",
)
async def root() -> dict[str, str]:
    """Get API information."""
    return {
        "message": "Expediente Clínico Backend API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get(
    "/health",
    summary="Health check",
    description="Returns the health status of the API",
)
async def health_check() -> dict[str, str]:
    """Check if the API is healthy and responding."""
    return {"status": "healthy"}


# Global exception handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions globally."""
    logger.exception(f"Unhandled exception: {exc}")
    content: Dict[str, Any] = {"error": INTERNAL_ERROR_MESSAGE}
    if is_development():
        content["details"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=content)


@app.exception_handler(IntakeError)
async def intake_error_handler(request: Request, exc: IntakeError):
    """Handle domain errors raised by the intake services."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors with the same body shape as domain errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle ValueError exceptions."""
    logger.warning(f"ValueError: {exc}")
    return JSONResponse(
        status_code=400,
        content={"error": str(exc)},
    )

