from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time
from datetime import datetime, timezone
from contextlib import asynccontextmanager

# Import configuration and database
from . import __version__
from .config import settings
from .database import SessionLocal, init_db
from .exceptions import LegalAssistantError
from .models.schemas import ErrorResponse, HealthCheck

# Import routers
from .routers import admin, auth, dashboard, memorandums, site_settings, translations

from .services.claude_client import get_claude_client

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Legal Assistant application...")

    try:
        init_db()
        logger.info("Database initialized")

        if not get_claude_client().is_configured:
            logger.warning("ANTHROPIC_API_KEY is not set; translation and drafting will return 503")

    except Exception as e:
        logger.error(f"Failed to initialize application: {str(e)}")
        raise

    yield

    logger.info("Shutting down Legal Assistant application...")

# Create FastAPI application
app = FastAPI(
    title="Legal Assistant",
    description="Bilingual (Arabic/English) legal translation and memorandum drafting",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin] if settings.cors_origin else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time to response headers."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response

def _error_response(status_code: int, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=message, status_code=status_code, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True)
    )

# Error handlers
@app.exception_handler(LegalAssistantError)
async def legal_assistant_exception_handler(request: Request, exc: LegalAssistantError):
    """Handle domain errors."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc.__cause__)
    return _error_response(exc.status_code, exc.message, exc.details)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report schema violations as 400 with per-field messages."""
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]) or "body",
            "message": error.get("msg", "Invalid value")
        }
        for error in exc.errors()
    ]
    return _error_response(400, "Invalid request data", details)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    return _error_response(exc.status_code, str(exc.detail))

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return _error_response(500, "Internal server error")

# Include routers
app.include_router(auth.router)
app.include_router(translations.router)
app.include_router(memorandums.router)
app.include_router(dashboard.router)
app.include_router(site_settings.router)
app.include_router(admin.router)

# Health check endpoint
@app.get("/health", response_model=HealthCheck)
async def health_check():
    """Health check endpoint."""
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
        db_status = "healthy"
    except Exception:
        db_status = "unhealthy"

    claude_status = "configured" if get_claude_client().is_configured else "not_configured"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "timestamp": datetime.now(timezone.utc),
        "version": __version__,
        "services": {
            "database": db_status,
            "claude": claude_status
        }
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
