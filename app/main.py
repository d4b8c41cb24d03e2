"""Main FastAPI application with modular architecture."""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.exceptions import ThumbnailStudioError
from app.config.localization import get_localization_manager
from app.api import health_router, thumbnails_router, remake_router
from app.utils.logging import LoggerSetup, CorrelatedLogger
from app.utils.response_helpers import ResponseHelper

# Setup logging
LoggerSetup.setup_logging()

logger = CorrelatedLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    print(f"🚀 {settings.api_title} v{settings.api_version} starting up...")
    yield
    # Shutdown
    print("📪 Application shutting down...")

# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
    swagger_ui_parameters={
        "defaultModelsExpandDepth": -1,
        "tryItOutEnabled": True,
    }
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# Global exception handler for custom exceptions
@app.exception_handler(ThumbnailStudioError)
async def thumbnail_studio_exception_handler(request: Request, exc: ThumbnailStudioError):
    """Handle custom thumbnail studio exceptions."""
    language = get_localization_manager().resolve_language(
        accept_language=request.headers.get("accept-language")
    )
    return ResponseHelper.create_error_from_exception(exc, language=language)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request body, form and path validation errors."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(loc) for loc in first.get("loc", []))

    return ResponseHelper.create_error_response(
        error_code="VALIDATION_ERROR",
        message=f"{field}: {first.get('msg', 'Invalid request')}" if field else "Invalid request",
        status_code=400
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle FastAPI HTTP exceptions."""
    return ResponseHelper.create_error_response(
        error_code="HTTP_ERROR",
        message=exc.detail,
        status_code=exc.status_code
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}")

    return ResponseHelper.create_error_response(
        error_code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        status_code=500
    )

# Include routers
app.include_router(health_router)
app.include_router(thumbnails_router)
app.include_router(remake_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower()
    )
