"""Main FastAPI application with modular architecture."""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.dependencies import get_generative_client, get_production_manager, get_workspace_manager
from .core.exceptions import IdeatorBaseException
from .models.responses import ErrorDetails
from .api import (
    health_router, settings_router, discovery_router,
    workspaces_router, productions_router
)
from .utils.logging import LoggerSetup, CorrelatedLogger
from .utils.response_helpers import ResponseHelper

# Setup logging
LoggerSetup.setup_logging()
logger = CorrelatedLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"{settings.api_title} v{settings.api_version} starting up")
    yield
    # Shutdown
    await get_production_manager().dispose_all()
    get_workspace_manager().close_all()
    get_generative_client().close()
    logger.info("Application shut down")

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
)

# Global exception handler for custom exceptions
@app.exception_handler(IdeatorBaseException)
async def ideator_exception_handler(request, exc: IdeatorBaseException):
    """Handle custom service exceptions."""
    return ResponseHelper.create_error_from_exception(exc)

@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters."""
    return ResponseHelper.create_error_response(
        error_code="VALIDATION_ERROR",
        message="Invalid request",
        status_code=422,
        details=ErrorDetails(errors=[error.get("msg") for error in exc.errors()])
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle FastAPI HTTP exceptions."""
    return ResponseHelper.create_error_response(
        error_code="HTTP_ERROR",
        message=exc.detail,
        status_code=exc.status_code
    )

@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error: {str(exc)}")

    return ResponseHelper.create_error_response(
        error_code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        status_code=500
    )

# Include routers
app.include_router(health_router)
app.include_router(settings_router)
app.include_router(discovery_router)
app.include_router(workspaces_router)
app.include_router(productions_router)
