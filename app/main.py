from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.core.config import get_settings
from app.core.logging import setup_logging
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.error_handling import ErrorHandlingMiddleware
from app.api.endpoints import prioritize
from app.api.deps import cleanup_resources
from app.models.schemas import HealthResponse

settings = get_settings()

# Initialize logging system
setup_logging(log_level=settings.log_level, log_dir=settings.log_dir)

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version=settings.app_version)

# Add middleware (order matters - last added runs first)
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(prioritize.router, prefix="/api", tags=["prioritize"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": settings.app_name, "version": settings.app_version}


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="healthy", model_configured=settings.model_configured)


@app.on_event("startup")
async def startup_event():
    """Warn (but keep serving) when the model provider is not configured."""
    if not settings.model_configured:
        logger.warning(
            "COHERE_API_KEY is not set. Set it in a .env file in the project root; "
            "prioritize requests will fail until it is configured."
        )


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup resources on shutdown."""
    cleanup_resources()
