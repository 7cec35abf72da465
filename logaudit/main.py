from contextlib import asynccontextmanager
from dotenv import load_dotenv
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from logaudit.api import api_router
from logaudit.core.config import settings
from logaudit.core.logging_config import configure_logging
from logaudit.middleware import RequestIDMiddleware
from logaudit.standards import list_standards

# Load environment variables
load_dotenv()

# Configure logging with request_id and batch_id support
configure_logging()

# Get logger for this module
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown.

    The standards catalog is built at import time; startup only reports what
    is available and whether an LLM provider is configured for summaries.
    """
    logger.info("Starting LogAudit API application...")
    standards = list_standards()
    logger.info(
        f"Loaded {len(standards)} standards: {', '.join(s.id for s in standards)}"
    )
    if not settings.GROQ_API_KEY and not settings.GEMINI_API_KEY:
        logger.warning(
            "No LLM API key configured - log summaries will report a configuration error"
        )
    try:
        yield
    finally:
        logger.info("Shutting down LogAudit API application...")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
    openapi_url="/openapi.json" if settings.is_local else None,
)

# Add Request ID middleware (must be added first to ensure request_id is available)
app.add_middleware(RequestIDMiddleware)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include all API routes
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/health")
async def health_check():
    try:
        return {
            "fastAPI server": {"status": "healthy"},
            "standards": len(list_standards()),
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Health check failed: {str(e)}")
