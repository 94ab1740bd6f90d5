import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from sqlalchemy import text
from app.core.config import settings
from app.core.database import engine
from app.core.logging_config import setup_logging
from app.api.v1.api import api_router
from app.middleware.logging import AccessLogMiddleware

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting Mining Maintenance Operations API ({settings.ENVIRONMENT})")
    yield
    await engine.dispose()
    logger.info("Database connections closed")

# Create FastAPI app
app_config = {
    "title": "Mining Maintenance Operations API",
    "description": "Operational records for the maintenance departments with governed, approval-based data changes",
    "version": "1.0.0",
    "lifespan": lifespan,
}

app = FastAPI(**app_config)
router = APIRouter()

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS
)

app.add_middleware(TrustedHostMiddleware, allowed_hosts=["*"])
app.add_middleware(AccessLogMiddleware)

# Include routers
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {
        "message": "Mining Maintenance Operations API",
        "status": "active",
        "version": "1.0.0",
        "docs": "/docs"
    }

@app.get("/health")
async def health_check():
    database = "connected"
    try:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check database ping failed: {e}")
        database = "unavailable"

    return {
        "status": "healthy" if database == "connected" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {
            "database": database,
        }
    }

def run_http():
    """Run HTTP server on port 9106"""
    import uvicorn
    print("🚀 Starting HTTP server on port 9106...")
    uvicorn.run(
        "main:app",  # Use string import
        host="0.0.0.0",
        port=9106,
        reload=settings.DEBUG
    )

if __name__ == "__main__":
    run_http()
