"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from geotrace.config import settings
from geotrace.database import init_db
from geotrace.routers import linestrings, tracks

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application on startup."""
    # Create database tables
    init_db()
    logger.info("✓ Database initialized")
    logger.info("✓ Running in %s mode", settings.ENVIRONMENT)
    yield


# Create FastAPI application
app = FastAPI(
    title="Geotrace",
    description="LineString trajectory codec, simplification and time lookup",
    version="0.1.0",
    lifespan=lifespan,
)

# Register routers
app.include_router(linestrings.router)
app.include_router(tracks.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.ENVIRONMENT}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("geotrace.main:app", host="0.0.0.0", port=8080, reload=settings.is_development)
