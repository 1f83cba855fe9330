"""
Calibration Tracker - Main FastAPI Application
Version: 1.1.0

Changelog:
v1.1.0 (2026-10-12): Exports and certificate download routers; demo seeding on startup
v1.0.0 (2026-10-05): Initial FastAPI application
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from config import settings, init_directories
from api import auth, dashboard, devices, exports
from services.device_service import device_service

init_directories()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(f'{settings.LOGS_DIR}/api.log'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    # Initialize database
    from models import init_db
    await init_db()

    if settings.SEED_DEMO_DATA:
        from database import get_db
        from seed import seed_if_empty
        async with get_db() as db:
            await seed_if_empty(db)

    # Live device snapshot
    await device_service.start()

    logger.info("All services started successfully")

    yield

    # Shutdown
    logger.info("Shutting down services...")
    device_service.stop()
    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Measuring device calibration tracker",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(devices.router, prefix="/api", tags=["Devices"])
app.include_router(devices.calibrations_router, prefix="/api", tags=["Devices"])
app.include_router(dashboard.router, prefix="/api", tags=["Dashboard"])
app.include_router(exports.router, prefix="/api", tags=["Exports"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "app": settings.APP_NAME,
        "devices_loaded": device_service.loaded,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        workers=settings.API_WORKERS
    )
