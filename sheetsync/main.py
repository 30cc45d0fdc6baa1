"""
Strava Sheets Sync API

FastAPI application linking Strava accounts to a Google Sheets ledger.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sheetsync import __version__
from sheetsync.config import settings
from sheetsync.api.v1.router import api_router
from sheetsync.features.sheets import create_sheet_store
from sheetsync.features.sync import SyncService
from sheetsync.features.users.service import UserService


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Strava Sheets Sync API...")
    store = create_sheet_store(settings)
    app.state.sync_service = SyncService(store)
    app.state.user_service = UserService(store)
    logger.info(f"Using spreadsheet {settings.google_spreadsheet_id}")

    yield

    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="Strava Sheets Sync API",
    description="Import Strava activities into per-athlete Google Sheets",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
