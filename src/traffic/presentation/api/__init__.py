"""
API package.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .routes import roads, backfill
from .dependencies import init_service, get_service, reset_service
from . import dependencies

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Runs the live simulation for as long as the server is up."""
    service = dependencies._service
    if service is not None and dependencies._autostart:
        logger.info("Starting simulation...")
        service.start()
    try:
        yield
    finally:
        if service is not None:
            service.stop()

# Initialize main app
app = FastAPI(title="Road Traffic Exporter", lifespan=lifespan)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(roads.app.router, tags=["roads"])
app.include_router(backfill.app.router, tags=["backfill"])
