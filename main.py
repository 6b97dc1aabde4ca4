"""FastAPI application: entry point for the Siteflow gateway."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from adapters.factory import check_all_adapters
from dashboard import dashboard_router
from routes import router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("=" * 70)
    logger.info("Siteflow gateway - Starting Up")
    logger.info("=" * 70)

    vendors = await check_all_adapters()
    for name, ready in vendors.items():
        logger.info("Vendor %-18s %s", name, "configured" if ready else "NOT configured")

    logger.info("Siteflow gateway is running on http://localhost:%d", settings.port)
    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title="Siteflow",
    description="Marketing site, operations dashboard and reporting API gateway",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes first: the page router ends in a catch-all 404
app.include_router(router)
app.include_router(dashboard_router)

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port, reload=True)
