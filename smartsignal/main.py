"""
SmartSignal - FastAPI Application

Main entry point for the signal API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartsignal.core.config import settings
from smartsignal.core.logging_config import setup_logging
from smartsignal.core.sessions import get_session_status
from smartsignal.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Default preset: {settings.default_preset.value}, min candles: {settings.min_candles}")

    yield

    # Shutdown
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    SmartSignal Confluence Signal API

    ## Architecture
    - **Indicator Engine**: SMA, EMA, RSI, MACD, Bollinger, ADX, ATR, pivots (NumPy)
    - **Structure Detector**: Fair value gaps, order blocks, liquidity zones
    - **Confluence Engine**: Weighted rule tables (BASIC / ENHANCED presets)
    - **Signal Classifier**: 7-level signal with stop-loss / take-profit

    ## Core Principles
    - Deterministic: same candles and clock, same signal
    - Signals are analysis, not orders
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "session": get_session_status(),
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "SmartSignal API",
        "docs": "/docs",
        "health": "/health",
    }
