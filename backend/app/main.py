"""
Signal Engine - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from app.core.config import settings
from app.api.v1 import router as api_v1_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Rate limit: {settings.rate_limit_delay_ms}ms, retries: {settings.max_retries}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    from app.services.signals import get_signal_service
    from app.services.notifications import get_telegram_notifier

    await get_signal_service().close()
    await get_telegram_notifier().close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Market Signal Engine API

    ## Pipeline
    - **Data Ingestion**: Closing prices from Yahoo Finance (rate limited, retried)
    - **Indicator Engine**: SMA, EMA, RSI, MACD, Bollinger Bands, ADX, candlestick patterns
    - **Signal Aggregator**: Weighted bullish/bearish scoring with confirmation rules
    - **Notification**: Rendered recommendation forwarded to Telegram
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
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
    }


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Root endpoint."""
    return "📊 Market Signal API (daily, weekly or monthly)"
