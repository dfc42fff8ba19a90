"""
Data Ingestion Service

CONTRACT:
    Input:  symbol + interval
    Output: closing-price series (numpy array, oldest first)

RESPONSIBILITIES:
    - Fetch chart data from Yahoo Finance
    - Normalize ticker symbols
    - Space outbound requests with one process-wide RateLimiter
    - Retry rate-limited and transient failures with backoff

NO ANALYSIS - Pure data fetching and validation.
"""

from typing import Optional

from app.core.config import settings
from app.services.data_ingestion.rate_limiter import RateLimiter
from app.services.data_ingestion.yahoo_adapter import (
    YahooChartClient,
    normalize_symbol,
    query_window,
    extract_closes,
)

__all__ = [
    "RateLimiter",
    "YahooChartClient",
    "normalize_symbol",
    "query_window",
    "extract_closes",
    "get_rate_limiter",
    "get_yahoo_client",
]

_rate_limiter: Optional[RateLimiter] = None
_client: Optional[YahooChartClient] = None


def get_rate_limiter() -> RateLimiter:
    """Process-wide limiter shared by every provider request."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(settings.rate_limit_delay_ms)
    return _rate_limiter


def get_yahoo_client() -> YahooChartClient:
    """Get or create the shared Yahoo Finance client."""
    global _client
    if _client is None:
        _client = YahooChartClient(get_rate_limiter())
    return _client
