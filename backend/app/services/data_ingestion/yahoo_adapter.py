"""
Yahoo Finance Data Adapter

Fetches closing-price history from the Yahoo Finance chart API.
Requests are spaced by a shared RateLimiter and retried with backoff:
- 429: exponential backoff (2^attempt units)
- 404: fail immediately, symbol unknown
- anything else: linear backoff (attempt units)
"""

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Optional

import aiohttp
import numpy as np

from app.core.config import settings
from app.services.base import (
    MarketDataError,
    SymbolNotFoundError,
    RateLimitedError,
    MalformedResponseError,
    DataUnavailableError,
)
from app.services.data_ingestion.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

SOURCE_NAME = "YahooFinance"

DAY_SECONDS = 24 * 60 * 60

# Query window per interval; daily must cover the 200-period SMA plus one bar
WINDOW_DAYS = {
    "1d": 400,
    "1wk": 365,
    "1mo": 5 * 365,
}
DEFAULT_WINDOW_DAYS = 30

# Common ticker typos and aliases
SYMBOL_CORRECTIONS = {
    "APPL": "AAPL",
    "GOOGL": "GOOG",
}

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    ),
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
}


def normalize_symbol(symbol: str) -> str:
    """Uppercase, trim and apply known ticker corrections."""
    symbol = symbol.upper().strip()
    return SYMBOL_CORRECTIONS.get(symbol, symbol)


def query_window(interval: str, now: Optional[float] = None) -> tuple[int, int]:
    """
    Compute the (period1, period2) epoch-second window for an interval.
    """
    period2 = int(now if now is not None else time.time())
    days = WINDOW_DAYS.get(interval, DEFAULT_WINDOW_DAYS)
    return period2 - days * DAY_SECONDS, period2


def extract_closes(symbol: str, payload: Any) -> np.ndarray:
    """
    Pull chart.result[0].indicators.quote[0].close out of a chart payload.

    Null entries are dropped. A missing path is a MalformedResponseError
    (retryable). A close array that is empty, not a list or holds non-numeric
    entries is a terminal DataUnavailableError.
    """
    try:
        closes = payload["chart"]["result"][0]["indicators"]["quote"][0]["close"]
    except (KeyError, IndexError, TypeError):
        raise MalformedResponseError(
            SOURCE_NAME,
            "Invalid data structure received from Yahoo Finance",
            details={"response_data": payload},
        ) from None

    if not isinstance(closes, list):
        raise DataUnavailableError(
            SOURCE_NAME,
            f"Close prices for {symbol} are not a list",
            details={"response_data": payload},
        )

    values = []
    for value in closes:
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataUnavailableError(
                SOURCE_NAME,
                f"Non-numeric close price for {symbol}: {value!r}",
                details={"response_data": payload},
            )
        values.append(float(value))

    if not values:
        raise DataUnavailableError(SOURCE_NAME, f"No price data available for {symbol}")

    return np.array(values, dtype=float)


class YahooChartClient:
    """
    Yahoo Finance chart API client.

    Handles the HTTP session, rate limiting and the retry policy.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        base_url: Optional[str] = None,
        max_retries: Optional[int] = None,
        backoff_unit: Optional[float] = None,
        timeout: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self._rate_limiter = rate_limiter
        self._base_url = (base_url or settings.yahoo_base_url).rstrip("/")
        self._max_retries = max_retries if max_retries is not None else settings.max_retries
        self._backoff_unit = (
            backoff_unit if backoff_unit is not None else settings.backoff_unit_seconds
        )
        self._timeout = timeout if timeout is not None else settings.yahoo_timeout_seconds
        self._sleep = sleep
        self._clock = clock
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers=REQUEST_HEADERS,
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(self, url: str, params: dict) -> tuple[int, Any]:
        """
        Perform one GET.

        Returns:
            (status, decoded JSON body or None when the body is not JSON)
        """
        session = await self._ensure_session()
        async with session.get(url, params=params) as resp:
            try:
                payload = await resp.json(content_type=None)
            except ValueError:
                payload = None
            return resp.status, payload

    def _check_status(self, symbol: str, status: int, payload: Any) -> None:
        if status == 429:
            raise RateLimitedError(SOURCE_NAME, f"Rate limited fetching {symbol}")
        if status == 404:
            raise SymbolNotFoundError(
                SOURCE_NAME,
                f"Symbol {symbol} not found. Please check if the symbol is correct.",
            )
        if status != 200:
            raise MarketDataError(
                SOURCE_NAME,
                f"Unexpected HTTP {status} for {symbol}",
                details={"status": status, "response_data": payload},
            )

    async def fetch_closes(self, symbol: str, interval: str) -> np.ndarray:
        """
        Fetch the closing-price series for a symbol.

        Args:
            symbol: Ticker symbol (normalized before the request)
            interval: 1d, 1wk or 1mo (other values get a short window)

        Returns:
            Closing prices, oldest first, nulls removed

        Raises:
            SymbolNotFoundError: Provider returned 404
            DataUnavailableError: Empty series or retries exhausted
        """
        symbol = normalize_symbol(symbol)
        period1, period2 = query_window(interval, self._clock())
        url = f"{self._base_url}/v8/finance/chart/{symbol}"
        params = {"interval": interval, "period1": period1, "period2": period2}

        last_error: Optional[Exception] = None

        for attempt in range(1, self._max_retries + 1):
            await self._rate_limiter.reserve()
            try:
                logger.info(f"Fetching {symbol} ({interval}) from Yahoo Finance, attempt {attempt}")
                status, payload = await self._request(url, params)
                self._check_status(symbol, status, payload)
                closes = extract_closes(symbol, payload)
                logger.info(f"Got {len(closes)} closes for {symbol}")
                return closes

            except (SymbolNotFoundError, DataUnavailableError) as e:
                logger.warning(f"Terminal error fetching {symbol}: {e.message}")
                raise

            except RateLimitedError as e:
                last_error = e
                if attempt < self._max_retries:
                    delay = (2 ** attempt) * self._backoff_unit
                    logger.warning(f"Rate limited on {symbol}, backing off {delay:.1f}s")
                    await self._sleep(delay)

            except (MarketDataError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = e
                if attempt < self._max_retries:
                    delay = attempt * self._backoff_unit
                    logger.warning(f"Fetch failed for {symbol} ({e}), retrying in {delay:.1f}s")
                    await self._sleep(delay)

        raise self._exhausted_error(symbol, last_error)

    def _exhausted_error(self, symbol: str, last_error: Optional[Exception]) -> DataUnavailableError:
        reason = getattr(last_error, "message", None) or str(last_error)
        message = (
            f"Failed to fetch data for {symbol} after {self._max_retries} retries: {reason}"
        )

        details = {"attempts": self._max_retries}
        response_data = getattr(last_error, "details", {}).get("response_data")
        if response_data is not None:
            message += f"\nResponse data: {json.dumps(response_data, indent=2, default=str)}"
            details["response_data"] = response_data

        logger.error(message)
        return DataUnavailableError(SOURCE_NAME, message, details=details)
