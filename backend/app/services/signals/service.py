"""
Signal Service Implementation

Orchestrates the signal pipeline:
    Yahoo Finance closes -> length guard -> synthetic OHLC -> indicators
    -> weighted aggregation -> rendered recommendation
"""

import logging
from typing import Optional

import numpy as np

from app.core.config import settings
from app.schemas.signal import SignalRequest, SignalResult
from app.services.base import ServiceError
from app.services.data_ingestion import YahooChartClient, get_yahoo_client
from app.services.indicators.calculations import synthesize_ohlc
from app.services.signals.aggregator import (
    aggregate,
    compute_indicators,
    failure_result,
    insufficient_data_result,
)
from app.services.signals.interface import SignalServiceInterface
from app.services.signals.policy import DEFAULT_POLICY, ScoringPolicy, min_data_points

logger = logging.getLogger(__name__)


class SignalService(SignalServiceInterface):
    """
    Signal Service.

    The random generator behind the synthetic OHLC is injectable so results
    can be reproduced; by default it follows `settings.ohlc_seed`.
    """

    def __init__(
        self,
        client: Optional[YahooChartClient] = None,
        policy: ScoringPolicy = DEFAULT_POLICY,
        rng: Optional[np.random.Generator] = None,
        jitter: Optional[float] = None,
    ):
        self._client = client
        self._policy = policy
        self._rng = rng if rng is not None else np.random.default_rng(settings.ohlc_seed)
        self._jitter = jitter if jitter is not None else settings.ohlc_jitter

    @property
    def name(self) -> str:
        return "SignalService"

    @property
    def client(self) -> YahooChartClient:
        """Lazy load the shared market data client."""
        if self._client is None:
            self._client = get_yahoo_client()
        return self._client

    async def execute(self, input_data: SignalRequest) -> SignalResult:
        return await self.get_signal(input_data.symbol, input_data.interval)

    async def get_signal(self, symbol: str, interval: Optional[str] = None) -> SignalResult:
        """Fetch, analyze and classify. Failures become ANALYSIS_FAILED results."""
        symbol = symbol.upper().strip()
        interval = interval or settings.default_interval

        try:
            closes = await self.client.fetch_closes(symbol, interval)

            required = min_data_points(interval)
            if len(closes) < required:
                logger.warning(
                    f"Only {len(closes)} points for {symbol} ({interval}), need {required}"
                )
                return insufficient_data_result(symbol, interval, len(closes), required)

            return self.analyze(symbol, interval, closes)

        except ServiceError as e:
            logger.error(f"Signal for {symbol} failed: {e}")
            return failure_result(symbol, interval, e.message)
        except Exception as e:
            logger.exception(f"Unexpected error analysing {symbol}")
            return failure_result(symbol, interval, str(e))

    def analyze(self, symbol: str, interval: str, closes: np.ndarray) -> SignalResult:
        """Run the indicator and aggregation stages on an already fetched series."""
        closes = np.asarray(closes, dtype=float)
        ohlc = synthesize_ohlc(closes, self._rng, self._jitter)
        snapshot = compute_indicators(closes, ohlc, interval, self._policy)
        result = aggregate(symbol, interval, closes, ohlc, snapshot, self._policy)

        logger.info(
            f"{symbol} ({interval}): {result.classification.value} "
            f"bull={result.bullish_score:.1f} bear={result.bearish_score:.1f} "
            f"confidence={result.confidence.value}"
        )
        return result

    async def health_check(self) -> bool:
        """Pure computation plus a lazily created client."""
        return True

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()


# Singleton instance
_service_instance: Optional[SignalService] = None


def get_signal_service() -> SignalService:
    """Get or create signal service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = SignalService()
    return _service_instance
