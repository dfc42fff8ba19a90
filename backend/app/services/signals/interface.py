"""
Signal Service Interface

Defines the contract for the signal engine.
"""

from abc import abstractmethod

from app.services.base import BaseService
from app.schemas.signal import SignalRequest, SignalResult


class SignalServiceInterface(BaseService[SignalRequest, SignalResult]):
    """
    Signal Service Contract.

    INPUT: SignalRequest
        - symbol: Ticker symbol
        - interval: 1d / 1wk / 1mo

    OUTPUT: SignalResult
        - classification, bullish/bearish scores, confidence
        - rendered message for the notification channel

    Never raises: fetch and analysis failures come back as an
    ANALYSIS_FAILED result.
    """

    @property
    def name(self) -> str:
        return "SignalService"

    @abstractmethod
    async def execute(self, input_data: SignalRequest) -> SignalResult:
        """Fetch prices and produce a signal."""
        pass

    @abstractmethod
    async def get_signal(self, symbol: str, interval: str) -> SignalResult:
        """Fetch prices for one symbol and produce a signal."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass
