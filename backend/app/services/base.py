"""
Base Service Interface

All services inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for all services.

    Each service:
    - Has a defined input type
    - Has a defined output type
    - Can check its health
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the service's main function.

        Args:
            input_data: Validated input conforming to InputT schema

        Returns:
            Output conforming to OutputT schema
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if service is healthy and can process requests."""
        pass


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class MarketDataError(ServiceError):
    """Market data could not be retrieved."""
    pass


class SymbolNotFoundError(MarketDataError):
    """Provider does not know the symbol (HTTP 404). Never retried."""
    pass


class RateLimitedError(MarketDataError):
    """Provider rejected the request with HTTP 429."""
    pass


class MalformedResponseError(MarketDataError):
    """Provider payload does not have the expected shape."""

    @property
    def response_data(self):
        return self.details.get("response_data")


class DataUnavailableError(MarketDataError):
    """Terminal fetch failure: empty series or retries exhausted."""
    pass
