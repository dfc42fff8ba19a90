"""
CONTRACT: Signal Engine

Input: SignalRequest (symbol + interval)
Output: SignalResult

Fetch -> indicators -> weighted aggregation -> rendered recommendation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class TrendDirection(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    SIDEWAYS = "SIDEWAYS"


class ConfidenceLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class SignalClassification(str, Enum):
    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    STRONG_SELL = "STRONG_SELL"
    SELL = "SELL"
    MIXED = "MIXED"
    NO_CLEAR_SIGNAL = "NO_CLEAR_SIGNAL"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"


# =============================================================================
# INPUT: SignalRequest
# =============================================================================


class SignalRequest(BaseModel):
    """
    Request for a trading signal.
    Sent by: API
    Received by: Signal Service
    """

    symbol: str = Field(..., min_length=1, description="Ticker symbol, e.g. AAPL")
    interval: Optional[str] = Field(
        default=None, description="1d, 1wk or 1mo (None: configured default)"
    )


# =============================================================================
# OUTPUT: SignalResult
# =============================================================================


class SignalResult(BaseModel):
    """Classified recommendation with its technical breakdown."""

    symbol: str
    interval: str
    classification: SignalClassification
    bullish_score: float = Field(0.0, ge=0, le=100)
    bearish_score: float = Field(0.0, ge=0, le=100)
    confidence: ConfidenceLevel = ConfidenceLevel.LOW
    price: Optional[float] = None
    details: list[str] = Field(default_factory=list)
    message: str
    generated_at: datetime = Field(default_factory=datetime.now)


class SignalResponse(BaseModel):
    """API envelope for a signal request."""

    symbol: str
    interval: str
    signal: str
    notified: bool = False
    result: SignalResult
