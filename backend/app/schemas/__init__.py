"""
Signal Engine Schema Contracts

This module defines the JSON contracts between the API and the signal service.
"""

from app.schemas.signal import (
    TrendDirection,
    ConfidenceLevel,
    SignalClassification,
    SignalRequest,
    SignalResult,
    SignalResponse,
)

__all__ = [
    # Enums
    "TrendDirection",
    "ConfidenceLevel",
    "SignalClassification",
    # Contracts
    "SignalRequest",
    "SignalResult",
    "SignalResponse",
]
