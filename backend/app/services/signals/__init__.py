"""
Signal Engine Service

CONTRACT:
    Input:  SignalRequest (symbol, interval)
    Output: SignalResult

RESPONSIBILITIES:
    - Fetch closing prices (rate limited, retried)
    - Reject series shorter than the interval minimum
    - Compute indicators on the closes and a synthetic OHLC surrogate
    - Score, classify and render the recommendation
    - Convert every failure into an ANALYSIS_FAILED result
"""

from app.services.signals.interface import SignalServiceInterface
from app.services.signals.policy import ScoringPolicy, SignalWeights, DEFAULT_POLICY
from app.services.signals.service import SignalService, get_signal_service

__all__ = [
    "SignalServiceInterface",
    "ScoringPolicy",
    "SignalWeights",
    "DEFAULT_POLICY",
    "SignalService",
    "get_signal_service",
]
