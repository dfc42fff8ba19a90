"""
Indicator Library

Pure NumPy transforms over a price series: moving averages, RSI, MACD,
Bollinger Bands, ADX/DI, synthetic OHLC and candlestick patterns.
All math is deterministic; the only randomness (synthetic OHLC) comes from
an injected generator.
"""

from app.services.indicators.calculations import (
    OHLCData,
    synthesize_ohlc,
    sma,
    ema,
    rsi,
    macd,
    bollinger_bands,
    wilder_smooth,
    true_range,
    adx,
)
from app.services.indicators.patterns import identify_patterns

__all__ = [
    "OHLCData",
    "synthesize_ohlc",
    "sma",
    "ema",
    "rsi",
    "macd",
    "bollinger_bands",
    "wilder_smooth",
    "true_range",
    "adx",
    "identify_patterns",
]
