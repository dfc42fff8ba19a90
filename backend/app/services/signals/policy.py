"""
Signal Scoring Policy

Weights and thresholds used by the aggregator, kept in one place so the
scoring model can be audited or swapped without touching indicator math.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SignalWeights:
    """Weight per indicator category. The total is the 100% reference."""

    trend: float = 30
    momentum: float = 15
    volatility: float = 15
    macd: float = 10
    adx: float = 10
    patterns: float = 20

    @property
    def total(self) -> float:
        return (
            self.trend + self.momentum + self.volatility
            + self.macd + self.adx + self.patterns
        )


@dataclass(frozen=True)
class IndicatorPeriods:
    """Lookback periods for the indicator snapshot."""

    sma_short_daily: int = 50
    sma_long_daily: int = 200
    sma_short: int = 10
    sma_long: int = 30
    rsi: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    bollinger: int = 20
    bollinger_std_dev: float = 2.0
    adx: int = 14

    def sma_pair(self, interval: str) -> tuple[int, int]:
        """(short, long) SMA periods for an interval."""
        if interval == "1d":
            return self.sma_short_daily, self.sma_long_daily
        return self.sma_short, self.sma_long


@dataclass(frozen=True)
class ScoringPolicy:
    """Every literal the aggregator relies on."""

    weights: SignalWeights = field(default_factory=SignalWeights)
    periods: IndicatorPeriods = field(default_factory=IndicatorPeriods)

    # Partial credit
    base_credit: float = 0.7          # existing trend / extreme RSI floor / sustained MACD
    strong_band_credit: float = 0.8   # band touch confirmed by RSI
    weak_band_credit: float = 0.4     # band touch against RSI
    squeeze_credit: float = 0.2       # narrowing bands

    # Trend
    trend_strength_scale: float = 1000

    # RSI
    rsi_overbought: float = 70
    rsi_oversold: float = 30
    rsi_midline: float = 50
    rsi_band_high: float = 65
    rsi_band_low: float = 35

    # Bollinger
    band_proximity: float = 0.85
    squeeze_lookback: int = 20
    squeeze_ratio: float = 0.7
    squeeze_slope_lookback: int = 3

    # ADX
    adx_threshold: float = 25

    # Classification
    lead_margin: float = 10
    strong_threshold: float = 70
    high_confidence: float = 70
    medium_confidence: float = 40
    min_valid_indicators: int = 3


# Minimum series length per interval before any analysis runs
MIN_DATA_POINTS = {
    "1d": 15,
    "1wk": 10,
    "1mo": 6,
}
DEFAULT_MIN_DATA_POINTS = 10


def min_data_points(interval: str) -> int:
    return MIN_DATA_POINTS.get(interval, DEFAULT_MIN_DATA_POINTS)


DEFAULT_POLICY = ScoringPolicy()
