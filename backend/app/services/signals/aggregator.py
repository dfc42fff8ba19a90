"""
Signal Aggregator

Turns the latest values of every indicator into a weighted bullish/bearish
score, a confidence tier and a classified, human-readable recommendation.
Evaluated at the last index of the series only.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from app.schemas.signal import (
    ConfidenceLevel,
    SignalClassification,
    SignalResult,
    TrendDirection,
)
from app.services.indicators.calculations import (
    OHLCData,
    sma,
    rsi,
    macd,
    bollinger_bands,
    adx,
    is_defined,
)
from app.services.indicators.patterns import identify_patterns
from app.services.signals.policy import DEFAULT_POLICY, ScoringPolicy


@dataclass
class IndicatorSnapshot:
    """Every indicator series the aggregator reads, index-aligned."""

    sma_short: np.ndarray
    sma_long: np.ndarray
    rsi: np.ndarray
    macd_line: np.ndarray
    macd_signal: np.ndarray
    bb_upper: np.ndarray
    bb_middle: np.ndarray
    bb_lower: np.ndarray
    adx: np.ndarray
    plus_di: np.ndarray
    minus_di: np.ndarray
    bullish_patterns: np.ndarray
    bearish_patterns: np.ndarray


@dataclass
class ScoreBoard:
    """Raw accumulators before normalization."""

    bullish: float = 0.0
    bearish: float = 0.0
    total: float = 0.0
    valid_indicators: int = 0

    def normalized(self) -> tuple[float, float]:
        """Scores as a percentage of the weight actually available."""
        if self.total <= 0:
            return self.bullish, self.bearish
        return (
            min(100.0, self.bullish / self.total * 100),
            min(100.0, self.bearish / self.total * 100),
        )


def compute_indicators(
    closes: np.ndarray,
    ohlc: OHLCData,
    interval: str,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> IndicatorSnapshot:
    """Calculate the full indicator snapshot for a close series."""
    p = policy.periods
    short_period, long_period = p.sma_pair(interval)

    macd_line, macd_signal, _ = macd(
        closes, p.macd_fast, p.macd_slow, p.macd_signal
    )
    bb_upper, bb_middle, bb_lower = bollinger_bands(closes, p.bollinger, p.bollinger_std_dev)
    adx_arr, plus_di, minus_di = adx(ohlc.highs, ohlc.lows, closes, p.adx)
    bullish_patterns, bearish_patterns = identify_patterns(
        ohlc.opens, ohlc.highs, ohlc.lows, closes
    )

    return IndicatorSnapshot(
        sma_short=sma(closes, short_period),
        sma_long=sma(closes, long_period),
        rsi=rsi(closes, p.rsi),
        macd_line=macd_line,
        macd_signal=macd_signal,
        bb_upper=bb_upper,
        bb_middle=bb_middle,
        bb_lower=bb_lower,
        adx=adx_arr,
        plus_di=plus_di,
        minus_di=minus_di,
        bullish_patterns=bullish_patterns,
        bearish_patterns=bearish_patterns,
    )


# =============================================================================
# CATEGORY SCORING
# =============================================================================


def _score_trend(board: ScoreBoard, snap: IndicatorSnapshot, i: int, policy: ScoringPolicy) -> None:
    short, long = snap.sma_short, snap.sma_long
    if not is_defined(short[i], long[i]):
        return

    w = policy.weights.trend
    board.total += w
    board.valid_indicators += 1

    if short[i] > long[i]:
        if i > 1 and short[i - 1] <= long[i - 1]:
            board.bullish += w
        else:
            strength = min(100, (short[i] / long[i] - 1) * policy.trend_strength_scale)
            board.bullish += w * (policy.base_credit + (1 - policy.base_credit) * strength / 100)
    elif short[i] < long[i]:
        if i > 1 and short[i - 1] >= long[i - 1]:
            board.bearish += w
        else:
            strength = min(100, (long[i] / short[i] - 1) * policy.trend_strength_scale)
            board.bearish += w * (policy.base_credit + (1 - policy.base_credit) * strength / 100)


def _score_momentum(board: ScoreBoard, snap: IndicatorSnapshot, i: int, policy: ScoringPolicy) -> None:
    values = snap.rsi
    if not is_defined(values[i]):
        return

    w = policy.weights.momentum
    board.total += w
    board.valid_indicators += 1
    current = values[i]
    previous = values[i - 1] if i > 0 else math.nan
    extra = 1 - policy.base_credit

    if current > policy.rsi_overbought:
        level = min(100, (current - policy.rsi_overbought) / (100 - policy.rsi_overbought) * 100)
        board.bearish += w * (policy.base_credit + extra * level / 100)
    elif current < policy.rsi_oversold:
        level = min(100, (policy.rsi_oversold - current) / policy.rsi_oversold * 100)
        board.bullish += w * (policy.base_credit + extra * level / 100)
    elif policy.rsi_oversold <= current < policy.rsi_midline and current > previous:
        board.bullish += w * policy.base_credit
    elif policy.rsi_midline < current <= policy.rsi_overbought and current < previous:
        board.bearish += w * policy.base_credit


def _score_volatility(
    board: ScoreBoard,
    closes: np.ndarray,
    snap: IndicatorSnapshot,
    i: int,
    policy: ScoringPolicy,
) -> None:
    upper, middle, lower = snap.bb_upper, snap.bb_middle, snap.bb_lower
    if not is_defined(upper[i], lower[i]):
        return

    w = policy.weights.volatility
    board.total += w
    board.valid_indicators += 1
    price = closes[i]
    current_rsi = snap.rsi[i]

    if price > middle[i] + policy.band_proximity * (upper[i] - middle[i]):
        if current_rsi > policy.rsi_band_high:
            board.bearish += w * policy.strong_band_credit
        else:
            board.bullish += w * policy.weak_band_credit
    elif price < middle[i] - policy.band_proximity * (middle[i] - lower[i]):
        if current_rsi < policy.rsi_band_low:
            board.bullish += w * policy.strong_band_credit
        else:
            board.bearish += w * policy.weak_band_credit

    # Narrowing bands: small nudge in the direction of the short SMA slope
    lookback = policy.squeeze_lookback
    if i > lookback:
        width = (upper[i] - lower[i]) / middle[i]
        prev_width = (upper[i - lookback] - lower[i - lookback]) / middle[i - lookback]
        slope_from = i - policy.squeeze_slope_lookback
        short = snap.sma_short
        if width < prev_width * policy.squeeze_ratio and is_defined(short[i], short[slope_from]):
            if short[i] > short[slope_from]:
                board.bullish += w * policy.squeeze_credit
            else:
                board.bearish += w * policy.squeeze_credit


def _score_macd(board: ScoreBoard, snap: IndicatorSnapshot, i: int, policy: ScoringPolicy) -> None:
    line, signal = snap.macd_line, snap.macd_signal
    if not is_defined(line[i], signal[i]):
        return

    w = policy.weights.macd
    board.total += w
    board.valid_indicators += 1
    fresh = i > 0 and is_defined(line[i - 1], signal[i - 1])

    if line[i] > signal[i]:
        if fresh and line[i - 1] <= signal[i - 1]:
            board.bullish += w
        else:
            board.bullish += w * policy.base_credit
    elif line[i] < signal[i]:
        if fresh and line[i - 1] >= signal[i - 1]:
            board.bearish += w
        else:
            board.bearish += w * policy.base_credit


def _score_adx(board: ScoreBoard, snap: IndicatorSnapshot, i: int, policy: ScoringPolicy) -> None:
    if not is_defined(snap.adx[i], snap.plus_di[i], snap.minus_di[i]):
        return

    w = policy.weights.adx
    board.total += w
    board.valid_indicators += 1
    threshold = policy.adx_threshold

    if snap.adx[i] > threshold:
        strength = min(1, (snap.adx[i] - threshold) / threshold)
        if snap.plus_di[i] > snap.minus_di[i]:
            board.bullish += w * strength
        elif snap.minus_di[i] > snap.plus_di[i]:
            board.bearish += w * strength


def _score_patterns(board: ScoreBoard, snap: IndicatorSnapshot, i: int, policy: ScoringPolicy) -> None:
    bullish, bearish = bool(snap.bullish_patterns[i]), bool(snap.bearish_patterns[i])
    if not (bullish or bearish):
        return

    w = policy.weights.patterns
    board.total += w
    if bullish:
        board.bullish += w
    if bearish:
        board.bearish += w


def score_snapshot(
    closes: np.ndarray,
    snap: IndicatorSnapshot,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> ScoreBoard:
    """Accumulate raw weighted scores at the latest index."""
    board = ScoreBoard()
    i = len(closes) - 1
    if i < 0:
        return board

    _score_trend(board, snap, i, policy)
    _score_momentum(board, snap, i, policy)
    _score_volatility(board, closes, snap, i, policy)
    _score_macd(board, snap, i, policy)
    _score_adx(board, snap, i, policy)
    _score_patterns(board, snap, i, policy)
    return board


# =============================================================================
# CLASSIFICATION
# =============================================================================


def confidence_level(
    bullish: float, bearish: float, policy: ScoringPolicy = DEFAULT_POLICY
) -> ConfidenceLevel:
    strength = max(bullish, bearish)
    if strength >= policy.high_confidence:
        return ConfidenceLevel.HIGH
    if strength >= policy.medium_confidence:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def trend_direction(snap: IndicatorSnapshot, i: int) -> Optional[TrendDirection]:
    """Direction of the short/long SMA pair, None while undefined."""
    short, long = snap.sma_short[i], snap.sma_long[i]
    if not is_defined(short, long):
        return None
    if short > long:
        return TrendDirection.BULLISH
    if short < long:
        return TrendDirection.BEARISH
    return TrendDirection.SIDEWAYS


def classify(
    bullish: float,
    bearish: float,
    valid_indicators: int,
    trend: Optional[TrendDirection] = None,
    rsi_value: float = math.nan,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> SignalClassification:
    """
    Classify normalized scores.

    A side must lead by more than `lead_margin` points and be corroborated by
    the trend or by RSI on the matching side of its midline.
    """
    if valid_indicators < policy.min_valid_indicators:
        return SignalClassification.INSUFFICIENT_DATA

    rsi_known = not math.isnan(rsi_value)

    if bullish > bearish + policy.lead_margin:
        confirmed = trend == TrendDirection.BULLISH or (
            rsi_known and rsi_value < policy.rsi_midline
        )
        if not confirmed:
            return SignalClassification.MIXED
        if bullish > policy.strong_threshold:
            return SignalClassification.STRONG_BUY
        return SignalClassification.BUY

    if bearish > bullish + policy.lead_margin:
        confirmed = trend == TrendDirection.BEARISH or (
            rsi_known and rsi_value > policy.rsi_midline
        )
        if not confirmed:
            return SignalClassification.MIXED
        if bearish > policy.strong_threshold:
            return SignalClassification.STRONG_SELL
        return SignalClassification.SELL

    return SignalClassification.NO_CLEAR_SIGNAL


# =============================================================================
# RENDERING
# =============================================================================


HEADLINES = {
    SignalClassification.STRONG_BUY: "🚨 STRONG BUY signal for {symbol} ({interval})",
    SignalClassification.BUY: "📈 BUY signal for {symbol} ({interval})",
    SignalClassification.STRONG_SELL: "🚨 STRONG SELL signal for {symbol} ({interval})",
    SignalClassification.SELL: "📉 SELL signal for {symbol} ({interval})",
    SignalClassification.MIXED: (
        "⚠️ Mixed signals for {symbol} ({interval}) - proceed with caution"
    ),
    SignalClassification.NO_CLEAR_SIGNAL: "🔄 No clear signal for {symbol} ({interval})",
    SignalClassification.INSUFFICIENT_DATA: (
        "⚠️ Insufficient data for {symbol} ({interval}) - "
        "more indicators are needed for a reliable analysis"
    ),
}


def render_details(
    symbol: str,
    closes: np.ndarray,
    snap: IndicatorSnapshot,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> list[str]:
    """Breakdown lines; each indicator line only when its value is defined."""
    i = len(closes) - 1
    price = closes[i]
    lines = [f"Current price: ${price:.2f}"]

    trend = trend_direction(snap, i)
    if trend is not None:
        label = "✅ Bullish" if trend == TrendDirection.BULLISH else "❌ Bearish"
        lines.append(f"Trend: {label}")

    current_rsi = snap.rsi[i]
    if is_defined(current_rsi):
        if current_rsi > policy.rsi_overbought:
            note = "⚠️ Overbought"
        elif current_rsi < policy.rsi_oversold:
            note = "⚠️ Oversold"
        else:
            note = "✅ Neutral"
        lines.append(f"RSI({policy.periods.rsi}): {current_rsi:.2f} {note}")
    else:
        lines.append(f"RSI({policy.periods.rsi}): not available")

    if is_defined(snap.bb_upper[i], snap.bb_lower[i]):
        if price > snap.bb_upper[i]:
            note = "⚠️ Overbought"
        elif price < snap.bb_lower[i]:
            note = "⚠️ Oversold"
        else:
            note = "✅ Inside bands"
        lines.append(f"Bollinger Bands: {note}")

    return lines


def render_message(
    symbol: str,
    interval: str,
    classification: SignalClassification,
    bullish: float,
    bearish: float,
    confidence: ConfidenceLevel,
    details: list[str],
) -> str:
    headline = HEADLINES[classification].format(symbol=symbol, interval=interval)
    lines = [
        headline,
        f"Bullish strength: {bullish:.1f}% | Bearish strength: {bearish:.1f}%",
        f"Confidence: {confidence.value}",
        "",
        f"🔍 TECHNICAL ANALYSIS for {symbol}:",
    ]
    lines.extend(f"• {line}" for line in details)
    return "\n".join(lines)


def aggregate(
    symbol: str,
    interval: str,
    closes: np.ndarray,
    ohlc: OHLCData,
    snapshot: Optional[IndicatorSnapshot] = None,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> SignalResult:
    """
    Score, classify and render the latest bar of a series.

    The snapshot is computed from `closes` and `ohlc` when not supplied.
    """
    closes = np.asarray(closes, dtype=float)
    if snapshot is None:
        snapshot = compute_indicators(closes, ohlc, interval, policy)

    i = len(closes) - 1
    board = score_snapshot(closes, snapshot, policy)
    bullish, bearish = board.normalized()
    confidence = confidence_level(bullish, bearish, policy)
    classification = classify(
        bullish,
        bearish,
        board.valid_indicators,
        trend=trend_direction(snapshot, i),
        rsi_value=float(snapshot.rsi[i]),
        policy=policy,
    )
    details = render_details(symbol, closes, snapshot, policy)

    return SignalResult(
        symbol=symbol,
        interval=interval,
        classification=classification,
        bullish_score=float(bullish),
        bearish_score=float(bearish),
        confidence=confidence,
        price=float(closes[i]),
        details=details,
        message=render_message(
            symbol, interval, classification, bullish, bearish, confidence, details
        ),
    )


def insufficient_data_result(symbol: str, interval: str, available: int, required: int) -> SignalResult:
    """Result for a series shorter than the interval's minimum length."""
    message = (
        f"Insufficient data for {symbol}. At least {required} data points are "
        f"required for interval {interval} (got {available})."
    )
    return SignalResult(
        symbol=symbol,
        interval=interval,
        classification=SignalClassification.INSUFFICIENT_DATA,
        message=message,
    )


def failure_result(symbol: str, interval: str, reason: str) -> SignalResult:
    """Result for an analysis that could not complete."""
    return SignalResult(
        symbol=symbol,
        interval=interval,
        classification=SignalClassification.ANALYSIS_FAILED,
        message=f"Error analysing {symbol}: {reason}",
    )
