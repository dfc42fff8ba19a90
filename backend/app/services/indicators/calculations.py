"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
Every function returns an array aligned with its input; indices inside the
warm-up window hold NaN, never zero.
"""

import numpy as np
from typing import Optional
from dataclasses import dataclass


@dataclass
class OHLCData:
    """OHLC data arrays for calculations."""

    opens: np.ndarray
    highs: np.ndarray
    lows: np.ndarray
    closes: np.ndarray


def synthesize_ohlc(
    closes: np.ndarray,
    rng: Optional[np.random.Generator] = None,
    jitter: float = 0.01,
) -> OHLCData:
    """
    Build an OHLC surrogate from a close-only series.

    high = close * (1 + jitter * u), low = close * (1 - jitter * u'),
    open = previous close (current close for the first bar).
    """
    closes = np.asarray(closes, dtype=float)
    if rng is None:
        rng = np.random.default_rng()

    highs = closes * (1 + jitter * rng.random(len(closes)))
    lows = closes * (1 - jitter * rng.random(len(closes)))
    opens = np.concatenate((closes[:1], closes[:-1]))

    return OHLCData(opens=opens, highs=highs, lows=lows, closes=closes)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    data = np.asarray(data, dtype=float)
    result = np.full(len(data), np.nan)
    if len(data) < period:
        return result

    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the SMA of the first `period` defined values. Leading NaNs
    (e.g. an EMA of another indicator) shift the seed instead of poisoning
    the whole series.
    """
    data = np.asarray(data, dtype=float)
    result = np.full(len(data), np.nan)

    valid = np.flatnonzero(~np.isnan(data))
    if len(valid) == 0:
        return result
    start = valid[0]
    if len(data) - start < period:
        return result

    multiplier = 2 / (period + 1)
    seed = start + period - 1
    result[seed] = np.mean(data[start : seed + 1])

    for i in range(seed + 1, len(data)):
        result[i] = data[i] * multiplier + result[i - 1] * (1 - multiplier)

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index over a rolling window of `period` changes.

    RS is 100 when the window has no losses and 0 when it has no gains.
    """
    closes = np.asarray(closes, dtype=float)
    result = np.full(len(closes), np.nan)
    if len(closes) < period + 1:
        return result

    deltas = np.diff(closes)

    for i in range(period, len(closes)):
        window = deltas[i - period : i]
        gains = np.sum(window[window > 0])
        losses = -np.sum(window[window < 0])

        if losses == 0:
            rs = 100.0
        elif gains == 0:
            rs = 0.0
        else:
            rs = gains / losses
        result[i] = 100 - (100 / (1 + rs))

    return result


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    Returns: (macd_line, signal_line, histogram)
    """
    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    # Signal line is EMA of MACD line
    signal_line = ema(macd_line, signal_period)

    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands.

    Returns: (upper, middle, lower)
    """
    closes = np.asarray(closes, dtype=float)
    middle = sma(closes, period)
    upper = np.full(len(closes), np.nan)
    lower = np.full(len(closes), np.nan)

    for i in range(len(closes)):
        if np.isnan(middle[i]):
            continue
        window = closes[max(0, i - period + 1) : i + 1]
        sd = np.sqrt(np.sum((window - middle[i]) ** 2) / period)
        upper[i] = middle[i] + std_dev * sd
        lower[i] = middle[i] - std_dev * sd

    return upper, middle, lower


# =============================================================================
# TREND INDICATORS
# =============================================================================


def wilder_smooth(values: np.ndarray, period: int) -> np.ndarray:
    """
    Wilder's smoothing.

    The first value (index `period`) is the plain sum of the trailing `period`
    raw values; afterwards smoothed = prev - prev / period + current.
    """
    values = np.asarray(values, dtype=float)
    result = np.full(len(values), np.nan)
    if len(values) <= period:
        return result

    result[period] = np.sum(values[1 : period + 1])
    for i in range(period + 1, len(values)):
        result[i] = result[i - 1] - result[i - 1] / period + values[i]

    return result


def true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """True Range; the first bar uses high - low."""
    tr = np.zeros(len(closes))
    if len(closes) == 0:
        return tr
    tr[0] = highs[0] - lows[0]

    for i in range(1, len(closes)):
        tr[i] = max(
            highs[i] - lows[i],
            abs(highs[i] - closes[i - 1]),
            abs(lows[i] - closes[i - 1]),
        )
    return tr


def adx(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Average Directional Index.

    Returns: (adx, plus_di, minus_di), all NaN before index 2 * period - 1.
    """
    highs = np.asarray(highs, dtype=float)
    lows = np.asarray(lows, dtype=float)
    closes = np.asarray(closes, dtype=float)
    n = len(closes)

    # Calculate +DM and -DM
    plus_dm = np.zeros(n)
    minus_dm = np.zeros(n)

    for i in range(1, n):
        up_move = highs[i] - highs[i - 1]
        down_move = lows[i - 1] - lows[i]

        if up_move > down_move and up_move > 0:
            plus_dm[i] = up_move
        if down_move > up_move and down_move > 0:
            minus_dm[i] = down_move

    smoothed_tr = wilder_smooth(true_range(highs, lows, closes), period)
    smoothed_plus_dm = wilder_smooth(plus_dm, period)
    smoothed_minus_dm = wilder_smooth(minus_dm, period)

    with np.errstate(divide="ignore", invalid="ignore"):
        plus_di = 100 * (smoothed_plus_dm / smoothed_tr)
        minus_di = 100 * (smoothed_minus_dm / smoothed_tr)

    di_sum = plus_di + minus_di
    dx = np.full(n, np.nan)
    defined = ~np.isnan(di_sum)
    dx[defined & (di_sum == 0)] = 0.0
    nonzero = defined & (di_sum != 0)
    dx[nonzero] = 100 * np.abs(plus_di[nonzero] - minus_di[nonzero]) / di_sum[nonzero]

    adx_result = np.full(n, np.nan)
    first = period * 2 - 1
    if n > first:
        adx_result[first] = np.mean(dx[first - period + 1 : first + 1])
        for i in range(first + 1, n):
            adx_result[i] = (adx_result[i - 1] * (period - 1) + dx[i]) / period

    # The whole family becomes available together
    plus_di[: min(first, n)] = np.nan
    minus_di[: min(first, n)] = np.nan

    return adx_result, plus_di, minus_di


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_defined(*values: float) -> bool:
    """True when none of the values is NaN."""
    return not any(np.isnan(v) for v in values)
