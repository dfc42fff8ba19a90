"""
Candlestick Pattern Detection

Flags reversal patterns on aligned OHLC arrays.

Bullish: engulfing, hammer, morning star.
Bearish: engulfing, shooting star, evening star.
"""

import numpy as np


def _is_bullish_bar(opens: np.ndarray, closes: np.ndarray, i: int) -> bool:
    return closes[i] > opens[i]


def _is_bearish_bar(opens: np.ndarray, closes: np.ndarray, i: int) -> bool:
    return closes[i] < opens[i]


def identify_patterns(
    opens: np.ndarray,
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Detect candlestick reversal patterns.

    Returns: (bullish, bearish) boolean arrays aligned with the input.
    The first two bars never fire; star patterns need i >= 3.
    """
    n = len(closes)
    bullish = np.zeros(n, dtype=bool)
    bearish = np.zeros(n, dtype=bool)

    for i in range(2, n):
        body = abs(closes[i] - opens[i])
        upper_shadow = highs[i] - max(opens[i], closes[i])
        lower_shadow = min(opens[i], closes[i]) - lows[i]
        first_body = abs(closes[i - 2] - opens[i - 2])
        first_midpoint = (opens[i - 2] + closes[i - 2]) / 2

        bullish_engulfing = (
            _is_bullish_bar(opens, closes, i)
            and _is_bearish_bar(opens, closes, i - 1)
            and opens[i] <= closes[i - 1]
            and closes[i] >= opens[i - 1]
        )

        hammer = (
            lower_shadow > body * 2
            and upper_shadow < body * 0.5
            and _is_bearish_bar(opens, closes, i - 1)
            and _is_bearish_bar(opens, closes, i - 2)
        )

        morning_star = (
            i >= 3
            and _is_bearish_bar(opens, closes, i - 2)
            and abs(opens[i - 1] - closes[i - 1]) < first_body * 0.3
            and _is_bullish_bar(opens, closes, i)
            and closes[i] > first_midpoint
        )

        bearish_engulfing = (
            _is_bearish_bar(opens, closes, i)
            and _is_bullish_bar(opens, closes, i - 1)
            and opens[i] >= closes[i - 1]
            and closes[i] <= opens[i - 1]
        )

        shooting_star = (
            upper_shadow > body * 2
            and lower_shadow < body * 0.5
            and _is_bullish_bar(opens, closes, i - 1)
            and _is_bullish_bar(opens, closes, i - 2)
        )

        evening_star = (
            i >= 3
            and _is_bullish_bar(opens, closes, i - 2)
            and abs(opens[i - 1] - closes[i - 1]) < first_body * 0.3
            and _is_bearish_bar(opens, closes, i)
            and closes[i] < first_midpoint
        )

        bullish[i] = bullish_engulfing or hammer or morning_star
        bearish[i] = bearish_engulfing or shooting_star or evening_star

    return bullish, bearish
