import unittest

import numpy as np

from app.services.indicators.patterns import identify_patterns


def bars(*candles):
    """(open, close) pairs -> OHLC arrays with 0.1 shadows unless given."""
    opens, highs, lows, closes = [], [], [], []
    for candle in candles:
        o, c = candle[0], candle[1]
        high = candle[2] if len(candle) > 2 else max(o, c) + 0.1
        low = candle[3] if len(candle) > 3 else min(o, c) - 0.1
        opens.append(o)
        closes.append(c)
        highs.append(high)
        lows.append(low)
    return np.array(opens), np.array(highs), np.array(lows), np.array(closes)


class CandlestickPatternTest(unittest.TestCase):
    def test_first_two_bars_never_fire(self) -> None:
        bullish, bearish = identify_patterns(*bars((11, 10), (9.8, 11.5)))
        self.assertFalse(bullish.any())
        self.assertFalse(bearish.any())

    def test_bullish_engulfing(self) -> None:
        bullish, bearish = identify_patterns(*bars((10, 10), (11, 10), (9.8, 11.5)))

        self.assertTrue(bullish[2])
        self.assertFalse(bearish[2])

    def test_bearish_engulfing(self) -> None:
        bullish, bearish = identify_patterns(*bars((10, 10), (10, 11), (11.2, 9.5)))

        self.assertTrue(bearish[2])
        self.assertFalse(bullish[2])

    def test_hammer_after_two_bearish_bars(self) -> None:
        bullish, bearish = identify_patterns(
            *bars((12, 12), (12, 11), (11, 10.5), (10.4, 10.6, 10.65, 9.0))
        )

        self.assertTrue(bullish[3])
        self.assertFalse(bearish[3])

    def test_shooting_star_after_two_bullish_bars(self) -> None:
        bullish, bearish = identify_patterns(
            *bars((10, 10), (10, 11), (11, 11.5), (11.6, 11.4, 12.5, 11.35))
        )

        self.assertTrue(bearish[3])
        self.assertFalse(bullish[3])

    def test_morning_star(self) -> None:
        bullish, bearish = identify_patterns(
            *bars((12, 12), (12, 10), (9.9, 9.95), (10, 11.5))
        )

        self.assertTrue(bullish[3])
        self.assertFalse(bearish[3])

    def test_evening_star(self) -> None:
        bullish, bearish = identify_patterns(
            *bars((10, 10), (10, 12), (12.1, 12.05), (12, 10.5))
        )

        self.assertTrue(bearish[3])
        self.assertFalse(bullish[3])

    def test_star_needs_three_prior_bars(self) -> None:
        bullish, _ = identify_patterns(*bars((12, 10), (9.9, 9.95), (10, 11.5)))
        self.assertFalse(bullish[2])


if __name__ == "__main__":
    unittest.main()
