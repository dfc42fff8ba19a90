import unittest

import aiohttp
import numpy as np

from app.services.base import (
    DataUnavailableError,
    MalformedResponseError,
    SymbolNotFoundError,
)
from app.services.data_ingestion import extract_closes, normalize_symbol, query_window
from tests.fakes import FakeClock, ScriptedYahooClient, chart_payload


class SymbolAndWindowTest(unittest.TestCase):
    def test_normalize_symbol(self) -> None:
        self.assertEqual(normalize_symbol("  appl "), "AAPL")
        self.assertEqual(normalize_symbol("googl"), "GOOG")
        self.assertEqual(normalize_symbol("msft"), "MSFT")

    def test_query_window_per_interval(self) -> None:
        now = 1_700_000_000
        day = 24 * 60 * 60

        self.assertEqual(query_window("1d", now), (now - 400 * day, now))
        self.assertEqual(query_window("1wk", now), (now - 365 * day, now))
        self.assertEqual(query_window("1mo", now), (now - 5 * 365 * day, now))
        self.assertEqual(query_window("5m", now), (now - 30 * day, now))

    def test_daily_window_covers_long_sma(self) -> None:
        period1, period2 = query_window("1d", 1_700_000_000)
        trading_days = (period2 - period1) / (24 * 60 * 60) * 5 / 7
        self.assertGreater(trading_days, 200)


class ExtractClosesTest(unittest.TestCase):
    def test_nulls_are_dropped(self) -> None:
        closes = extract_closes("AAPL", chart_payload([1.0, None, 2.5, None, 3]))
        np.testing.assert_array_equal(closes, [1.0, 2.5, 3.0])

    def test_missing_path_is_malformed(self) -> None:
        payload = {"chart": {"result": None, "error": {"code": "Bad"}}}
        with self.assertRaises(MalformedResponseError) as ctx:
            extract_closes("AAPL", payload)
        self.assertEqual(ctx.exception.response_data, payload)

    def test_empty_series_is_unavailable(self) -> None:
        with self.assertRaises(DataUnavailableError):
            extract_closes("AAPL", chart_payload([]))
        with self.assertRaises(DataUnavailableError):
            extract_closes("AAPL", chart_payload([None, None]))

    def test_bad_close_values_are_unavailable(self) -> None:
        with self.assertRaises(DataUnavailableError):
            extract_closes("AAPL", chart_payload([1.0, "oops"]))
        with self.assertRaises(DataUnavailableError):
            extract_closes("AAPL", chart_payload({"close": 1.0}))


class FetchRetryTest(unittest.IsolatedAsyncioTestCase):
    async def test_rate_limited_twice_then_success(self) -> None:
        clock = FakeClock()
        client = ScriptedYahooClient(
            [(429, None), (429, None), (200, chart_payload([10.0, 11.0, 12.0]))],
            clock,
            min_interval_ms=2000,
        )

        closes = await client.fetch_closes("aapl", "1wk")

        np.testing.assert_array_equal(closes, [10.0, 11.0, 12.0])
        self.assertEqual(clock.sleeps, [2.0, 4.0])
        self.assertEqual([call["at"] for call in client.calls], [0.0, 2.0, 6.0])

    async def test_not_found_fails_immediately(self) -> None:
        clock = FakeClock()
        client = ScriptedYahooClient([(404, None), (200, chart_payload([1.0]))], clock)

        with self.assertRaises(SymbolNotFoundError) as ctx:
            await client.fetch_closes("NOPE", "1d")

        self.assertIn("Symbol NOPE not found", ctx.exception.message)
        self.assertEqual(len(client.calls), 1)
        self.assertEqual(clock.sleeps, [])

    async def test_malformed_payload_retries_linearly(self) -> None:
        clock = FakeClock()
        client = ScriptedYahooClient(
            [(200, {"chart": {}}), (200, {"chart": {}}), (200, chart_payload([5.0]))],
            clock,
        )

        closes = await client.fetch_closes("AAPL", "1wk")

        np.testing.assert_array_equal(closes, [5.0])
        self.assertEqual(clock.sleeps, [1.0, 2.0])

    async def test_network_error_is_retried(self) -> None:
        clock = FakeClock()
        client = ScriptedYahooClient(
            [aiohttp.ClientConnectionError("connection reset"), (200, chart_payload([7.0]))],
            clock,
        )

        closes = await client.fetch_closes("AAPL", "1wk")

        np.testing.assert_array_equal(closes, [7.0])
        self.assertEqual(clock.sleeps, [1.0])

    async def test_exhausted_retries_include_response_data(self) -> None:
        clock = FakeClock()
        bad = {"chart": {"result": None, "error": {"description": "boom"}}}
        client = ScriptedYahooClient([(200, bad)] * 3, clock)

        with self.assertRaises(DataUnavailableError) as ctx:
            await client.fetch_closes("AAPL", "1wk")

        self.assertIn("Failed to fetch data for AAPL after 3 retries", ctx.exception.message)
        self.assertIn("Response data:", ctx.exception.message)
        self.assertIn("boom", ctx.exception.message)
        self.assertEqual(len(client.calls), 3)
        self.assertEqual(clock.sleeps, [1.0, 2.0])

    async def test_rate_limited_every_time_is_terminal(self) -> None:
        clock = FakeClock()
        client = ScriptedYahooClient([(429, None)] * 3, clock)

        with self.assertRaises(DataUnavailableError):
            await client.fetch_closes("AAPL", "1wk")

        self.assertEqual(len(client.calls), 3)
        self.assertEqual(clock.sleeps, [2.0, 4.0])

    async def test_empty_series_is_not_retried(self) -> None:
        clock = FakeClock()
        client = ScriptedYahooClient([(200, chart_payload([]))], clock)

        with self.assertRaises(DataUnavailableError):
            await client.fetch_closes("AAPL", "1wk")

        self.assertEqual(len(client.calls), 1)

    async def test_non_numeric_series_is_not_retried(self) -> None:
        clock = FakeClock()
        client = ScriptedYahooClient([(200, chart_payload([1.0, "oops", 2.0]))] * 3, clock)

        with self.assertRaises(DataUnavailableError):
            await client.fetch_closes("AAPL", "1wk")

        self.assertEqual(len(client.calls), 1)
        self.assertEqual(clock.sleeps, [])

    async def test_close_field_that_is_not_a_list_is_not_retried(self) -> None:
        clock = FakeClock()
        client = ScriptedYahooClient([(200, chart_payload("not-a-list"))] * 3, clock)

        with self.assertRaises(DataUnavailableError):
            await client.fetch_closes("AAPL", "1wk")

        self.assertEqual(len(client.calls), 1)
        self.assertEqual(clock.sleeps, [])

    async def test_request_uses_normalized_symbol_and_window(self) -> None:
        clock = FakeClock()
        client = ScriptedYahooClient([(200, chart_payload([1.0]))], clock)

        await client.fetch_closes(" appl ", "1d")

        call = client.calls[0]
        self.assertEqual(call["url"], "https://example.test/v8/finance/chart/AAPL")
        self.assertEqual(call["params"]["interval"], "1d")
        self.assertEqual(call["params"]["period2"], 1_700_000_000)
        self.assertEqual(call["params"]["period1"], 1_700_000_000 - 400 * 24 * 60 * 60)


if __name__ == "__main__":
    unittest.main()
