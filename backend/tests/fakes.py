"""Test doubles for the clock, the HTTP transport and the notifier."""

import asyncio

from app.services.data_ingestion import RateLimiter, YahooChartClient


def chart_payload(closes):
    """Minimal Yahoo chart response carrying a close array."""
    return {
        "chart": {
            "result": [{"indicators": {"quote": [{"close": closes}]}}],
            "error": None,
        }
    }


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


class ScriptedYahooClient(YahooChartClient):
    """
    YahooChartClient whose transport replays scripted responses.

    Each script entry is a (status, payload) tuple or an exception to raise.
    """

    def __init__(self, responses, clock: FakeClock, min_interval_ms: int = 0, **kwargs):
        limiter = RateLimiter(min_interval_ms, clock=clock, sleep=clock.sleep)
        super().__init__(
            limiter,
            base_url="https://example.test",
            max_retries=kwargs.pop("max_retries", 3),
            backoff_unit=kwargs.pop("backoff_unit", 1.0),
            sleep=clock.sleep,
            clock=kwargs.pop("wall_clock", lambda: 1_700_000_000),
        )
        self._responses = list(responses)
        self._fake_clock = clock
        self.calls = []

    async def _request(self, url, params):
        self.calls.append({"url": url, "params": dict(params), "at": self._fake_clock.now})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeNotifier:
    def __init__(self, configured: bool = True):
        self.is_configured = configured
        self.messages = []

    async def send_message(self, text: str) -> bool:
        self.messages.append(text)
        return True

    async def close(self) -> None:
        pass
