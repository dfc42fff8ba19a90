import unittest

import numpy as np
from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app
from app.services.notifications import get_telegram_notifier
from app.services.signals import SignalService, get_signal_service
from tests.fakes import FakeNotifier
from tests.test_signal_service import StubClient, trending_series


class SignalEndpointTest(unittest.TestCase):
    def setUp(self) -> None:
        self.stub = StubClient(closes=trending_series())
        self.notifier = FakeNotifier()
        service = SignalService(client=self.stub, rng=np.random.default_rng(2))

        app.dependency_overrides[get_signal_service] = lambda: service
        app.dependency_overrides[get_telegram_notifier] = lambda: self.notifier
        self._api_key = settings.api_key
        settings.api_key = None
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        settings.api_key = self._api_key

    def test_signal_response_shape(self) -> None:
        response = self.client.get("/api/v1/signal/msft", params={"interval": "1wk"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["symbol"], "MSFT")
        self.assertEqual(body["interval"], "1wk")
        self.assertTrue(body["notified"])
        self.assertEqual(body["signal"], body["result"]["message"])
        self.assertEqual(self.notifier.messages, [body["signal"]])
        self.assertEqual(self.stub.requests, [("MSFT", "1wk")])

    def test_default_interval_and_no_notify(self) -> None:
        response = self.client.get("/api/v1/signal/MSFT", params={"notify": "false"})

        body = response.json()
        self.assertEqual(body["interval"], "1wk")
        self.assertFalse(body["notified"])
        self.assertEqual(self.notifier.messages, [])

    def test_unconfigured_notifier_is_skipped(self) -> None:
        self.notifier.is_configured = False

        body = self.client.get("/api/v1/signal/MSFT").json()

        self.assertFalse(body["notified"])
        self.assertEqual(self.notifier.messages, [])

    def test_failure_still_returns_200(self) -> None:
        self.stub.error = RuntimeError("provider down")

        response = self.client.get("/api/v1/signal/MSFT")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["result"]["classification"], "ANALYSIS_FAILED")

    def test_api_key_is_enforced_when_configured(self) -> None:
        settings.api_key = "secret"

        rejected = self.client.get("/api/v1/signal/MSFT")
        accepted = self.client.get("/api/v1/signal/MSFT", headers={"X-API-Key": "secret"})

        self.assertEqual(rejected.status_code, 401)
        self.assertEqual(accepted.status_code, 200)


class RootEndpointTest(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def test_root_banner(self) -> None:
        response = self.client.get("/")

        self.assertEqual(response.status_code, 200)
        self.assertIn("Market Signal API", response.text)

    def test_health(self) -> None:
        body = self.client.get("/health").json()

        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["app"], settings.app_name)


if __name__ == "__main__":
    unittest.main()
