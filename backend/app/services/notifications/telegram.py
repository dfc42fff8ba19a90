"""
Telegram Notifier

Sends a message to a chat through the Bot API sendMessage method.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from app.core.config import settings

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """Telegram Bot API client."""

    def __init__(
        self,
        token: Optional[str] = None,
        chat_id: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self._token = token if token is not None else settings.telegram_token
        self._chat_id = chat_id if chat_id is not None else settings.telegram_chat_id
        self._base_url = (base_url or settings.telegram_base_url).rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def is_configured(self) -> bool:
        return bool(self._token and self._chat_id)

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=10),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def send_message(self, text: str) -> bool:
        """
        Send Markdown text to the configured chat.

        Returns True on success. Errors are logged, never raised.
        """
        if not self.is_configured:
            logger.debug("Telegram not configured, skipping notification")
            return False

        url = f"{self._base_url}/bot{self._token}/sendMessage"
        payload = {
            "chat_id": self._chat_id,
            "text": text,
            "parse_mode": "Markdown",
        }

        try:
            session = await self._ensure_session()
            async with session.post(url, json=payload) as resp:
                if resp.status == 200:
                    logger.info(f"Telegram message sent to chat {self._chat_id}")
                    return True
                error = await resp.text()
                logger.error(f"Telegram sendMessage failed ({resp.status}): {error}")
                return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Telegram sendMessage error: {e}")
            return False


# Singleton instance
_notifier: Optional[TelegramNotifier] = None


def get_telegram_notifier() -> TelegramNotifier:
    """Get or create the Telegram notifier."""
    global _notifier
    if _notifier is None:
        _notifier = TelegramNotifier()
    return _notifier
