"""
Notification Service

Forwards rendered signal messages to Telegram.
"""

from app.services.notifications.telegram import TelegramNotifier, get_telegram_notifier

__all__ = ["TelegramNotifier", "get_telegram_notifier"]
