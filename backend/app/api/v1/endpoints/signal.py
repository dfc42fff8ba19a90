"""
Signal API Endpoints

Runs the signal engine for one symbol and forwards the message to Telegram.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from app.core.config import settings
from app.schemas.signal import SignalResponse
from app.services.notifications import TelegramNotifier, get_telegram_notifier
from app.services.signals import SignalService, get_signal_service

logger = logging.getLogger(__name__)

router = APIRouter()


async def require_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Reject requests without the configured X-API-Key header."""
    if settings.api_key and x_api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


@router.get(
    "/{symbol}",
    response_model=SignalResponse,
    dependencies=[Depends(require_api_key)],
)
async def get_signal(
    symbol: str,
    interval: Optional[str] = Query(None, description="1d, 1wk or 1mo (default: weekly)"),
    notify: bool = Query(True, description="Forward the message to Telegram"),
    service: SignalService = Depends(get_signal_service),
    notifier: TelegramNotifier = Depends(get_telegram_notifier),
):
    """
    Get a trading signal for a symbol.

    The analysis never fails the request: provider or data problems come
    back as an ANALYSIS_FAILED / INSUFFICIENT_DATA classification.
    """
    symbol = symbol.upper().strip()
    interval = interval or settings.default_interval

    result = await service.get_signal(symbol, interval)

    notified = False
    if notify and notifier.is_configured:
        notified = await notifier.send_message(result.message)

    return SignalResponse(
        symbol=symbol,
        interval=interval,
        signal=result.message,
        notified=notified,
        result=result,
    )
