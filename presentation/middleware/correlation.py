"""
Correlation ID Middleware for aiogram.

Tags every incoming update with a correlation_id so all log lines of one
upload, password check or listing can be grouped.
"""

import logging
from typing import Callable, Awaitable, Any, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from shared.logging.correlation import (
    TELEGRAM_PREFIX,
    generate_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseMiddleware):
    """Assigns a tg-{8hex} correlation_id to each incoming update."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        cid = generate_correlation_id(TELEGRAM_PREFIX)
        set_correlation_id(cid)
        data["correlation_id"] = cid
        try:
            return await handler(event, data)
        finally:
            set_correlation_id(None)
