"""
Correlation ID context for update tracing.

Every incoming Telegram update gets an id that the JSON log formatter adds
to all log lines produced while handling it. contextvars propagate it
through the asyncio task, including awaits on worker threads started with
asyncio.to_thread.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

_correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

TELEGRAM_PREFIX = "tg-"


def get_correlation_id() -> Optional[str]:
    """Get current correlation_id (or None if not set)."""
    return _correlation_id_var.get()


def set_correlation_id(cid: Optional[str]) -> None:
    """Set correlation_id for the current async context."""
    _correlation_id_var.set(cid)


def generate_correlation_id(prefix: str = "") -> str:
    """
    Generate a new correlation_id.

    Format: {prefix}{8 hex chars}, e.g. tg-a1b2c3d4
    """
    short = uuid.uuid4().hex[:8]
    return f"{prefix}{short}" if prefix else short
