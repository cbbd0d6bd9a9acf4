"""
Centralized JSON logging configuration.

Structured JSON output to stdout and a rotating file. Every record carries
the correlation_id of the Telegram update being handled, if any.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from pythonjsonlogger import jsonlogger

from shared.logging.correlation import get_correlation_id


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with standardized field names."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = self.formatTime(record)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        cid = get_correlation_id()
        if cid:
            log_record['correlation_id'] = cid
        if record.exc_info and not log_record.get('exc_info'):
            log_record['exception'] = self.formatException(record.exc_info)
        log_record.pop('levelname', None)
        log_record.pop('name', None)


def setup_logging(level: str = "INFO", log_dir: str = "logs") -> None:
    """
    Configure JSON structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files, created if missing
    """
    os.makedirs(log_dir, exist_ok=True)
    formatter = CustomJsonFormatter(
        fmt='%(timestamp)s %(level)s %(logger)s %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    # 50MB per file, 5 backups
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, "bot.log"),
        maxBytes=50 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8',
    )
    file_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(console_handler)
    root.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.WARNING)
    logging.getLogger("google_auth_oauthlib").setLevel(logging.WARNING)
    logging.getLogger("aiogram.event").setLevel(logging.WARNING)
    logging.getLogger("aiogram").setLevel(logging.INFO)
