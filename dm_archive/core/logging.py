"""
Structured logging for the ``dm_archive`` logger tree.

Modules log through ``get_logger(__name__)``; context goes in
``extra={"extra_data": {...}}`` and is flattened into JSON records.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from dm_archive.core.config import get_settings

LOGGER_NAME = "dm_archive"


class JSONFormatter(logging.Formatter):
    
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(getattr(record, "extra_data", {}))
        
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """``time | LEVEL | logger - message key=value ...``"""
    
    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    
    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = getattr(record, "extra_data", None)
        if extra:
            line += " " + " ".join(f"{k}={v}" for k, v in extra.items())
        return line


FORMATTERS = {
    "json": JSONFormatter,
    "text": TextFormatter,
}


def setup_logging() -> logging.Logger:
    """Attach a single stdout handler to the package logger."""
    settings = get_settings()
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(FORMATTERS[settings.log_format]())
    
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.log_level)
    logger.handlers[:] = [handler]
    logger.propagate = False
    
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    return logging.getLogger(name)
