"""Logging setup: plain text for development, one JSON object per line in production."""

import json
import logging
import sys
from datetime import datetime, timezone

from llm_playground.core.config import settings

# Passed via `extra=` by the dispatcher so failed provider calls can be filtered on
DISPATCH_FIELDS = ("config_id", "provider", "elapsed_ms")

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for attr in DISPATCH_FIELDS:
            value = getattr(record, attr, None)
            if value is not None:
                log_data[attr] = value
        if record.exc_info and record.exc_info[1]:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """Install a single stdout handler on the root logger."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if settings.log_json else logging.Formatter(TEXT_FORMAT, "%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)

    # httpx logs every request line at INFO, one per provider call
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING if not settings.app_debug else level)
