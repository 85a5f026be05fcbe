"""One JSON object per log line on stdout.

Call sites attach structured data with
``logger.info("reservation created", extra={"extra_fields": {...}})``;
those keys are merged into the top level of the line next to the
request's correlation id.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from naturenest.core.config import settings

from .correlation import get_correlation_id


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        cid = get_correlation_id()
        if cid:
            line["correlationId"] = cid
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        line.update(getattr(record, "extra_fields", {}))

        # dates and Decimals (overbooked days, prices) go out as strings
        return json.dumps(line, default=str)


def _stdout_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    return handler


def get_logger(name: str) -> logging.Logger:
    """Named logger writing JSON at LOG_LEVEL; configured once per name."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(_stdout_handler())
        logger.setLevel(settings.LOG_LEVEL)
        # uvicorn's root handlers would print every line a second time
        logger.propagate = False
    return logger
