"""JSON log output for the API process.

Every record is one JSON object per line on stdout. Context goes through
``extra=`` and is merged into the top level of the object, e.g.::

    logger.info("notifications_sent", extra={"type": "trade_proposed", "created": 4})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from .utils.datetime_utils import now_utc

# Attributes every LogRecord carries; anything else on a record came from ``extra=``.
_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

# Loggers whose own output is redundant with ours or too chatty at DEBUG.
_QUIET_LOGGERS = ("uvicorn.access", "asyncio")


class JSONFormatter(logging.Formatter):
    def __init__(self, service: str, environment: str) -> None:
        super().__init__()
        self._service = service
        self._environment = environment

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": now_utc().isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "service": self._service,
            "environment": self._environment,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and key not in payload:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _normalize_log_level(level: str | None, environment: str) -> int:
    if not level:
        return logging.INFO if environment.lower() == "production" else logging.DEBUG
    return logging.getLevelNamesMapping().get(level.strip().upper(), logging.INFO)


def configure_logging(
    service: str,
    environment: str,
    log_level: str | None = None,
    *,
    sql_echo: bool = False,
) -> None:
    """Route all logging through one JSON handler on stdout."""
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JSONFormatter(service=service, environment=environment))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(_normalize_log_level(log_level or os.getenv("LOG_LEVEL"), environment))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if sql_echo else logging.WARNING)
