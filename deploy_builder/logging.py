"""Structured logging helpers: JSON lines with context."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        step = getattr(record, "step", None)
        if step:
            payload["step"] = step
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def get_logger(name: str = "deploy_builder") -> logging.Logger:
    # Handler lives on the package logger; module loggers propagate to it.
    base = logging.getLogger("deploy_builder")
    if not base.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(JsonFormatter())
        base.addHandler(handler)
        base.setLevel(logging.INFO)
    return logging.getLogger(name)
