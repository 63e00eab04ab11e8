from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from typing import Any, MutableMapping

from bucketfs.config import Config

CONTEXT_FIELDS = ("bucket", "key", "path")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "time": self.formatTime(record, self.datefmt),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)

        return json.dumps(payload, ensure_ascii=True)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [record.levelname, record.name, record.getMessage()]
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                parts.append(f"{field}={getattr(record, field)}")
        return " | ".join(parts)


class ContextLogger(logging.LoggerAdapter):
    """Stamps fixed context (e.g. the bucket) on every record it emits.

    Per-call ``extra`` fields are merged over the fixed ones, so a record only
    carries the context of the call that produced it.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def setup_logger(name: str, config: Config) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(config.log_level)
    logger.propagate = False

    if logger.handlers:
        return logger

    console_formatter: logging.Formatter = (
        JSONFormatter() if config.log_format == "json" else TextFormatter()
    )
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # File output is always JSON so it can be shipped as-is
    if config.log_file_path:
        file_handler = RotatingFileHandler(
            config.log_file_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=3,
        )
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    return logger


def bind_context(logger: logging.Logger | logging.LoggerAdapter, **context) -> ContextLogger:
    if isinstance(logger, logging.LoggerAdapter):
        context = {**(logger.extra or {}), **context}
        logger = logger.logger
    return ContextLogger(logger, context)
