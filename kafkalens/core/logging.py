"""Logging configuration for KafkaLens."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from kafkalens.config.settings import settings

# Attributes copied from a record into the JSON document when present
_CONTEXT_FIELDS = ("user_id", "cluster", "request_id", "resource", "event")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding application and access-control context."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["app_name"] = settings.app_name
        log_record["app_version"] = settings.app_version
        log_record["environment"] = settings.environment.value
        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        for name in _CONTEXT_FIELDS:
            if hasattr(record, name):
                log_record[name] = getattr(record, name)


def setup_logging() -> None:
    """Configure logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level.value)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.log_level.value)

    if settings.log_json:
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    else:
        formatter = logging.Formatter(settings.log_format)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Third-party noise
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("redis").setLevel(logging.WARNING)

    logger = get_logger(__name__)
    logger.info(
        "Logging configured",
        extra={
            "log_level": settings.log_level.value,
            "log_json": settings.log_json,
        },
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter merging bound context into every record."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})
        if "user" in extra and "user_id" not in extra:
            extra["user_id"] = getattr(extra["user"], "name", "unknown")
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger_with_context(name: str, **context) -> LoggerAdapter:
    """Get a logger with additional context."""
    return LoggerAdapter(get_logger(name), context)


def log_event(logger: logging.Logger, level: str, event: str, **kwargs) -> None:
    """Log a structured event."""
    extra = {"event": event, **kwargs}

    message = f"{event}: {json.dumps(kwargs, default=str)}" if kwargs else event

    log = getattr(logger, level, None)
    if log is None:
        raise ValueError(f"Unknown log level: {level}")
    log(message, extra=extra)
