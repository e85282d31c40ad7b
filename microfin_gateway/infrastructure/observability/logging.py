"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from microfin_gateway.config import settings
from microfin_gateway.domain.exceptions import InvalidArgumentError


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_computation(
    request_id: str,
    step: str,
    outcome: str,
    duration_ms: float,
    **fields: Any,
) -> None:
    """Log structured outcome of a loan computation or report build"""
    logging.info(
        "Computation completed",
        extra={
            "request_id": request_id,
            "step": step,
            "outcome": outcome,
            "duration_ms": duration_ms,
            **fields,
        },
    )


def log_rejection(request_id: str, endpoint: str, error: InvalidArgumentError) -> None:
    """Log an input rejected by the domain, with the offending field when known"""
    logging.warning(
        f"Invalid {endpoint} request: {error}",
        extra={
            "request_id": request_id,
            "endpoint": endpoint,
            "field": error.field,
            "error_type": type(error).__name__,
        },
    )
