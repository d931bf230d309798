"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from receivables_risk.config import settings


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_portfolio_scored(
    request_id: str,
    portfolio_id: str,
    client_count: int,
    high_risk_count: int,
    duration_ms: float,
) -> None:
    """Log structured outcome of parsing and scoring an uploaded portfolio"""
    logging.info(
        "Portfolio scored",
        extra={
            "request_id": request_id,
            "portfolio_id": portfolio_id,
            "step": "portfolio_scored",
            "client_count": client_count,
            "high_risk_count": high_risk_count,
            "duration_ms": duration_ms,
        },
    )


def log_query_filtered(
    request_id: str,
    portfolio_id: str,
    rule: str,
    returned: int,
    was_truncated: bool,
) -> None:
    """Log which relevance rule answered a chat question"""
    logging.info(
        "Query filtered",
        extra={
            "request_id": request_id,
            "portfolio_id": portfolio_id,
            "step": "query_filtered",
            "rule": rule,
            "returned_clients": returned,
            "was_truncated": was_truncated,
        },
    )
