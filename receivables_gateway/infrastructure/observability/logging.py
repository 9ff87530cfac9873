"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from receivables_gateway.config import settings


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


def log_payment(
    request_id: str,
    owner_id: str,
    debt_id: str,
    scheme: str,
    amount_cents: int,
    installment_number: Optional[int],
    duration_ms: float,
) -> None:
    """Log structured payment outcome for auditing"""
    logging.info(
        "Payment recorded",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "debt_id": debt_id,
            "step": "payment_applied",
            "scheme": scheme,
            "amount_cents": amount_cents,
            "installment_number": installment_number,
            "duration_ms": duration_ms,
        },
    )


def log_rejection(request_id: str, owner_id: str, debt_id: str, reason: str) -> None:
    """Log a payment the engine refused"""
    logging.warning(
        "Payment rejected",
        extra={
            "request_id": request_id,
            "owner_id": owner_id,
            "debt_id": debt_id,
            "step": "payment_rejected",
            "reason": reason,
        },
    )
