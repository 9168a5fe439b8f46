"""Structured JSON logging for ledger operations"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from debt_pool.config import settings


class CustomJsonFormatter(JsonFormatter):
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


def log_payment(debt_id: str, payer_name: str, amount: Decimal, balance_after: Decimal) -> None:
    """Log a payment applied to a debt"""
    logging.getLogger("debt_pool.ledger").info(
        "Payment applied",
        extra={
            "step": "payment_applied",
            "debt_id": debt_id,
            "payer_name": payer_name,
            "amount": str(amount),
            "balance_after": str(balance_after),
        },
    )


def log_pool_distribution(
    distribution_id: str,
    total_amount: Decimal,
    allocated_amount: Decimal,
    line_count: int,
    applied_count: int,
) -> None:
    """Log a committed pool distribution"""
    logging.getLogger("debt_pool.ledger").info(
        "Pool distributed",
        extra={
            "step": "pool_distributed",
            "distribution_id": distribution_id,
            "total_amount": str(total_amount),
            "allocated_amount": str(allocated_amount),
            "line_count": line_count,
            "applied_count": applied_count,
        },
    )
