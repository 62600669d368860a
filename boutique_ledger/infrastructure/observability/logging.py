"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from boutique_ledger.config import settings


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


def log_payment(
    request_id: str,
    transaction_id: str,
    transaction_kind: str,
    amount_cents: int,
    remaining_cents: int,
    status: str,
) -> None:
    """Log structured payment outcome for reconciliation audits"""
    logging.info(
        "Payment recorded",
        extra={
            "request_id": request_id,
            "step": "payment_recorded",
            "transaction_id": transaction_id,
            "transaction_kind": transaction_kind,
            "amount_cents": amount_cents,
            "remaining_cents": remaining_cents,
            "payment_status": status,
        },
    )


def log_skipped_rows(request_id: str, report: str, transaction_ids: list) -> None:
    """Log transactions dropped from a report because their client is unknown"""
    if not transaction_ids:
        return
    logging.warning(
        "Transactions skipped: unknown client",
        extra={
            "request_id": request_id,
            "report": report,
            "skipped_count": len(transaction_ids),
            "transaction_ids": transaction_ids[:20],
        },
    )
