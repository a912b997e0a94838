"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "casino-ledger"


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


def _plain(value: Any) -> Any:
    # Decimals go out as strings so log consumers see exact cents
    return str(value) if isinstance(value, Decimal) else value


def log_operation(step: str, user_id: str, request_id: Optional[str] = None, **figures: Any) -> None:
    """Log a committed ledger operation with its key figures"""
    extra = {"request_id": request_id or "n/a", "user_id": user_id, "step": step}
    extra.update({key: _plain(value) for key, value in figures.items()})
    logging.getLogger("casino_ledger.ledger").info("Operation committed", extra=extra)


def log_rejection(step: str, user_id: str, reason: str, request_id: Optional[str] = None) -> None:
    """Log a business rejection (no state was changed)"""
    logging.getLogger("casino_ledger.ledger").warning(
        "Operation rejected",
        extra={"request_id": request_id or "n/a", "user_id": user_id, "step": step, "reason": reason},
    )
