"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from sincro_dashboard.config import settings


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


def log_contract_saved(
    request_id: str,
    contract_id: str,
    status: str,
    warranty_synthesized: bool,
    user_id: Optional[str] = None,
) -> None:
    """Log contract create/update outcome"""
    logging.info(
        "Contract saved",
        extra={
            "request_id": request_id,
            "contract_id": contract_id,
            "user_id": user_id,
            "step": "contract_saved",
            "status": status,
            "warranty_synthesized": warranty_synthesized,
        },
    )


def log_receivable_generated(request_id: str, receivable_id: str, contract_id: str, due_date: str) -> None:
    """Log billing record creation"""
    logging.info(
        "Receivable generated",
        extra={
            "request_id": request_id,
            "receivable_id": receivable_id,
            "contract_id": contract_id,
            "step": "receivable_generated",
            "due_date": due_date,
        },
    )
