"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from parish_hub.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Send every log record to stdout as one JSON object per line"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)

    # Request latency is already exported on /metrics
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def log_check_in(
    member_id: str,
    event_id: str,
    method: str,
    record_id: str,
    family_size: int = 0,
) -> None:
    """Log structured check-in outcome for attendance analysis"""
    logging.info(
        "Attendance recorded",
        extra={
            "member_id": member_id,
            "event_id": event_id,
            "step": "check_in",
            "method": method,
            "record_id": record_id,
            "family_size": family_size,
        },
    )


def log_transfer_transition(
    request_id: str,
    transfer_id: str,
    from_status: str,
    to_status: str,
) -> None:
    """Log transfer request status changes"""
    logging.info(
        "Transfer request updated",
        extra={
            "request_id": request_id,
            "transfer_id": transfer_id,
            "step": "transfer_transition",
            "from_status": from_status,
            "to_status": to_status,
        },
    )
