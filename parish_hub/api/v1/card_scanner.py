"""POST /v1/card-scanner/scan - Simulated card reader check-in"""

import logging

from fastapi import APIRouter, Depends, Request

from parish_hub.api.dependencies import get_attendance_service, get_request_id
from parish_hub.api.v1.schemas import AttendanceRecordSchema, CardScanRequest
from parish_hub.domain.exceptions import ConflictError, NotFoundError
from parish_hub.infrastructure.observability.logging import log_check_in
from parish_hub.infrastructure.observability.metrics import card_scan_failures_counter, check_in_counter
from parish_hub.services.attendance_service import AttendanceService

router = APIRouter()


@router.post("/card-scanner/scan", response_model=AttendanceRecordSchema, status_code=201)
def scan_card(
    request_body: CardScanRequest,
    request: Request,
    service: AttendanceService = Depends(get_attendance_service),
):
    """
    Resolve a card tap at a device into a check-in.

    Flow:
    1. Look up the active card by number (404 if none)
    2. Require the device to be online with an active event assigned (409 otherwise)
    3. Record a card_scan check-in for the card holder (409 if already checked in)
    """
    request_id = get_request_id(request)

    try:
        record = service.simulate_card_scan(request_body.card_number.strip(), request_body.device_id)
    except NotFoundError:
        card_scan_failures_counter.labels(reason="not_found").inc()
        raise
    except ConflictError as e:
        card_scan_failures_counter.labels(reason="conflict").inc()
        logging.warning(
            f"Card scan rejected: {e}",
            extra={"request_id": request_id, "device_id": request_body.device_id},
        )
        raise

    check_in_counter.labels(method=record.method.value).inc()
    log_check_in(record.member_id, record.event_id, record.method.value, record.id)
    return AttendanceRecordSchema.model_validate(record)
