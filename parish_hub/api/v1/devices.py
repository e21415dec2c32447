"""Card reader device endpoints"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from parish_hub.api.dependencies import get_attendance_service
from parish_hub.api.v1.schemas import (
    AssignDeviceRequest,
    DeviceSchema,
    RegisterDeviceRequest,
    UpdateDeviceStatusRequest,
)
from parish_hub.domain.exceptions import InvalidRequestError
from parish_hub.domain.periods import as_utc
from parish_hub.services.attendance_service import AttendanceService

router = APIRouter(prefix="/devices")


@router.get("", response_model=List[DeviceSchema])
def list_devices(
    branch_id: Optional[str] = Query(None),
    service: AttendanceService = Depends(get_attendance_service),
):
    return [DeviceSchema.model_validate(d) for d in service.list_devices(branch_id)]


@router.get("/available", response_model=List[DeviceSchema])
def find_available_devices(
    start_time: datetime = Query(...),
    end_time: datetime = Query(...),
    location_id: str = Query(...),
    branch_id: str = Query(...),
    service: AttendanceService = Depends(get_attendance_service),
):
    """Devices at the location that are not in maintenance and not booked for an overlapping event"""
    if as_utc(end_time) <= as_utc(start_time):
        raise InvalidRequestError("end_time must be after start_time", {"end_time": "before start"})
    devices = service.find_available_devices(start_time, end_time, location_id, branch_id)
    return [DeviceSchema.model_validate(d) for d in devices]


@router.post("", response_model=DeviceSchema, status_code=201)
def register_device(
    request_body: RegisterDeviceRequest,
    service: AttendanceService = Depends(get_attendance_service),
):
    device = service.register_new_device(**request_body.model_dump())
    return DeviceSchema.model_validate(device)


@router.patch("/{device_id}/status", response_model=DeviceSchema)
def update_device_status(
    device_id: str,
    request_body: UpdateDeviceStatusRequest,
    service: AttendanceService = Depends(get_attendance_service),
):
    return DeviceSchema.model_validate(service.update_device_status(device_id, request_body.status))


@router.post("/{device_id}/assign", response_model=DeviceSchema)
def assign_device_to_event(
    device_id: str,
    request_body: AssignDeviceRequest,
    service: AttendanceService = Depends(get_attendance_service),
):
    return DeviceSchema.model_validate(service.assign_device_to_event(device_id, request_body.event_id))
