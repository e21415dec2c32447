"""Attendance endpoints - check-in/out, events, roster marking and reporting"""

from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from parish_hub.api.dependencies import get_attendance_service
from parish_hub.api.v1.schemas import (
    AbsenceAlertSchema,
    AttendanceAnalyticsResponse,
    AttendanceRecordSchema,
    AttendanceStatsSchema,
    AttendanceTrendSchema,
    CreateEventRequest,
    EventSchema,
    FamilyCheckInRequest,
    PageResponse,
    PeriodSchema,
    RecordAttendanceRequest,
    TakeAttendanceRequest,
    TakeAttendanceResponse,
    page_response,
)
from parish_hub.config import settings
from parish_hub.domain.enums import EventStatus, Timeframe
from parish_hub.domain.listing import paginate, search, sort_items
from parish_hub.infrastructure.observability.logging import log_check_in
from parish_hub.infrastructure.observability.metrics import check_in_counter
from parish_hub.services.attendance_service import AttendanceService

router = APIRouter(prefix="/attendance")

RECORD_SEARCH_FIELDS = ("member_name", "event_name", "notes")
RECORD_SORT_FIELDS = Literal["timestamp", "member_name", "event_name", "status", "method"]


def _track(record) -> None:
    check_in_counter.labels(method=record.method.value).inc()
    log_check_in(
        record.member_id,
        record.event_id,
        record.method.value,
        record.id,
        family_size=len(record.family_members),
    )


@router.get("/records", response_model=PageResponse[AttendanceRecordSchema])
def list_records(
    event_id: Optional[str] = Query(None),
    member_id: Optional[str] = Query(None),
    branch_id: Optional[str] = Query(None),
    q: Optional[str] = Query(None, description="Search member, event or notes"),
    sort: RECORD_SORT_FIELDS = Query("timestamp"),
    direction: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=100),
    service: AttendanceService = Depends(get_attendance_service),
):
    """
    Attendance records with search, sorting and pagination.

    Records missing the sort field are listed last in either direction.
    """
    records = service.list_records(event_id=event_id, member_id=member_id, branch_id=branch_id)
    records = sort_items(search(records, q, RECORD_SEARCH_FIELDS), sort, descending=direction == "desc")
    return page_response(paginate(records, page, page_size), AttendanceRecordSchema)


@router.post("/records", response_model=AttendanceRecordSchema, status_code=201)
def record_attendance(
    request_body: RecordAttendanceRequest,
    service: AttendanceService = Depends(get_attendance_service),
):
    """Check a single member in to an event"""
    record = service.record_attendance(
        request_body.member_id,
        request_body.event_id,
        method=request_body.method,
        device_id=request_body.device_id,
        notes=request_body.notes,
    )
    _track(record)
    return AttendanceRecordSchema.model_validate(record)


@router.post("/family-check-in", response_model=AttendanceRecordSchema, status_code=201)
def check_in_family(
    request_body: FamilyCheckInRequest,
    service: AttendanceService = Depends(get_attendance_service),
):
    """Check in a primary member with family members on one record"""
    record = service.check_in_family(
        request_body.primary_member_id,
        request_body.family_member_ids,
        request_body.event_id,
        method=request_body.method,
        device_id=request_body.device_id,
    )
    _track(record)
    return AttendanceRecordSchema.model_validate(record)


@router.post("/records/{record_id}/check-out", response_model=AttendanceRecordSchema)
def check_out_attendee(record_id: str, service: AttendanceService = Depends(get_attendance_service)):
    return AttendanceRecordSchema.model_validate(service.check_out_attendee(record_id))


@router.get("/events", response_model=List[EventSchema])
def list_events(
    branch_id: Optional[str] = Query(None),
    status: Optional[EventStatus] = Query(None),
    service: AttendanceService = Depends(get_attendance_service),
):
    events = sort_items(service.list_events(branch_id, status), "start_time")
    return [EventSchema.model_validate(e) for e in events]


@router.post("/events", response_model=EventSchema, status_code=201)
def create_event(
    request_body: CreateEventRequest,
    service: AttendanceService = Depends(get_attendance_service),
):
    fields = request_body.model_dump()
    event = service.create_event(
        fields.pop("name"),
        fields.pop("type"),
        fields.pop("start_time"),
        fields.pop("end_time"),
        fields.pop("location_id"),
        fields.pop("branch_id"),
        **fields,
    )
    return EventSchema.model_validate(event)


@router.get("/events/{event_id}", response_model=EventSchema)
def get_event(event_id: str, service: AttendanceService = Depends(get_attendance_service)):
    return EventSchema.model_validate(service.get_event(event_id))


@router.post("/events/{event_id}/take", response_model=TakeAttendanceResponse, status_code=201)
def take_attendance(
    event_id: str,
    request_body: TakeAttendanceRequest,
    service: AttendanceService = Depends(get_attendance_service),
):
    """
    Mark attendance for a roster.

    Members already marked for the event are skipped. Submitting nothing
    net-new returns 422 with a message telling "already marked" apart from
    "nothing selected".
    """
    records = service.take_attendance(
        event_id,
        member_ids=request_body.member_ids,
        select_all=request_body.select_all,
        branch_id=request_body.branch_id,
    )
    for record in records:
        _track(record)
    return TakeAttendanceResponse(
        event_id=event_id,
        marked=[AttendanceRecordSchema.model_validate(r) for r in records],
    )


@router.get("/events/{event_id}/stats", response_model=AttendanceStatsSchema)
def get_event_stats(event_id: str, service: AttendanceService = Depends(get_attendance_service)):
    return AttendanceStatsSchema.model_validate(service.get_event_attendance_stats(event_id))


@router.get("/trends", response_model=AttendanceTrendSchema)
def get_trends(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    event_type: Optional[str] = Query(None),
    branch_id: Optional[str] = Query(None),
    service: AttendanceService = Depends(get_attendance_service),
):
    trend = service.get_attendance_trends(start_date, end_date, event_type=event_type, branch_id=branch_id)
    return AttendanceTrendSchema.model_validate(trend)


@router.get("/absence-alerts", response_model=List[AbsenceAlertSchema])
def get_absence_alerts(
    threshold_weeks: int = Query(settings.absence_threshold_weeks, ge=1),
    branch_id: Optional[str] = Query(None),
    service: AttendanceService = Depends(get_attendance_service),
):
    alerts = service.get_absence_alerts(threshold_weeks, branch_id)
    return [AbsenceAlertSchema.model_validate(a) for a in alerts]


@router.get("/analytics", response_model=AttendanceAnalyticsResponse)
def get_analytics(
    timeframe: Timeframe = Query(Timeframe.MONTH),
    branch_id: Optional[str] = Query(None),
    service: AttendanceService = Depends(get_attendance_service),
):
    """
    Attendance analytics for the current week, month, quarter or year (UTC).

    Returns:
        Period bounds with its backend label plus attendance, visitor and
        check-in method figures for records inside it
    """
    summary = service.get_analytics(timeframe, branch_id)
    return AttendanceAnalyticsResponse(
        timeframe=timeframe,
        period=PeriodSchema.model_validate(summary.period),
        total_attendance=summary.total_attendance,
        unique_members=summary.unique_members,
        visitors=summary.visitors,
        first_time_visitors=summary.first_time_visitors,
        children_count=summary.children_count,
        adult_count=summary.adult_count,
        by_method=summary.by_method,
        by_day=summary.by_day,
    )
