"""Pydantic schemas for API request/response validation"""

import uuid
from datetime import date, datetime
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from parish_hub.domain.enums import (
    AttendanceStatus,
    CardStatus,
    CardType,
    CheckInMethod,
    DeviceStatus,
    DeviceType,
    EventStatus,
    MemberStatus,
    Timeframe,
    TransactionType,
    TransferDataType,
    TransferStatus,
)

T = TypeVar("T")


class ORMModel(BaseModel):
    """Base for responses built from dataclasses and ORM rows"""

    model_config = ConfigDict(from_attributes=True)


class PageResponse(BaseModel, Generic[T]):
    """Paginated list envelope"""

    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int


# --- members -----------------------------------------------------------------


class MemberSchema(ORMModel):
    id: str
    first_name: str
    last_name: str
    full_name: str
    email: Optional[str] = None
    primary_branch_id: str
    status: MemberStatus
    is_child: bool
    family_id: Optional[str] = None
    has_card: bool
    card_id: Optional[str] = None
    last_attendance: Optional[datetime] = None


# --- attendance --------------------------------------------------------------


class FamilyMemberSchema(ORMModel):
    member_id: str
    member_name: str
    status: AttendanceStatus


class AttendanceRecordSchema(ORMModel):
    id: str
    member_id: str
    member_name: str
    event_id: str
    event_name: str
    timestamp: datetime
    method: CheckInMethod
    status: AttendanceStatus
    branch_id: str
    location_id: Optional[str] = None
    device_id: Optional[str] = None
    notes: Optional[str] = None
    family_check_in: bool
    family_members: List[FamilyMemberSchema] = []
    checked_out_at: Optional[datetime] = None


class RecordAttendanceRequest(BaseModel):
    """Request body for POST /v1/attendance/records"""

    member_id: str = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1)
    method: CheckInMethod = CheckInMethod.CARD_SCAN
    device_id: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)


class FamilyCheckInRequest(BaseModel):
    """Request body for POST /v1/attendance/family-check-in"""

    primary_member_id: str = Field(..., min_length=1)
    family_member_ids: List[str] = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1)
    method: CheckInMethod = CheckInMethod.CARD_SCAN
    device_id: Optional[str] = None


class TakeAttendanceRequest(BaseModel):
    """Request body for POST /v1/attendance/events/{event_id}/take"""

    member_ids: List[str] = []
    select_all: bool = False
    branch_id: Optional[str] = None


class TakeAttendanceResponse(BaseModel):
    event_id: str
    marked: List[AttendanceRecordSchema]


class EventSchema(ORMModel):
    id: str
    name: str
    type: str
    start_time: datetime
    end_time: datetime
    location_id: str
    branch_id: str
    status: EventStatus
    is_recurring: bool
    recurrence_pattern: Optional[str] = None
    check_in_opens_minutes_before: int
    late_check_in_minutes: int
    allow_family_check_in: bool
    assigned_devices: List[str]


class CreateEventRequest(BaseModel):
    """Request body for POST /v1/attendance/events"""

    name: str = Field(..., min_length=1, max_length=200)
    type: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime
    location_id: str = Field(..., min_length=1)
    branch_id: str = Field(..., min_length=1)
    is_recurring: bool = False
    recurrence_pattern: Optional[str] = None
    check_in_opens_minutes_before: int = Field(30, ge=0)
    late_check_in_minutes: int = Field(15, ge=0)
    allow_family_check_in: bool = True


class AttendanceStatsSchema(ORMModel):
    event_id: str
    event_name: str
    date: datetime
    total_attendees: int
    new_visitors: int
    returning_members: int
    children_count: int
    adult_count: int
    family_check_ins: int
    check_in_by_method: Dict[str, int]


class TrendBucketSchema(ORMModel):
    label: str
    start: date
    total_attendance: int
    unique_attendees: int
    new_visitors: int
    average_per_service: float


class AttendanceTrendSchema(ORMModel):
    start_date: datetime
    end_date: datetime
    event_type: Optional[str] = None
    branch_id: Optional[str] = None
    weekly_data: List[TrendBucketSchema]
    monthly_data: List[TrendBucketSchema]
    overall_growth: float
    peak_attendance_date: Optional[datetime] = None
    peak_attendance_count: int


class AbsenceAlertSchema(ORMModel):
    id: str
    member_id: str
    member_name: str
    last_attendance_date: datetime
    missed_events: int
    status: str


class PeriodSchema(ORMModel):
    start: datetime
    end: datetime
    label: str


class AttendanceAnalyticsResponse(ORMModel):
    """Response for GET /v1/attendance/analytics"""

    timeframe: Timeframe
    period: PeriodSchema
    total_attendance: int
    unique_members: int
    visitors: int
    first_time_visitors: int
    children_count: int
    adult_count: int
    by_method: Dict[str, int]
    by_day: Dict[str, int]


# --- cards / devices -------------------------------------------------------------


class CardSchema(ORMModel):
    id: str
    member_id: str
    card_number: str
    issue_date: datetime
    status: CardStatus
    card_type: CardType
    assigned_by: Optional[str] = None
    notes: Optional[str] = None
    last_used: Optional[datetime] = None


class RegisterCardRequest(BaseModel):
    """Request body for POST /v1/cards"""

    member_id: str = Field(..., min_length=1)
    card_number: str = Field(..., min_length=1, max_length=64)
    card_type: CardType = CardType.RFID
    assigned_by: Optional[str] = None
    notes: Optional[str] = None


class UpdateCardStatusRequest(BaseModel):
    status: CardStatus


class DeviceSchema(ORMModel):
    id: str
    name: str
    location_id: str
    branch_id: str
    status: DeviceStatus
    device_type: DeviceType
    last_connected: Optional[datetime] = None
    ip_address: Optional[str] = None
    firmware_version: Optional[str] = None
    battery_level: Optional[int] = None
    assigned_event_id: Optional[str] = None


class RegisterDeviceRequest(BaseModel):
    """Request body for POST /v1/devices"""

    name: str = Field(..., min_length=1, max_length=200)
    location_id: str = Field(..., min_length=1)
    branch_id: str = Field(..., min_length=1)
    device_type: DeviceType = DeviceType.WALL_MOUNTED
    ip_address: Optional[str] = None
    firmware_version: Optional[str] = None


class UpdateDeviceStatusRequest(BaseModel):
    status: DeviceStatus


class AssignDeviceRequest(BaseModel):
    event_id: str = Field(..., min_length=1)


class CardScanRequest(BaseModel):
    """Request body for POST /v1/card-scanner/scan"""

    card_number: str = Field(..., min_length=1)
    device_id: str = Field(..., min_length=1)


# --- branches / transfers ------------------------------------------------------


class BranchSchema(ORMModel):
    id: uuid.UUID
    organisation_id: str
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    established_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime


class CreateBranchRequest(BaseModel):
    """Request body for POST /v1/branches"""

    organisation_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    established_at: Optional[datetime] = None
    is_active: bool = True


class UpdateBranchRequest(BaseModel):
    """Request body for PATCH /v1/branches/{branch_id}; omitted fields are left unchanged"""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    established_at: Optional[datetime] = None
    is_active: Optional[bool] = None


class TransferSchema(ORMModel):
    id: uuid.UUID
    member_id: str
    member_name: str
    source_branch_id: uuid.UUID
    destination_branch_id: uuid.UUID
    status: TransferStatus
    reason: str
    transfer_data: List[TransferDataType]
    request_date: datetime
    approved_date: Optional[datetime] = None
    rejected_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    completed_date: Optional[datetime] = None


class CreateTransferRequest(BaseModel):
    """Request body for POST /v1/transfers"""

    member_id: str
    member_name: str = Field(..., min_length=1)
    source_branch_id: uuid.UUID
    destination_branch_id: uuid.UUID
    reason: str
    transfer_data: List[TransferDataType]


class UpdateTransferRequest(BaseModel):
    """Request body for PATCH /v1/transfers/{transfer_id}"""

    status: TransferStatus  # approved | rejected | completed
    rejection_reason: Optional[str] = None


# --- finances ----------------------------------------------------------------


class CreateTransactionRequest(BaseModel):
    """Request body for POST /v1/finances/transactions"""

    type: TransactionType
    amount_cents: int
    transaction_date: Optional[date] = None
    branch_id: Optional[uuid.UUID] = None
    fund_id: Optional[str] = None
    category: Optional[str] = None
    payment_method: Optional[str] = None
    member_id: Optional[str] = None
    vendor_id: Optional[str] = None
    transfer_source_branch_id: Optional[uuid.UUID] = None
    transfer_destination_branch_id: Optional[uuid.UUID] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def strip_blank_strings(self):
        for name in ("fund_id", "category", "payment_method", "member_id", "vendor_id"):
            value = getattr(self, name)
            if isinstance(value, str) and not value.strip():
                setattr(self, name, None)
        return self


class TransactionSchema(ORMModel):
    id: uuid.UUID
    type: TransactionType
    amount_cents: int
    branch_id: Optional[uuid.UUID] = None
    fund_id: str
    category: str
    payment_method: str
    member_id: Optional[str] = None
    vendor_id: Optional[str] = None
    transfer_source_branch_id: Optional[uuid.UUID] = None
    transfer_destination_branch_id: Optional[uuid.UUID] = None
    transaction_date: date
    notes: Optional[str] = None


class FinancialSummarySchema(ORMModel):
    """Response for GET /v1/finances/summary"""

    period: PeriodSchema
    income_cents: int
    expense_cents: int
    transfer_cents: int
    net_cents: int
    transaction_count: int
    by_category: Dict[str, int]


def page_response(page, schema):
    """Wrap a domain Page into a PageResponse of the given item schema"""
    return PageResponse[schema](
        items=[schema.model_validate(item) for item in page.items],
        total=page.total,
        page=page.page,
        page_size=page.page_size,
        total_pages=page.total_pages,
    )
