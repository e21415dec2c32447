"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from parish_hub.domain.enums import (
    AttendanceStatus,
    CardStatus,
    CardType,
    CheckInMethod,
    DeviceStatus,
    DeviceType,
    EventStatus,
    MemberStatus,
    TransactionType,
)


@dataclass
class Member:
    """Person record scoped to a branch"""

    id: str
    first_name: str
    last_name: str
    primary_branch_id: str
    status: MemberStatus = MemberStatus.ACTIVE
    email: Optional[str] = None
    is_child: bool = False
    family_id: Optional[str] = None
    has_card: bool = False
    card_id: Optional[str] = None
    last_attendance: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class MemberCard:
    """Physical or virtual card used for check-in"""

    id: str
    member_id: str
    card_number: str
    issue_date: datetime
    status: CardStatus = CardStatus.ACTIVE
    card_type: CardType = CardType.RFID
    assigned_by: Optional[str] = None
    notes: Optional[str] = None
    last_used: Optional[datetime] = None


@dataclass
class CardDevice:
    """Card reader installed at a branch location"""

    id: str
    name: str
    location_id: str
    branch_id: str
    status: DeviceStatus = DeviceStatus.ONLINE
    device_type: DeviceType = DeviceType.WALL_MOUNTED
    last_connected: Optional[datetime] = None
    ip_address: Optional[str] = None
    firmware_version: Optional[str] = None
    battery_level: Optional[int] = None
    assigned_event_id: Optional[str] = None


@dataclass
class AttendanceEvent:
    """Service, meeting or activity members check in to"""

    id: str
    name: str
    type: str
    start_time: datetime
    end_time: datetime
    location_id: str
    branch_id: str
    status: EventStatus = EventStatus.SCHEDULED
    is_recurring: bool = False
    recurrence_pattern: Optional[str] = None  # weekly | monthly | ...
    check_in_opens_minutes_before: int = 30
    late_check_in_minutes: int = 15
    allow_family_check_in: bool = True
    assigned_devices: List[str] = field(default_factory=list)


@dataclass
class FamilyCheckInMember:
    """Family member checked in alongside a primary attendee"""

    member_id: str
    member_name: str
    status: AttendanceStatus = AttendanceStatus.CHECKED_IN


@dataclass
class AttendanceRecord:
    """Single check-in of a member to an event"""

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
    family_check_in: bool = False
    family_members: List[FamilyCheckInMember] = field(default_factory=list)
    checked_out_at: Optional[datetime] = None


@dataclass
class AttendanceStats:
    """Per-event attendance breakdown"""

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


@dataclass
class TrendBucket:
    """Attendance totals for one week or month"""

    label: str
    start: date
    total_attendance: int
    unique_attendees: int
    new_visitors: int
    average_per_service: float = 0.0


@dataclass
class AttendanceTrend:
    """Weekly and monthly attendance series over a date range"""

    start_date: datetime
    end_date: datetime
    event_type: Optional[str]
    branch_id: Optional[str]
    weekly_data: List[TrendBucket]
    monthly_data: List[TrendBucket]
    overall_growth: float
    peak_attendance_date: Optional[datetime]
    peak_attendance_count: int


@dataclass
class AbsenceAlert:
    """Active member who has not attended for a number of weeks"""

    id: str
    member_id: str
    member_name: str
    last_attendance_date: datetime
    missed_events: int
    status: str = "new"


@dataclass
class Period:
    """Inclusive UTC date range for an analytics timeframe"""

    start: datetime
    end: datetime
    label: str  # WEEKLY | MONTHLY | QUARTERLY | YEARLY


@dataclass
class AttendanceSummary:
    """Analytics figures for records inside a period"""

    period: Period
    total_attendance: int
    unique_members: int
    visitors: int
    first_time_visitors: int
    children_count: int
    adult_count: int
    by_method: Dict[str, int]
    by_day: Dict[str, int]


@dataclass
class TransactionDraft:
    """Unvalidated financial transaction as submitted by the form"""

    type: TransactionType
    amount_cents: int
    transaction_date: Optional[date]
    fund_id: Optional[str]
    category: Optional[str]
    payment_method: Optional[str]
    branch_id: Optional[str] = None
    member_id: Optional[str] = None
    vendor_id: Optional[str] = None
    transfer_source_branch_id: Optional[str] = None
    transfer_destination_branch_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class FinancialSummary:
    """Income/expense totals for a branch over a period"""

    period: Period
    income_cents: int
    expense_cents: int
    transfer_cents: int
    net_cents: int
    transaction_count: int
    by_category: Dict[str, int]
