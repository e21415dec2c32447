"""Attendance service - card scanning, check-in/out, cards, devices and reporting"""

from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from parish_hub.domain import analytics
from parish_hub.domain.enums import (
    AttendanceStatus,
    CardStatus,
    CardType,
    CheckInMethod,
    DeviceStatus,
    DeviceType,
    EventStatus,
)
from parish_hub.domain.exceptions import ConflictError, InvalidRequestError, NotFoundError
from parish_hub.domain.models import (
    AbsenceAlert,
    AttendanceEvent,
    AttendanceRecord,
    AttendanceStats,
    AttendanceSummary,
    AttendanceTrend,
    CardDevice,
    FamilyCheckInMember,
    Member,
    MemberCard,
)
from parish_hub.domain.periods import as_utc, compute_period
from parish_hub.domain.selection import AttendanceSelection
from parish_hub.infrastructure.demo.store import InMemoryStore, new_id

ACTIVE_EVENT_STATUSES = (EventStatus.SCHEDULED, EventStatus.IN_PROGRESS)


class AttendanceService:
    """
    Attendance operations over the in-memory demo store.

    Validation rules are application level only: every call reads and mutates
    the shared collections directly.
    """

    def __init__(self, store: InMemoryStore, clock: Callable[[], datetime] | None = None):
        self._store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # --- lookups -----------------------------------------------------------

    def _member(self, member_id: str) -> Member:
        member = self._store.member(member_id)
        if not member:
            raise NotFoundError(f"Member with ID {member_id} not found")
        return member

    def _event(self, event_id: str) -> AttendanceEvent:
        event = self._store.event(event_id)
        if not event:
            raise NotFoundError(f"Event with ID {event_id} not found")
        return event

    def _device(self, device_id: str) -> CardDevice:
        device = self._store.device(device_id)
        if not device:
            raise NotFoundError(f"Device with ID {device_id} not found")
        return device

    def _card(self, card_id: str) -> MemberCard:
        card = self._store.card(card_id)
        if not card:
            raise NotFoundError(f"Card with ID {card_id} not found")
        return card

    def get_member(self, member_id: str) -> Member:
        return self._member(member_id)

    def get_event(self, event_id: str) -> AttendanceEvent:
        return self._event(event_id)

    def list_members(self, branch_id: Optional[str] = None) -> List[Member]:
        return [m for m in self._store.members if not branch_id or m.primary_branch_id == branch_id]

    def list_events(
        self,
        branch_id: Optional[str] = None,
        status: Optional[EventStatus] = None,
    ) -> List[AttendanceEvent]:
        return [
            e for e in self._store.events
            if (not branch_id or e.branch_id == branch_id) and (status is None or e.status == status)
        ]

    def list_records(
        self,
        event_id: Optional[str] = None,
        member_id: Optional[str] = None,
        branch_id: Optional[str] = None,
    ) -> List[AttendanceRecord]:
        return [
            r for r in self._store.records
            if (not event_id or r.event_id == event_id)
            and (not member_id or r.member_id == member_id)
            and (not branch_id or r.branch_id == branch_id)
        ]

    def list_cards(self, member_id: Optional[str] = None) -> List[MemberCard]:
        return [c for c in self._store.cards if not member_id or c.member_id == member_id]

    def list_devices(self, branch_id: Optional[str] = None) -> List[CardDevice]:
        return [d for d in self._store.devices if not branch_id or d.branch_id == branch_id]

    # --- attendance recording ------------------------------------------------

    def _touch_card(self, member: Member, now: datetime) -> None:
        if member.has_card and member.card_id:
            card = self._store.card(member.card_id)
            if card:
                card.last_used = now

    def _ensure_not_checked_in(self, member_id: str, event_id: str) -> None:
        existing = next(
            (
                r for r in self._store.records
                if r.member_id == member_id
                and r.event_id == event_id
                and r.status == AttendanceStatus.CHECKED_IN
            ),
            None,
        )
        if existing:
            raise ConflictError("Member is already checked in for this event")

    def record_attendance(
        self,
        member_id: str,
        event_id: str,
        method: CheckInMethod = CheckInMethod.CARD_SCAN,
        device_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """
        Check a member in to an event.

        Raises:
            NotFoundError: Unknown member or event
            ConflictError: Member already checked in for this event
        """
        member = self._member(member_id)
        event = self._event(event_id)
        self._ensure_not_checked_in(member_id, event_id)

        now = self._clock()
        record = AttendanceRecord(
            id=new_id("att"),
            member_id=member_id,
            member_name=member.full_name,
            event_id=event_id,
            event_name=event.name,
            timestamp=now,
            method=method,
            status=AttendanceStatus.CHECKED_IN,
            branch_id=event.branch_id,
            location_id=event.location_id,
            device_id=device_id,
            notes=notes,
        )

        member.last_attendance = now
        self._store.records.append(record)

        if method == CheckInMethod.CARD_SCAN:
            self._touch_card(member, now)

        return record

    def check_in_family(
        self,
        primary_member_id: str,
        family_member_ids: Sequence[str],
        event_id: str,
        method: CheckInMethod = CheckInMethod.CARD_SCAN,
        device_id: Optional[str] = None,
    ) -> AttendanceRecord:
        """
        Check in a primary member together with family members on one record.

        Unknown family ids are skipped; at least one must resolve.
        """
        primary = self._member(primary_member_id)
        event = self._event(event_id)

        if not event.allow_family_check_in:
            raise InvalidRequestError(f"Family check-in is not allowed for event: {event.name}")

        family = [m for m in self._store.members if m.id in set(family_member_ids)]
        if not family:
            raise InvalidRequestError("No valid family members found")

        self._ensure_not_checked_in(primary_member_id, event_id)

        now = self._clock()
        record = AttendanceRecord(
            id=new_id("att"),
            member_id=primary_member_id,
            member_name=primary.full_name,
            event_id=event_id,
            event_name=event.name,
            timestamp=now,
            method=method,
            status=AttendanceStatus.CHECKED_IN,
            branch_id=event.branch_id,
            location_id=event.location_id,
            device_id=device_id,
            family_check_in=True,
            family_members=[FamilyCheckInMember(m.id, m.full_name) for m in family],
        )

        primary.last_attendance = now
        for member in family:
            member.last_attendance = now
        self._store.records.append(record)

        if method == CheckInMethod.CARD_SCAN:
            self._touch_card(primary, now)

        return record

    def check_out_attendee(self, record_id: str) -> AttendanceRecord:
        """Mark a record (and its family members) as checked out"""
        record = self._store.record(record_id)
        if not record:
            raise NotFoundError(f"Attendance record with ID {record_id} not found")
        if record.status == AttendanceStatus.CHECKED_OUT:
            raise ConflictError("Attendee is already checked out")

        record.status = AttendanceStatus.CHECKED_OUT
        record.checked_out_at = self._clock()
        for family_member in record.family_members:
            family_member.status = AttendanceStatus.CHECKED_OUT

        return record

    def take_attendance(
        self,
        event_id: str,
        member_ids: Sequence[str] = (),
        select_all: bool = False,
        branch_id: Optional[str] = None,
    ) -> List[AttendanceRecord]:
        """
        Mark a roster for an event by manual entry.

        Only members without an existing record for the event are marked; the
        roster is the event branch's members unless another branch is given.
        """
        event = self._event(event_id)
        roster = self.list_members(branch_id or event.branch_id)
        selection = AttendanceSelection(roster, self.list_records(event_id=event_id))

        if select_all:
            selection.toggle_select_all()
        selection.select(member_ids)

        return [
            self.record_attendance(member_id, event_id, CheckInMethod.MANUAL_ENTRY)
            for member_id in selection.submission()
        ]

    # --- cards ---------------------------------------------------------------

    def register_new_card(
        self,
        member_id: str,
        card_number: str,
        card_type: CardType = CardType.RFID,
        assigned_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> MemberCard:
        """
        Issue a new active card to a member.

        Any card the member already holds as active becomes inactive.

        Raises:
            NotFoundError: Unknown member
            ConflictError: Another active card already uses the number
        """
        member = self._member(member_id)

        in_use = next(
            (c for c in self._store.cards if c.card_number == card_number and c.status == CardStatus.ACTIVE),
            None,
        )
        if in_use:
            raise ConflictError(f"Card number {card_number} is already in use")

        for card in self._store.cards:
            if card.member_id == member_id and card.status == CardStatus.ACTIVE:
                card.status = CardStatus.INACTIVE

        card = MemberCard(
            id=new_id("card"),
            member_id=member_id,
            card_number=card_number,
            issue_date=self._clock(),
            status=CardStatus.ACTIVE,
            card_type=card_type,
            assigned_by=assigned_by,
            notes=notes,
        )

        member.has_card = True
        member.card_id = card.id
        self._store.cards.append(card)

        return card

    def update_card_status(self, card_id: str, status: CardStatus) -> MemberCard:
        """
        Change card status.

        Activating a card makes it the member's only active card; deactivating
        or losing the linked card unlinks it from its member.
        """
        card = self._card(card_id)

        if status == CardStatus.ACTIVE and card.status != CardStatus.ACTIVE:
            clash = next(
                (
                    c for c in self._store.cards
                    if c.id != card.id and c.card_number == card.card_number and c.status == CardStatus.ACTIVE
                ),
                None,
            )
            if clash:
                raise ConflictError(f"Card number {card.card_number} is already in use")

        card.status = status
        member = self._store.member(card.member_id)

        if status == CardStatus.ACTIVE:
            for other in self._store.cards:
                if other.id != card.id and other.member_id == card.member_id and other.status == CardStatus.ACTIVE:
                    other.status = CardStatus.INACTIVE
            if member:
                member.has_card = True
                member.card_id = card.id
        elif member and member.card_id == card_id:
            member.has_card = False
            member.card_id = None

        return card

    # --- devices -------------------------------------------------------------

    def register_new_device(
        self,
        name: str,
        location_id: str,
        branch_id: str,
        device_type: DeviceType = DeviceType.WALL_MOUNTED,
        ip_address: Optional[str] = None,
        firmware_version: Optional[str] = None,
    ) -> CardDevice:
        device = CardDevice(
            id=new_id("device"),
            name=name,
            location_id=location_id,
            branch_id=branch_id,
            status=DeviceStatus.ONLINE,
            device_type=device_type,
            last_connected=self._clock(),
            ip_address=ip_address,
            firmware_version=firmware_version,
            battery_level=100,
        )
        self._store.devices.append(device)
        return device

    def update_device_status(self, device_id: str, status: DeviceStatus) -> CardDevice:
        device = self._device(device_id)
        device.status = status
        if status == DeviceStatus.ONLINE:
            device.last_connected = self._clock()
        return device

    def assign_device_to_event(self, device_id: str, event_id: str) -> CardDevice:
        device = self._device(device_id)
        event = self._event(event_id)

        device.assigned_event_id = event_id
        if device_id not in event.assigned_devices:
            event.assigned_devices.append(device_id)

        return device

    def find_available_devices(
        self,
        start_time: datetime,
        end_time: datetime,
        location_id: str,
        branch_id: str,
    ) -> List[CardDevice]:
        """Devices at a location not under maintenance and not assigned to an overlapping event"""
        start_time, end_time = as_utc(start_time), as_utc(end_time)
        busy = {
            device_id
            for e in self._store.events
            if as_utc(e.start_time) <= end_time
            and as_utc(e.end_time) >= start_time
            and e.status != EventStatus.CANCELLED
            for device_id in e.assigned_devices
        }
        return [
            d for d in self._store.devices
            if d.location_id == location_id
            and d.branch_id == branch_id
            and d.status != DeviceStatus.MAINTENANCE
            and d.id not in busy
        ]

    def simulate_card_scan(self, card_number: str, device_id: str) -> AttendanceRecord:
        """
        Resolve a scan at a device into a card_scan check-in.

        Requires an active card, an online device and an assigned event that
        is scheduled or in progress.
        """
        card = next(
            (c for c in self._store.cards if c.card_number == card_number and c.status == CardStatus.ACTIVE),
            None,
        )
        if not card:
            raise NotFoundError(f"Active card with number {card_number} not found")

        device = self._device(device_id)
        if device.status != DeviceStatus.ONLINE:
            raise ConflictError(f"Device {device.name} is not online")
        if not device.assigned_event_id:
            raise ConflictError(f"No event assigned to device {device.name}")

        event = self._event(device.assigned_event_id)
        if event.status not in ACTIVE_EVENT_STATUSES:
            raise ConflictError(f"Event {event.name} is not active")

        return self.record_attendance(card.member_id, event.id, CheckInMethod.CARD_SCAN, device_id)

    # --- events --------------------------------------------------------------

    def create_event(
        self,
        name: str,
        type: str,
        start_time: datetime,
        end_time: datetime,
        location_id: str,
        branch_id: str,
        **options,
    ) -> AttendanceEvent:
        """Add an event; naive start/end times are stored as UTC"""
        start_time, end_time = as_utc(start_time), as_utc(end_time)
        if end_time <= start_time:
            raise InvalidRequestError("Event end time must be after start time", {"end_time": "before start"})

        event = AttendanceEvent(
            id=new_id("evt"),
            name=name,
            type=type,
            start_time=start_time,
            end_time=end_time,
            location_id=location_id,
            branch_id=branch_id,
            **options,
        )
        self._store.events.append(event)
        return event

    # --- reporting -----------------------------------------------------------

    def get_event_attendance_stats(self, event_id: str) -> AttendanceStats:
        event = self._event(event_id)
        return analytics.event_stats(event, self._store.records, self._store.members_by_id())

    def get_attendance_trends(
        self,
        start_date: datetime,
        end_date: datetime,
        event_type: Optional[str] = None,
        branch_id: Optional[str] = None,
    ) -> AttendanceTrend:
        return analytics.attendance_trends(
            self._store.events,
            self._store.records,
            self._store.members_by_id(),
            start_date,
            end_date,
            event_type=event_type,
            branch_id=branch_id,
        )

    def get_absence_alerts(self, threshold_weeks: int = 3, branch_id: Optional[str] = None) -> List[AbsenceAlert]:
        return analytics.absence_alerts(
            self._store.members, threshold_weeks, branch_id, now=self._clock()
        )

    def get_analytics(self, timeframe: str, branch_id: Optional[str] = None) -> AttendanceSummary:
        """Attendance summary for the week/month/quarter/year containing now"""
        period = compute_period(timeframe, self._clock())
        records = self.list_records(branch_id=branch_id)
        return analytics.summarize_attendance(
            records, self._store.members_by_id(), period, prior_records=records
        )
