"""Demo data for the in-memory attendance store"""

from datetime import datetime, timedelta, timezone

from parish_hub.domain.enums import (
    AttendanceStatus,
    CardStatus,
    CardType,
    CheckInMethod,
    DeviceStatus,
    DeviceType,
    EventStatus,
    MemberStatus,
)
from parish_hub.domain.models import (
    AttendanceEvent,
    AttendanceRecord,
    CardDevice,
    Member,
    MemberCard,
)
from parish_hub.infrastructure.demo.store import InMemoryStore

MAIN_BRANCH = "br-001"
EAST_BRANCH = "br-002"
SANCTUARY = "loc-sanctuary"
HALL = "loc-hall"


def build_demo_store(now: datetime | None = None) -> InMemoryStore:
    """Seed a store with members, cards, devices, events and past check-ins around `now`"""
    now = now or datetime.now(timezone.utc)
    sunday = (now - timedelta(days=(now.weekday() + 1) % 7)).replace(
        hour=9, minute=0, second=0, microsecond=0
    )

    members = [
        Member("mem-001", "John", "Doe", MAIN_BRANCH, email="john.doe@example.org",
               family_id="fam-001", has_card=True, card_id="card-001",
               last_attendance=sunday - timedelta(days=7)),
        Member("mem-002", "Jane", "Doe", MAIN_BRANCH, email="jane.doe@example.org",
               family_id="fam-001", last_attendance=sunday - timedelta(days=7)),
        Member("mem-003", "Timmy", "Doe", MAIN_BRANCH, is_child=True, family_id="fam-001",
               last_attendance=sunday - timedelta(days=7)),
        Member("mem-004", "Samuel", "Lee", MAIN_BRANCH, email="samuel.lee@example.org",
               has_card=True, card_id="card-002", last_attendance=sunday - timedelta(weeks=6)),
        Member("mem-005", "Grace", "Kim", EAST_BRANCH, email="grace.kim@example.org",
               last_attendance=sunday - timedelta(weeks=4)),
        Member("mem-006", "Maria", "Lopez", MAIN_BRANCH, status=MemberStatus.VISITOR),
        Member("mem-007", "Peter", "Okafor", EAST_BRANCH, status=MemberStatus.INACTIVE,
               last_attendance=sunday - timedelta(weeks=20)),
    ]

    cards = [
        MemberCard("card-001", "mem-001", "RF-100001", sunday - timedelta(days=200),
                   CardStatus.ACTIVE, CardType.RFID, assigned_by="admin"),
        MemberCard("card-002", "mem-004", "NF-200001", sunday - timedelta(days=90),
                   CardStatus.ACTIVE, CardType.NFC, assigned_by="admin"),
        MemberCard("card-003", "mem-004", "RF-100099", sunday - timedelta(days=400),
                   CardStatus.LOST, CardType.RFID, assigned_by="admin", notes="Reported lost"),
    ]

    events = [
        AttendanceEvent("evt-001", "Sunday Service", "service", sunday - timedelta(days=7),
                        sunday - timedelta(days=7) + timedelta(hours=2), SANCTUARY, MAIN_BRANCH,
                        status=EventStatus.COMPLETED, is_recurring=True, recurrence_pattern="weekly"),
        AttendanceEvent("evt-002", "Sunday Service", "service", sunday,
                        sunday + timedelta(hours=2), SANCTUARY, MAIN_BRANCH,
                        status=EventStatus.SCHEDULED, is_recurring=True, recurrence_pattern="weekly",
                        assigned_devices=["device-001"]),
        AttendanceEvent("evt-003", "Youth Fellowship", "fellowship", sunday + timedelta(days=3, hours=9),
                        sunday + timedelta(days=3, hours=11), HALL, MAIN_BRANCH,
                        allow_family_check_in=False),
    ]

    devices = [
        CardDevice("device-001", "Sanctuary Entrance", SANCTUARY, MAIN_BRANCH,
                   DeviceStatus.ONLINE, DeviceType.WALL_MOUNTED, last_connected=now,
                   firmware_version="2.1.0", battery_level=87, assigned_event_id="evt-002"),
        CardDevice("device-002", "Hall Kiosk", HALL, MAIN_BRANCH,
                   DeviceStatus.OFFLINE, DeviceType.KIOSK, firmware_version="2.0.4"),
        CardDevice("device-003", "Usher Tablet", SANCTUARY, MAIN_BRANCH,
                   DeviceStatus.MAINTENANCE, DeviceType.MOBILE, battery_level=12),
    ]

    last_week = sunday - timedelta(days=7)
    records = [
        AttendanceRecord("att-001", "mem-001", "John Doe", "evt-001", "Sunday Service",
                         last_week + timedelta(minutes=5), CheckInMethod.CARD_SCAN,
                         AttendanceStatus.CHECKED_OUT, MAIN_BRANCH, SANCTUARY, device_id="device-001",
                         checked_out_at=last_week + timedelta(hours=2)),
        AttendanceRecord("att-002", "mem-002", "Jane Doe", "evt-001", "Sunday Service",
                         last_week + timedelta(minutes=6), CheckInMethod.MANUAL_ENTRY,
                         AttendanceStatus.CHECKED_OUT, MAIN_BRANCH, SANCTUARY,
                         checked_out_at=last_week + timedelta(hours=2)),
        AttendanceRecord("att-003", "mem-003", "Timmy Doe", "evt-001", "Sunday Service",
                         last_week + timedelta(minutes=6), CheckInMethod.MANUAL_ENTRY,
                         AttendanceStatus.CHECKED_OUT, MAIN_BRANCH, SANCTUARY,
                         checked_out_at=last_week + timedelta(hours=2)),
    ]

    return InMemoryStore(
        members=members, cards=cards, devices=devices, events=events, records=records
    )
