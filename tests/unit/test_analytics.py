"""Unit tests for attendance analytics"""

from datetime import datetime, timedelta, timezone

from parish_hub.domain.analytics import absence_alerts, attendance_trends, summarize_attendance
from parish_hub.domain.enums import AttendanceStatus, CheckInMethod, MemberStatus
from parish_hub.domain.models import AttendanceEvent, AttendanceRecord, Member
from parish_hub.domain.periods import compute_period

NOW = datetime(2025, 6, 11, 12, 0, tzinfo=timezone.utc)


def make_event(event_id: str, start: datetime, event_type: str = "service") -> AttendanceEvent:
    return AttendanceEvent(
        event_id, "Service", event_type, start, start + timedelta(hours=2), "loc-1", "br-001"
    )


def make_record(member_id: str, event: AttendanceEvent, method=CheckInMethod.MANUAL_ENTRY) -> AttendanceRecord:
    return AttendanceRecord(
        id=f"{event.id}-{member_id}",
        member_id=member_id,
        member_name=member_id,
        event_id=event.id,
        event_name=event.name,
        timestamp=event.start_time + timedelta(minutes=5),
        method=method,
        status=AttendanceStatus.CHECKED_IN,
        branch_id=event.branch_id,
    )


def members():
    return {
        "a": Member("a", "Ann", "A", "br-001"),
        "b": Member("b", "Ben", "B", "br-001", is_child=True),
        "v": Member("v", "Vic", "V", "br-001", status=MemberStatus.VISITOR),
    }


def test_first_time_visitor_excludes_returning_visitor():
    past = make_event("e0", NOW - timedelta(days=40))
    current = make_event("e1", NOW - timedelta(days=1))
    records = [
        make_record("v", past),
        make_record("v", current),
        make_record("a", current, CheckInMethod.CARD_SCAN),
    ]

    summary = summarize_attendance(records, members(), compute_period("month", NOW), prior_records=records)

    assert summary.total_attendance == 2
    assert summary.visitors == 1
    assert summary.first_time_visitors == 0
    assert summary.by_method["card_scan"] == 1
    assert summary.by_day == {"2025-06-10": 2}


def test_monthly_growth_and_peak():
    may = make_event("may", datetime(2025, 5, 4, 9, 0, tzinfo=timezone.utc))
    june = make_event("jun", datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc))
    records = [make_record("a", may), make_record("a", june), make_record("b", june), make_record("v", june)]

    trend = attendance_trends(
        [may, june],
        records,
        members(),
        datetime(2025, 5, 1, tzinfo=timezone.utc),
        datetime(2025, 6, 30, tzinfo=timezone.utc),
    )

    assert [b.total_attendance for b in trend.monthly_data] == [1, 3]
    assert trend.overall_growth == 200.0
    assert trend.peak_attendance_count == 3
    assert trend.peak_attendance_date == june.start_time
    assert trend.monthly_data[1].new_visitors == 1


def test_trends_filter_by_event_type():
    service = make_event("svc", datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc))
    youth = make_event("yth", datetime(2025, 6, 4, 18, 0, tzinfo=timezone.utc), event_type="youth")
    records = [make_record("a", service), make_record("b", youth)]

    trend = attendance_trends(
        [service, youth],
        records,
        members(),
        datetime(2025, 6, 1, tzinfo=timezone.utc),
        datetime(2025, 6, 30, tzinfo=timezone.utc),
        event_type="youth",
    )

    assert trend.peak_attendance_count == 1
    assert trend.weekly_data[0].total_attendance == 1


def test_absence_alerts_skip_never_attended_and_inactive():
    roster = [
        Member("gone", "Gone", "Away", "br-001", last_attendance=NOW - timedelta(weeks=5)),
        Member("new", "New", "Comer", "br-001"),
        Member("idle", "Idle", "One", "br-001", status=MemberStatus.INACTIVE,
               last_attendance=NOW - timedelta(weeks=10)),
        Member("recent", "Re", "Cent", "br-001", last_attendance=NOW - timedelta(days=3)),
    ]

    alerts = absence_alerts(roster, threshold_weeks=3, now=NOW)

    assert [a.member_id for a in alerts] == ["gone"]
    assert alerts[0].missed_events == 5
    assert alerts[0].status == "new"
