"""Attendance analytics - summaries, trends and absence detection"""

from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Set

from parish_hub.domain.enums import CheckInMethod, MemberStatus
from parish_hub.domain.models import (
    AbsenceAlert,
    AttendanceEvent,
    AttendanceRecord,
    AttendanceStats,
    AttendanceSummary,
    AttendanceTrend,
    Member,
    Period,
    TrendBucket,
)
from parish_hub.domain.periods import as_utc, contains
from parish_hub.utils.date_utils import days_between, month_key, week_starting


def _method_breakdown(records: Iterable[AttendanceRecord]) -> Dict[str, int]:
    counts = Counter(r.method.value for r in records)
    return {method.value: counts.get(method.value, 0) for method in CheckInMethod}


def summarize_attendance(
    records: Sequence[AttendanceRecord],
    members: Dict[str, Member],
    period: Period,
    prior_records: Sequence[AttendanceRecord] = (),
) -> AttendanceSummary:
    """
    Analytics figures for the records falling inside a period.

    Requirements:
    - total attendance counts records, unique members counts distinct attendees
    - visitors are attendees whose member status is visitor
    - first-time visitors are visitors with no record before the period
    """
    in_period = [r for r in records if contains(period, r.timestamp)]
    attendee_ids = {r.member_id for r in in_period}
    seen_before = {r.member_id for r in prior_records if as_utc(r.timestamp) < period.start}

    visitors = {
        mid for mid in attendee_ids
        if mid in members and members[mid].status == MemberStatus.VISITOR
    }
    children = {mid for mid in attendee_ids if mid in members and members[mid].is_child}

    by_day: Dict[str, int] = defaultdict(int)
    for r in in_period:
        by_day[as_utc(r.timestamp).date().isoformat()] += 1

    return AttendanceSummary(
        period=period,
        total_attendance=len(in_period),
        unique_members=len(attendee_ids),
        visitors=len(visitors),
        first_time_visitors=len(visitors - seen_before),
        children_count=len(children),
        adult_count=len(attendee_ids) - len(children),
        by_method=_method_breakdown(in_period),
        by_day=dict(sorted(by_day.items())),
    )


def event_stats(
    event: AttendanceEvent,
    records: Sequence[AttendanceRecord],
    members: Dict[str, Member],
) -> AttendanceStats:
    """Per-event breakdown: unique attendees, visitors, children and check-in methods"""
    event_records = [r for r in records if r.event_id == event.id]
    unique_attendees = {r.member_id for r in event_records}

    children_count = sum(
        1 for r in event_records
        if r.member_id in members and members[r.member_id].is_child
    )
    new_visitors = sum(
        1 for r in event_records
        if r.member_id in members and members[r.member_id].status == MemberStatus.VISITOR
    )

    return AttendanceStats(
        event_id=event.id,
        event_name=event.name,
        date=event.start_time,
        total_attendees=len(unique_attendees),
        new_visitors=new_visitors,
        returning_members=len(unique_attendees) - new_visitors,
        children_count=children_count,
        adult_count=len(unique_attendees) - children_count,
        family_check_ins=sum(1 for r in event_records if r.family_check_in),
        check_in_by_method=_method_breakdown(event_records),
    )


def _bucket(label, start, records, visitor_ids, services) -> TrendBucket:
    attendees = {r.member_id for r in records}
    return TrendBucket(
        label=label,
        start=start,
        total_attendance=len(records),
        unique_attendees=len(attendees),
        new_visitors=len(attendees & visitor_ids),
        average_per_service=round(len(records) / services, 2) if services else 0.0,
    )


def attendance_trends(
    events: Sequence[AttendanceEvent],
    records: Sequence[AttendanceRecord],
    members: Dict[str, Member],
    start: datetime,
    end: datetime,
    event_type: Optional[str] = None,
    branch_id: Optional[str] = None,
) -> AttendanceTrend:
    """
    Weekly (Sunday-start) and monthly attendance series for events in a range.

    Growth compares the last month bucket with the first; peak is the event
    with the most records.
    """
    start, end = as_utc(start), as_utc(end)
    selected = [
        e for e in events
        if start <= as_utc(e.start_time) <= end
        and (event_type is None or e.type == event_type)
        and (branch_id is None or e.branch_id == branch_id)
    ]
    events_by_id = {e.id: e for e in selected}
    relevant = [r for r in records if r.event_id in events_by_id]
    visitor_ids: Set[str] = {
        mid for mid, m in members.items() if m.status == MemberStatus.VISITOR
    }

    weekly: Dict = defaultdict(list)
    monthly: Dict = defaultdict(list)
    week_services: Counter = Counter()
    month_services: Counter = Counter()
    for e in selected:
        day = as_utc(e.start_time).date()
        week_services[week_starting(day)] += 1
        month_services[month_key(day)] += 1
    for r in relevant:
        day = as_utc(events_by_id[r.event_id].start_time).date()
        weekly[week_starting(day)].append(r)
        monthly[month_key(day)].append(r)

    weekly_data = [
        _bucket(week.isoformat(), week, weekly[week], visitor_ids, week_services[week])
        for week in sorted(week_services)
    ]
    monthly_data = [
        _bucket(
            key,
            datetime.strptime(key, "%Y-%m").date(),
            monthly[key],
            visitor_ids,
            month_services[key],
        )
        for key in sorted(month_services)
    ]

    overall_growth = 0.0
    if len(monthly_data) > 1 and monthly_data[0].total_attendance:
        first, last = monthly_data[0].total_attendance, monthly_data[-1].total_attendance
        overall_growth = round((last - first) / first * 100, 2)

    per_event = Counter(r.event_id for r in relevant)
    peak_date, peak_count = None, 0
    if per_event:
        peak_event_id, peak_count = per_event.most_common(1)[0]
        peak_date = events_by_id[peak_event_id].start_time

    return AttendanceTrend(
        start_date=start,
        end_date=end,
        event_type=event_type,
        branch_id=branch_id,
        weekly_data=weekly_data,
        monthly_data=monthly_data,
        overall_growth=overall_growth,
        peak_attendance_date=peak_date,
        peak_attendance_count=peak_count,
    )


def absence_alerts(
    members: Iterable[Member],
    threshold_weeks: int = 3,
    branch_id: Optional[str] = None,
    now: datetime | None = None,
) -> List[AbsenceAlert]:
    """
    Active members whose last attendance is older than the threshold.

    Members that never attended are not flagged; missed events are estimated
    as one per elapsed week.
    """
    now = as_utc(now or datetime.now(timezone.utc))
    threshold = now - timedelta(weeks=threshold_weeks)

    alerts = []
    for member in members:
        if member.status != MemberStatus.ACTIVE or member.last_attendance is None:
            continue
        if branch_id and member.primary_branch_id != branch_id:
            continue
        last_seen = as_utc(member.last_attendance)
        if last_seen >= threshold:
            continue
        days = days_between(last_seen, now)
        alerts.append(
            AbsenceAlert(
                id=f"alert_{member.id}",
                member_id=member.id,
                member_name=member.full_name,
                last_attendance_date=last_seen,
                missed_events=days // 7,
            )
        )
    return alerts
