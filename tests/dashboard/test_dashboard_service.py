from __future__ import annotations

from datetime import date, time, timedelta
from decimal import Decimal

import pytest

from staff_attendance.core.enums import AttendanceStatus
from staff_attendance.dashboard.service import DashboardService, average_clock

from conftest import InMemoryAttendance, InMemoryUsers, make_profile, make_record


@pytest.fixture
def staff():
    return InMemoryUsers([make_profile(i, f"Person{i} Test") for i in range(1, 6)])


def _service(attendance, users):
    return DashboardService(attendance, users, nominal_rate=Decimal("18.50"))


def test_same_day_counts(staff, fixed_now):
    today = fixed_now.date()
    attendance = InMemoryAttendance(
        [
            make_record(1, 1, today, time(8, 0)),
            make_record(2, 2, today, time(9, 20), status=AttendanceStatus.LATE),
            make_record(3, 3, today, time(6, 0), time(9, 0)),
        ]
    )

    stats = _service(attendance, staff).build(today, fixed_now)

    assert stats.checked_in_now == 2
    assert stats.late_today == 1
    assert stats.present_today == 3
    assert stats.absent_today == 2
    assert stats.active_employees == 5


def test_absent_never_goes_negative(fixed_now):
    today = fixed_now.date()
    users = InMemoryUsers([make_profile(1, "Only One")])
    attendance = InMemoryAttendance(
        [make_record(1, 1, today, time(8, 0)), make_record(2, 99, today, time(8, 0))]
    )

    stats = _service(attendance, users).build(today, fixed_now)

    assert stats.absent_today == 0


def test_open_records_count_until_now(staff, fixed_now):
    today = fixed_now.date()
    # fixed_now is 09:30
    attendance = InMemoryAttendance([make_record(1, 1, today, time(7, 30))])

    stats = _service(attendance, staff).build(today, fixed_now)

    assert stats.total_hours == pytest.approx(2.0)
    assert stats.overtime_hours == 0


def test_overtime_and_salary_split(staff, fixed_now):
    today = fixed_now.date()
    later = fixed_now.replace(hour=22, minute=0)
    attendance = InMemoryAttendance(
        [
            make_record(1, 1, today, time(8, 0), time(18, 0)),
            make_record(2, 2, today, time(9, 0), time(13, 0)),
        ]
    )

    stats = _service(attendance, staff).build(today, later)

    assert stats.total_hours == pytest.approx(14.0)
    assert stats.overtime_hours == pytest.approx(2.0)
    assert stats.salary_base == Decimal("222.00")
    assert stats.salary_overtime == Decimal("37.00")
    assert stats.salary_estimate == Decimal("259.00")


def test_avg_check_in(staff, fixed_now):
    today = fixed_now.date()
    attendance = InMemoryAttendance(
        [make_record(1, 1, today, time(8, 0)), make_record(2, 2, today, time(9, 0))]
    )

    stats = _service(attendance, staff).build(today, fixed_now)

    assert stats.avg_check_in == time(8, 30)


def test_empty_day(staff, fixed_now):
    stats = _service(InMemoryAttendance(), staff).build(fixed_now.date(), fixed_now)

    assert stats.present_today == 0
    assert stats.absent_today == 5
    assert stats.total_hours == 0
    assert stats.salary_estimate == Decimal("0.00")
    assert stats.avg_check_in is None
    assert stats.recent_activity == []


def test_week_series_covers_seven_days(staff, fixed_now):
    today = fixed_now.date()
    yesterday = today - timedelta(days=1)
    attendance = InMemoryAttendance(
        [
            make_record(1, 1, yesterday, time(8, 0), time(19, 0)),
            make_record(2, 2, yesterday, time(9, 30), time(17, 0), status=AttendanceStatus.LATE),
            make_record(3, 3, today - timedelta(days=9), time(8, 0), time(17, 0)),
        ]
    )

    week = _service(attendance, staff).build(today, fixed_now).week

    assert [d.day for d in week] == [today - timedelta(days=i) for i in range(6, -1, -1)]
    day = week[-2]
    assert (day.present, day.late, day.absent) == (1, 1, 3)
    assert day.overtime_hours == pytest.approx(3.0)


def test_recent_activity_is_newest_first(staff, fixed_now):
    today = fixed_now.date()
    attendance = InMemoryAttendance(
        [
            make_record(1, 1, today, time(7, 0), time(8, 0)),
            make_record(2, 2, today, time(9, 20), status=AttendanceStatus.LATE),
        ]
    )

    activity = _service(attendance, staff).build(today, fixed_now).recent_activity

    assert [(a.full_name, a.action) for a in activity] == [
        ("Person2 Test", "Late check-in"),
        ("Person1 Test", "Checked out"),
        ("Person1 Test", "Checked in"),
    ]


def test_average_clock_of_nothing_is_none():
    assert average_clock([]) is None


def test_stats_to_dict_is_json_ready(staff, fixed_now):
    data = _service(InMemoryAttendance(), staff).build(fixed_now.date(), fixed_now).to_dict()

    assert data["salary_estimate"] == "0.00"
    assert len(data["week"]) == 7
    assert data["avg_check_in"] is None
