from __future__ import annotations

import io
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Sequence

import pandas as pd

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import week_start
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import AttendanceStatus, Role
from ..users.model import UserProfile
from ..users.repository import UserRepository

# statuses that have a column in the weekly chart
WEEKLY_STATUSES = (AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.ABSENT)


@dataclass(frozen=True)
class WeekBucket:
    week_start: date
    present: int = 0
    late: int = 0
    absent: int = 0

    @property
    def label(self) -> str:
        return self.week_start.strftime("%b %d")


def _rate(part: int, whole: int) -> str:
    if not whole:
        return "0"
    return f"{part / whole * 100:.1f}"


@dataclass(frozen=True)
class StatusSlice:
    status: AttendanceStatus
    count: int
    total: int

    @property
    def label(self) -> str:
        return self.status.value.replace("_", " ").capitalize()

    @property
    def percent(self) -> str:
        """Share of all records in the period."""
        return _rate(self.count, self.total)


@dataclass(frozen=True)
class EmployeeSummary:
    user_id: int
    employee_id: str
    full_name: str
    role: Role
    initials: str
    total: int
    present: int

    @property
    def attendance_rate(self) -> str:
        return _rate(self.present, self.total)


@dataclass(frozen=True)
class ReportTotals:
    total: int
    present: int
    late: int
    absent: int

    @property
    def present_rate(self) -> str:
        return _rate(self.present, self.total)


@dataclass(frozen=True)
class AttendanceReport:
    since: date
    until: date
    records: List[AttendanceRecord]
    weekly: List[WeekBucket]
    statuses: List[StatusSlice]
    totals: ReportTotals
    profile_count: int
    employees: List[EmployeeSummary]

    def to_dict(self) -> dict:
        return {
            "since": self.since.isoformat(),
            "until": self.until.isoformat(),
            "weekly": [
                {"week": b.label, "present": b.present, "late": b.late, "absent": b.absent} for b in self.weekly
            ],
            "statuses": [
                {"name": s.label, "status": s.status.value, "value": s.count, "percent": s.percent}
                for s in self.statuses
            ],
            "totals": {
                "total": self.totals.total,
                "present": self.totals.present,
                "late": self.totals.late,
                "absent": self.totals.absent,
                "present_rate": self.totals.present_rate,
            },
            "profile_count": self.profile_count,
            "employees": [
                {
                    "user_id": e.user_id,
                    "employee_id": e.employee_id,
                    "full_name": e.full_name,
                    "role": e.role.value,
                    "total": e.total,
                    "present": e.present,
                    "attendance_rate": e.attendance_rate,
                }
                for e in self.employees
            ],
        }


def weekly_buckets(records: Sequence[AttendanceRecord]) -> List[WeekBucket]:
    """Count present/late/absent per Sunday-started week, oldest week first."""
    counts: Dict[date, Counter] = {}
    for r in records:
        bucket = counts.setdefault(week_start(r.work_date), Counter())
        if r.status in WEEKLY_STATUSES:
            bucket[r.status] += 1

    return [
        WeekBucket(
            week_start=start,
            present=c[AttendanceStatus.PRESENT],
            late=c[AttendanceStatus.LATE],
            absent=c[AttendanceStatus.ABSENT],
        )
        for start, c in sorted(counts.items())
    ]


def status_distribution(records: Sequence[AttendanceRecord]) -> List[StatusSlice]:
    counts = Counter(r.status for r in records if r.status)
    return [StatusSlice(status=s, count=counts[s], total=len(records)) for s in AttendanceStatus if counts[s]]


def employee_summaries(records: Sequence[AttendanceRecord], profiles: Sequence[UserProfile]) -> List[EmployeeSummary]:
    """One row per profile, including profiles without records."""
    totals = Counter(r.user_id for r in records)
    present = Counter(r.user_id for r in records if r.status == AttendanceStatus.PRESENT)
    return [
        EmployeeSummary(
            user_id=p.user_id,
            employee_id=p.employee_id,
            full_name=p.full_name,
            role=p.role,
            initials=p.initials,
            total=totals[p.user_id],
            present=present[p.user_id],
        )
        for p in profiles
    ]


class ReportService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository, *, days: int = DEFAULT_REPORT_DAYS):
        self._attendance = attendance
        self._users = users
        self._days = int(days)

    def build(self, today: date) -> AttendanceReport:
        since = today - timedelta(days=self._days)
        records = list(self._attendance.list_between(start_date=since, end_date=today))
        profiles = list(self._users.list_all())
        statuses = Counter(r.status for r in records)

        return AttendanceReport(
            since=since,
            until=today,
            records=records,
            weekly=weekly_buckets(records),
            statuses=status_distribution(records),
            totals=ReportTotals(
                total=len(records),
                present=statuses[AttendanceStatus.PRESENT],
                late=statuses[AttendanceStatus.LATE],
                absent=statuses[AttendanceStatus.ABSENT],
            ),
            profile_count=len(profiles),
            employees=employee_summaries(records, profiles),
        )

    def to_xlsx(self, report: AttendanceReport) -> bytes:
        names = {p.user_id: (p.employee_id, p.full_name) for p in self._users.list_all()}
        rows = []
        for r in report.records:
            employee_id, full_name = names.get(r.user_id, ("", ""))
            rows.append(
                {
                    "Date": r.work_date.isoformat(),
                    "Employee ID": employee_id,
                    "Name": full_name,
                    "Check In": r.check_in_time.strftime("%H:%M:%S") if r.check_in_time else "",
                    "Check Out": r.check_out_time.strftime("%H:%M:%S") if r.check_out_time else "",
                    "Status": r.status.value if r.status else "",
                    "Notes": r.notes or "",
                }
            )

        columns = ["Date", "Employee ID", "Name", "Check In", "Check Out", "Status", "Notes"]
        df = pd.DataFrame(rows, columns=columns)

        out = io.BytesIO()
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Attendance")
        return out.getvalue()
