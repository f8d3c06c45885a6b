from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import hours_between
from ..core.constants import DEFAULT_TREND_DAYS, RECENT_ACTIVITY_LIMIT, REGULAR_HOURS_PER_DAY
from ..core.enums import AttendanceStatus
from ..users.repository import UserRepository


@dataclass(frozen=True)
class DaySeries:
    day: date
    present: int
    late: int
    absent: int
    overtime_hours: float

    @property
    def label(self) -> str:
        return self.day.strftime("%a")


@dataclass(frozen=True)
class Activity:
    full_name: str
    action: str
    at: datetime
    tone: str


@dataclass(frozen=True)
class DashboardStats:
    checked_in_now: int
    late_today: int
    present_today: int
    absent_today: int
    active_employees: int
    total_hours: float
    overtime_hours: float
    salary_base: Decimal
    salary_overtime: Decimal
    avg_check_in: Optional[time]
    week: List[DaySeries] = field(default_factory=list)
    recent_activity: List[Activity] = field(default_factory=list)

    @property
    def salary_estimate(self) -> Decimal:
        return self.salary_base + self.salary_overtime

    def to_dict(self) -> dict:
        return {
            "checked_in_now": self.checked_in_now,
            "late_today": self.late_today,
            "present_today": self.present_today,
            "absent_today": self.absent_today,
            "active_employees": self.active_employees,
            "total_hours": round(self.total_hours, 1),
            "overtime_hours": round(self.overtime_hours, 1),
            "salary_estimate": str(self.salary_estimate),
            "salary_base": str(self.salary_base),
            "salary_overtime": str(self.salary_overtime),
            "avg_check_in": self.avg_check_in.strftime("%H:%M") if self.avg_check_in else None,
            "week": [
                {
                    "day": d.day.isoformat(),
                    "label": d.label,
                    "present": d.present,
                    "late": d.late,
                    "absent": d.absent,
                    "overtime_hours": round(d.overtime_hours, 1),
                }
                for d in self.week
            ],
        }


def record_hours(record: AttendanceRecord, *, now: datetime) -> float:
    """Hours on the clock; an open record runs until ``now``."""
    if not record.check_in_time:
        return 0.0
    end = record.check_out_time or now
    return max(hours_between(record.check_in_time, end), 0.0)


def average_clock(stamps: Sequence[datetime]) -> Optional[time]:
    if not stamps:
        return None
    seconds = sum(s.hour * 3600 + s.minute * 60 + s.second for s in stamps) // len(stamps)
    return time(hour=seconds // 3600, minute=(seconds % 3600) // 60, second=seconds % 60)


def _money(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class DashboardService:
    """Same-day aggregates for the overview page, recomputed per request."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        nominal_rate: Decimal,
        trend_days: int = DEFAULT_TREND_DAYS,
    ):
        self._attendance = attendance
        self._users = users
        self._nominal_rate = nominal_rate
        self._trend_days = int(trend_days)

    def build(self, today: date, now: datetime) -> DashboardStats:
        start = today - timedelta(days=self._trend_days - 1)
        records = self._attendance.list_between(start_date=start, end_date=today)
        profiles = self._users.list_all(active_only=True)
        active = len(profiles)

        by_day: Dict[date, List[AttendanceRecord]] = {}
        for r in records:
            by_day.setdefault(r.work_date, []).append(r)

        today_records = [r for r in by_day.get(today, []) if r.check_in_time]
        hours = [record_hours(r, now=now) for r in today_records]
        total_hours = sum(hours)
        overtime_hours = sum(max(h - REGULAR_HOURS_PER_DAY, 0.0) for h in hours)
        rate = self._nominal_rate

        return DashboardStats(
            checked_in_now=sum(1 for r in today_records if r.is_open),
            late_today=sum(1 for r in today_records if r.status == AttendanceStatus.LATE),
            present_today=len(today_records),
            absent_today=max(active - len(today_records), 0),
            active_employees=active,
            total_hours=total_hours,
            overtime_hours=overtime_hours,
            salary_base=_money(Decimal(str(total_hours - overtime_hours)) * rate),
            salary_overtime=_money(Decimal(str(overtime_hours)) * rate),
            avg_check_in=average_clock([r.check_in_time for r in today_records]),
            week=self._week(by_day, start=start, today=today, now=now, active=active),
            recent_activity=self._recent_activity(records, {p.user_id: p.full_name for p in profiles}),
        )

    def _week(self, by_day, *, start: date, today: date, now: datetime, active: int) -> List[DaySeries]:
        series = []
        for offset in range(self._trend_days):
            day = start + timedelta(days=offset)
            checked_in = [r for r in by_day.get(day, []) if r.check_in_time]
            late = sum(1 for r in checked_in if r.status == AttendanceStatus.LATE)
            overtime = 0.0
            for r in checked_in:
                # open records from earlier days have no end to measure against
                if r.check_out_time or day == today:
                    overtime += max(record_hours(r, now=now) - REGULAR_HOURS_PER_DAY, 0.0)
            series.append(
                DaySeries(
                    day=day,
                    present=len(checked_in) - late,
                    late=late,
                    absent=max(active - len(checked_in), 0),
                    overtime_hours=overtime,
                )
            )
        return series

    @staticmethod
    def _recent_activity(records: Sequence[AttendanceRecord], names: Dict[int, str]) -> List[Activity]:
        events: List[Activity] = []
        for r in records:
            name = names.get(r.user_id, f"User #{r.user_id}")
            if r.check_in_time:
                late = r.status == AttendanceStatus.LATE
                events.append(
                    Activity(
                        full_name=name,
                        action="Late check-in" if late else "Checked in",
                        at=r.check_in_time,
                        tone="danger" if late else "success",
                    )
                )
            if r.check_out_time:
                events.append(Activity(full_name=name, action="Checked out", at=r.check_out_time, tone="secondary"))
        events.sort(key=lambda e: e.at, reverse=True)
        return events[:RECENT_ACTIVITY_LIMIT]
