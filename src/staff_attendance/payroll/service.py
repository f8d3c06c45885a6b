from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, shift_month
from ..users.model import UserProfile
from ..users.repository import UserRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator

CENT = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PayrollLine:
    user_id: int
    employee_id: str
    full_name: str
    position: Optional[str]
    regular_hours: int
    overtime_hours: int
    regular_rate: Decimal
    overtime_rate: Decimal

    @property
    def total_hours(self) -> int:
        return self.regular_hours + self.overtime_hours

    @property
    def regular_pay(self) -> Decimal:
        return _money(self.regular_rate * self.regular_hours)

    @property
    def overtime_pay(self) -> Decimal:
        return _money(self.overtime_rate * self.overtime_hours)

    @property
    def total_pay(self) -> Decimal:
        return self.regular_pay + self.overtime_pay


@dataclass(frozen=True)
class PayrollReport:
    month: date
    regular_rate: Decimal
    overtime_rate: Decimal
    lines: List[PayrollLine]

    @property
    def previous_month(self) -> date:
        return shift_month(self.month, -1)

    @property
    def next_month(self) -> date:
        return shift_month(self.month, 1)

    @property
    def total_payroll(self) -> Decimal:
        return sum((line.total_pay for line in self.lines), Decimal("0.00"))

    @property
    def total_hours(self) -> int:
        return sum(line.total_hours for line in self.lines)

    @property
    def total_overtime_hours(self) -> int:
        return sum(line.overtime_hours for line in self.lines)

    @property
    def employee_count(self) -> int:
        return len(self.lines)


class PayrollService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._calculator = calculator or StandardPayrollCalculator()

    def build_month(self, month: date, *, regular_rate: Decimal, overtime_rate: Decimal) -> PayrollReport:
        start, end = month_bounds(month)
        records = self._attendance.list_between(start_date=start, end_date=end, completed_only=True)
        profiles: Sequence[UserProfile] = self._users.list_all(active_only=True)

        hours: Dict[int, list[int]] = {p.user_id: [0, 0] for p in profiles}
        for record in records:
            bucket = hours.get(record.user_id)
            if bucket is None:
                continue
            regular, overtime = self._calculator.split(record)
            bucket[0] += regular
            bucket[1] += overtime

        lines = [
            PayrollLine(
                user_id=p.user_id,
                employee_id=p.employee_id,
                full_name=p.full_name,
                position=p.position,
                regular_hours=hours[p.user_id][0],
                overtime_hours=hours[p.user_id][1],
                regular_rate=regular_rate,
                overtime_rate=overtime_rate,
            )
            for p in profiles
        ]
        return PayrollReport(month=start, regular_rate=regular_rate, overtime_rate=overtime_rate, lines=lines)

    @staticmethod
    def to_csv(report: PayrollReport) -> bytes:
        output = io.StringIO()
        fieldnames = [
            "employee_id",
            "full_name",
            "position",
            "regular_hours",
            "overtime_hours",
            "total_hours",
            "regular_pay",
            "overtime_pay",
            "total_pay",
        ]
        writer = csv.DictWriter(output, fieldnames=fieldnames)
        writer.writeheader()
        for line in report.lines:
            writer.writerow(
                {
                    "employee_id": line.employee_id,
                    "full_name": line.full_name,
                    "position": line.position or "",
                    "regular_hours": line.regular_hours,
                    "overtime_hours": line.overtime_hours,
                    "total_hours": line.total_hours,
                    "regular_pay": f"{line.regular_pay:.2f}",
                    "overtime_pay": f"{line.overtime_pay:.2f}",
                    "total_pay": f"{line.total_pay:.2f}",
                }
            )
        # Excel needs the BOM to read UTF-8
        return output.getvalue().encode("utf-8-sig")
