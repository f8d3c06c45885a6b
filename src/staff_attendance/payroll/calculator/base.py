from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceRecord
from ...core.constants import REGULAR_HOURS_PER_DAY


def split_hours(hours: int, *, regular_limit: int = REGULAR_HOURS_PER_DAY) -> tuple[int, int]:
    """Split one day's hours into ``(regular, overtime)``."""
    hours = max(int(hours), 0)
    return min(hours, regular_limit), max(hours - regular_limit, 0)


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def worked_hours(self, record: AttendanceRecord) -> int:
        raise NotImplementedError

    def split(self, record: AttendanceRecord) -> tuple[int, int]:
        return split_hours(self.worked_hours(record))
