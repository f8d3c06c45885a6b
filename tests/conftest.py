from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from staff_attendance.attendance.model import AttendanceRecord
from staff_attendance.container import wire_container
from staff_attendance.core.enums import AttendanceStatus, NotificationType, Role
from staff_attendance.notifications.feed import ChangeFeed
from staff_attendance.notifications.model import Notification
from staff_attendance.qr.model import QRAttendanceConfig
from staff_attendance.users.model import UserProfile

QR_SECRET = "test-qr-secret"
ACCESS_PIN = "4321"


class InMemoryUsers:
    def __init__(self, profiles=()):
        self.by_id: dict[int, UserProfile] = {p.user_id: p for p in profiles}

    def get_by_id(self, user_id: int) -> Optional[UserProfile]:
        return self.by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        return next((p for p in self.by_id.values() if p.email.lower() == email.lower()), None)

    def get_by_employee_id(self, employee_id: str) -> Optional[UserProfile]:
        return next((p for p in self.by_id.values() if p.employee_id == employee_id), None)

    def create_user(self, *, employee_id, full_name, email, password_hash, role) -> int:
        user_id = max(self.by_id, default=0) + 1
        self.by_id[user_id] = UserProfile(
            user_id=user_id,
            employee_id=employee_id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
        )
        return user_id

    def update_profile(self, user_id, *, full_name, phone, department, position) -> bool:
        p = self.by_id.get(int(user_id))
        if not p:
            return False
        self.by_id[p.user_id] = dataclasses.replace(
            p, full_name=full_name, phone=phone, department=department, position=position
        )
        return True

    def set_active(self, user_id, *, is_active) -> bool:
        p = self.by_id.get(int(user_id))
        if not p:
            return False
        self.by_id[p.user_id] = dataclasses.replace(p, is_active=is_active)
        return True

    def delete_by_id(self, user_id) -> bool:
        return self.by_id.pop(int(user_id), None) is not None

    def list_all(self, *, active_only=False):
        items = [p for p in self.by_id.values() if p.is_active or not active_only]
        return sorted(items, key=lambda p: p.full_name)

    def count_active(self) -> int:
        return len(self.list_all(active_only=True))


class InMemoryAttendance:
    def __init__(self, records=()):
        self.by_id: dict[int, AttendanceRecord] = {r.record_id: r for r in records}
        self.writes = 0

    def _next_id(self) -> int:
        return max(self.by_id, default=0) + 1

    def get_by_id(self, record_id):
        return self.by_id.get(int(record_id))

    def get_for_user_and_date(self, user_id, work_date):
        return next((r for r in self.by_id.values() if r.user_id == user_id and r.work_date == work_date), None)

    def get_recent_for_user(self, user_id, limit):
        items = [r for r in self.by_id.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def list_between(self, *, start_date, end_date, completed_only=False):
        items = [r for r in self.by_id.values() if start_date <= r.work_date <= end_date]
        if completed_only:
            items = [r for r in items if r.check_in_time and r.check_out_time]
        return sorted(items, key=lambda r: r.work_date)

    def upsert_checkin(self, *, user_id, work_date, check_in_time, status, qr_code=None, location_lat=None, location_lng=None):
        self.writes += 1
        existing = self.get_for_user_and_date(user_id, work_date)
        record = AttendanceRecord(
            record_id=existing.record_id if existing else self._next_id(),
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=existing.check_out_time if existing else None,
            status=status,
            location_lat=existing.location_lat if existing and location_lat is None else location_lat,
            location_lng=existing.location_lng if existing and location_lng is None else location_lng,
            qr_code=qr_code,
            notes=existing.notes if existing else None,
        )
        self.by_id[record.record_id] = record
        return record

    def stamp_checkout(self, *, record_id, check_out_time, qr_code=None) -> bool:
        self.writes += 1
        r = self.by_id.get(int(record_id))
        if not r:
            return False
        self.by_id[r.record_id] = dataclasses.replace(r, check_out_time=check_out_time, qr_code=qr_code or r.qr_code)
        return True

    def update_field(self, *, record_id, field, value) -> bool:
        self.writes += 1
        r = self.by_id.get(int(record_id))
        if not r:
            return False
        self.by_id[r.record_id] = dataclasses.replace(r, **{field: value})
        return True

    def delete(self, record_id) -> bool:
        self.writes += 1
        return self.by_id.pop(int(record_id), None) is not None


class InMemoryQRConfigs:
    def __init__(self, config: Optional[QRAttendanceConfig] = None):
        self.config = config

    def get_config(self):
        return self.config

    def update_config(self, config_id, update) -> bool:
        if not self.config or self.config.config_id != config_id:
            return False
        self.config = dataclasses.replace(self.config, **dataclasses.asdict(update))
        return True

    def update_location(self, config_id, *, latitude, longitude) -> bool:
        if not self.config or self.config.config_id != config_id:
            return False
        self.config = dataclasses.replace(self.config, allowed_latitude=latitude, allowed_longitude=longitude)
        return True


class InMemoryNotifications:
    def __init__(self, items=()):
        self.by_id: dict[int, Notification] = {n.notification_id: n for n in items}
        self._clock = 0

    def list_for_user(self, user_id, *, is_read=None):
        items = [n for n in self.by_id.values() if n.user_id == user_id]
        if is_read is not None:
            items = [n for n in items if n.is_read == is_read]
        return sorted(items, key=lambda n: (n.created_at, n.notification_id), reverse=True)

    def create(self, *, user_id, title, message, type) -> int:
        self._clock += 1
        notification_id = max(self.by_id, default=0) + 1
        self.by_id[notification_id] = Notification(
            notification_id=notification_id,
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            created_at=datetime(2026, 3, 10, 0, 0, self._clock % 60),
        )
        return notification_id

    def mark_read(self, user_id, notification_id) -> bool:
        n = self.by_id.get(int(notification_id))
        if not n or n.user_id != user_id:
            return False
        self.by_id[n.notification_id] = dataclasses.replace(n, is_read=True)
        return True

    def mark_all_read(self, user_id) -> int:
        changed = 0
        for n in list(self.by_id.values()):
            if n.user_id == user_id and not n.is_read:
                self.by_id[n.notification_id] = dataclasses.replace(n, is_read=True)
                changed += 1
        return changed

    def delete(self, user_id, notification_id) -> bool:
        n = self.by_id.get(int(notification_id))
        if not n or n.user_id != user_id:
            return False
        del self.by_id[n.notification_id]
        return True


class InMemoryLeave:
    def __init__(self, items=()):
        self.items = list(items)

    def list_for_user(self, user_id):
        return [r for r in self.items if r.user_id == user_id]


def make_profile(user_id: int, name: str, role: Role = Role.EMPLOYEE, *, password: str = "secret123", is_active=True):
    return UserProfile(
        user_id=user_id,
        employee_id=f"EMP{user_id:03d}",
        full_name=name,
        email=f"{name.split()[0].lower()}@example.com",
        password_hash=generate_password_hash(password),
        role=role,
        is_active=is_active,
    )


def make_record(
    record_id: int,
    user_id: int,
    work_date: date,
    check_in: Optional[time] = None,
    check_out: Optional[time] = None,
    status: Optional[AttendanceStatus] = AttendanceStatus.PRESENT,
) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=record_id,
        user_id=user_id,
        work_date=work_date,
        check_in_time=datetime.combine(work_date, check_in) if check_in else None,
        check_out_time=datetime.combine(work_date, check_out) if check_out else None,
        status=status,
    )


@pytest.fixture
def fixed_now() -> datetime:
    # a Tuesday
    return datetime(2026, 3, 10, 9, 30)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            make_profile(1, "Alice Admin", Role.ADMIN),
            make_profile(2, "Mona Manager", Role.MANAGER),
            make_profile(3, "Eve Employee"),
        ]
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def qr_repo() -> InMemoryQRConfigs:
    return InMemoryQRConfigs(
        QRAttendanceConfig(
            config_id=1,
            organization_name="Demo Organization",
            qr_code_prefix="ATT",
            work_start_time=time(9, 0),
            work_end_time=time(17, 0),
            access_pin_hash=generate_password_hash(ACCESS_PIN),
        )
    )


@pytest.fixture
def notifications_repo() -> InMemoryNotifications:
    return InMemoryNotifications()


@pytest.fixture
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
def container(users_repo, attendance_repo, qr_repo, notifications_repo, feed):
    return wire_container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        qr_config_repo=qr_repo,
        notifications_repo=notifications_repo,
        leave_repo=InMemoryLeave(),
        qr_secret=QR_SECRET,
        regular_rate=Decimal("18.50"),
        overtime_rate=Decimal("27.75"),
        nominal_rate=Decimal("18.50"),
        feed=feed,
    )
