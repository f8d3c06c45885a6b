from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .notifications.feed import ChangeFeed
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payroll.service import PayrollService
from .qr.mysql_qr_repository import MySQLQRConfigRepository
from .qr.repository import QRConfigRepository
from .qr.service import QRCodeService, QRConfigService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, EmployeeService, ProfileService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    qr_config_repo: QRConfigRepository
    notifications_repo: NotificationRepository
    leave_repo: LeaveRepository

    auth_service: AuthService
    profile_service: ProfileService
    employee_service: EmployeeService
    qr_code_service: QRCodeService
    qr_config_service: QRConfigService
    notification_service: NotificationService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    dashboard_service: DashboardService
    report_service: ReportService

    default_regular_rate: Decimal
    default_overtime_rate: Decimal


def wire_container(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    qr_config_repo: QRConfigRepository,
    notifications_repo: NotificationRepository,
    leave_repo: LeaveRepository,
    qr_secret: str,
    regular_rate: Decimal,
    overtime_rate: Decimal,
    nominal_rate: Decimal,
    feed: ChangeFeed | None = None,
) -> Container:
    """Build services on top of any repository implementation."""
    qr_code_service = QRCodeService(qr_config_repo, secret=qr_secret)
    notification_service = NotificationService(notifications_repo, feed or ChangeFeed())

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        qr_config_repo=qr_config_repo,
        notifications_repo=notifications_repo,
        leave_repo=leave_repo,
        auth_service=AuthService(users_repo),
        profile_service=ProfileService(users_repo),
        employee_service=EmployeeService(users_repo),
        qr_code_service=qr_code_service,
        qr_config_service=QRConfigService(qr_config_repo),
        notification_service=notification_service,
        attendance_service=AttendanceService(attendance_repo, qr_code_service, notification_service),
        payroll_service=PayrollService(attendance_repo, users_repo),
        dashboard_service=DashboardService(attendance_repo, users_repo, nominal_rate=nominal_rate),
        report_service=ReportService(attendance_repo, users_repo),
        default_regular_rate=regular_rate,
        default_overtime_rate=overtime_rate,
    )


def build_container(
    *,
    db_config: dict,
    qr_secret: str,
    regular_rate: Decimal,
    overtime_rate: Decimal,
    nominal_rate: Decimal,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        qr_config_repo=MySQLQRConfigRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        qr_secret=qr_secret,
        regular_rate=regular_rate,
        overtime_rate=overtime_rate,
        nominal_rate=nominal_rate,
    )
