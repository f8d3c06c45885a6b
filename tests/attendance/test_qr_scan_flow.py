from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from staff_attendance.core.enums import AttendanceStatus, ScanAction
from staff_attendance.core.exceptions import InvalidQRCodeError, NotFoundError, ValidationError


def _code(container, now):
    return container.qr_code_service.get_daily_code(now.date())


def test_first_scan_checks_in_as_present(container, attendance_repo, fixed_now):
    result = container.attendance_service.process_qr_scan(3, _code(container, fixed_now), now=fixed_now)

    assert result.action == ScanAction.CHECK_IN
    assert result.record.check_in_time == fixed_now
    assert result.record.check_out_time is None
    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.qr_code == _code(container, fixed_now)


def test_second_scan_checks_out_open_record(container, attendance_repo, fixed_now):
    code = _code(container, fixed_now)
    container.attendance_service.process_qr_scan(3, code, now=fixed_now)

    later = fixed_now + timedelta(hours=8)
    result = container.attendance_service.process_qr_scan(3, code, now=later)

    assert result.action == ScanAction.CHECK_OUT
    assert result.record.check_in_time == fixed_now
    assert result.record.check_out_time == later
    assert len(attendance_repo.by_id) == 1


def test_scan_after_checkout_upserts_same_day_row(container, attendance_repo, fixed_now):
    code = _code(container, fixed_now)
    service = container.attendance_service
    service.process_qr_scan(3, code, now=fixed_now, latitude="40.7128", longitude="-74.006")
    checked_out = fixed_now + timedelta(hours=4)
    service.process_qr_scan(3, code, now=checked_out)

    third = service.process_qr_scan(3, code, now=fixed_now + timedelta(hours=5))

    assert third.action == ScanAction.CHECK_IN
    assert third.record.check_in_time == fixed_now + timedelta(hours=5)
    # unsupplied columns keep their stored values
    assert third.record.check_out_time == checked_out
    assert third.record.location_lat == pytest.approx(40.7128)
    assert len([r for r in attendance_repo.by_id.values() if r.user_id == 3]) == 1


@pytest.mark.parametrize("code", ["", "   ", None])
def test_empty_code_is_rejected(container, attendance_repo, fixed_now, code):
    with pytest.raises(ValidationError):
        container.attendance_service.process_qr_scan(3, code, now=fixed_now)
    assert attendance_repo.writes == 0


def test_invalid_code_never_writes(container, attendance_repo, notifications_repo, fixed_now):
    with pytest.raises(InvalidQRCodeError):
        container.attendance_service.process_qr_scan(3, "ATT-20260310-deadbeef00", now=fixed_now)

    assert attendance_repo.writes == 0
    assert attendance_repo.by_id == {}
    assert notifications_repo.by_id == {}


def test_yesterdays_code_is_expired(container, attendance_repo, fixed_now):
    yesterday = _code(container, fixed_now - timedelta(days=1))

    with pytest.raises(InvalidQRCodeError):
        container.attendance_service.process_qr_scan(3, yesterday, now=fixed_now)
    assert attendance_repo.writes == 0


def test_location_is_stored_on_check_in(container, fixed_now):
    result = container.attendance_service.process_qr_scan(
        3, _code(container, fixed_now), now=fixed_now, latitude="40.7128", longitude="-74.006"
    )

    assert result.record.location_lat == pytest.approx(40.7128)
    assert result.record.location_lng == pytest.approx(-74.006)


def test_out_of_range_location_is_rejected_before_write(container, attendance_repo, fixed_now):
    with pytest.raises(ValidationError):
        container.attendance_service.process_qr_scan(
            3, _code(container, fixed_now), now=fixed_now, latitude="91", longitude="0"
        )
    assert attendance_repo.writes == 0


def test_successful_scan_creates_notification(container, notifications_repo, feed, fixed_now):
    q = feed.subscribe(3)

    container.attendance_service.process_qr_scan(3, _code(container, fixed_now), now=fixed_now)

    (note,) = notifications_repo.list_for_user(3)
    assert note.title == "Checked in"
    assert q.get_nowait() == {"table": "notifications", "event": "INSERT", "id": note.notification_id}


def test_failed_write_propagates_once(container, attendance_repo, fixed_now, monkeypatch):
    calls = []

    def broken(**kwargs):
        calls.append(kwargs)
        raise RuntimeError("connection lost")

    monkeypatch.setattr(attendance_repo, "upsert_checkin", broken)

    with pytest.raises(RuntimeError):
        container.attendance_service.process_qr_scan(3, _code(container, fixed_now), now=fixed_now)
    assert len(calls) == 1


def test_history_is_newest_first_and_limited(container, fixed_now):
    service = container.attendance_service
    for offset in range(12):
        moment = fixed_now - timedelta(days=offset)
        service.process_qr_scan(3, _code(container, moment), now=moment)

    history = service.get_history(3)

    assert len(history) == 10
    assert history[0].work_date == fixed_now.date()
    assert [r.work_date for r in history] == sorted((r.work_date for r in history), reverse=True)


def test_manager_edits_status_and_times(container, fixed_now):
    service = container.attendance_service
    record = service.process_qr_scan(3, _code(container, fixed_now), now=fixed_now).record

    updated = service.update_record_field(record.record_id, "status", "late")
    assert updated.status == AttendanceStatus.LATE

    updated = service.update_record_field(record.record_id, "check_out_time", "17:45")
    assert updated.check_out_time == datetime(2026, 3, 10, 17, 45)


@pytest.mark.parametrize(
    "field, value",
    [
        ("status", "on_holiday"),
        ("check_out_time", "25:99"),
        ("check_out_time", "08:00"),
        ("location_lat", "1"),
    ],
)
def test_manager_edit_validation(container, fixed_now, field, value):
    service = container.attendance_service
    record = service.process_qr_scan(3, _code(container, fixed_now), now=fixed_now).record

    with pytest.raises(ValidationError):
        service.update_record_field(record.record_id, field, value)


def test_delete_missing_record(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.delete_record(999)
