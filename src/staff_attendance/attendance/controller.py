from __future__ import annotations

from datetime import datetime, timedelta

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.auth import is_manager, login_required, manager_required
from ..common.http import json_error, json_failure
from ..core.exceptions import DomainError
from ..container import Container
from ..qr.scanner import decode_qr_image
from .model import AttendanceRecord


def _record_json(record: AttendanceRecord) -> dict:
    return {
        "id": record.record_id,
        "date": record.work_date.isoformat(),
        "check_in_time": record.check_in_time.isoformat() if record.check_in_time else None,
        "check_out_time": record.check_out_time.isoformat() if record.check_out_time else None,
        "status": record.status.value if record.status else None,
    }


def register(app: Flask, container: Container) -> None:
    def _scan_json(code: str):
        user_id = int(session["user_id"])
        try:
            result = container.attendance_service.process_qr_scan(
                user_id,
                code,
                now=datetime.now(),
                latitude=request.form.get("latitude") or (request.get_json(silent=True) or {}).get("latitude"),
                longitude=request.form.get("longitude") or (request.get_json(silent=True) or {}).get("longitude"),
            )
        except DomainError as e:
            return json_error(e)
        except Exception:
            app.logger.exception("QR scan failed for user %s", user_id)
            return json_failure("An unexpected error occurred")

        return jsonify(
            {
                "success": True,
                "action": result.action.value,
                "message": result.message,
                "record": _record_json(result.record),
            }
        ), 200

    @app.route("/attendance", endpoint="attendance")
    @login_required
    def attendance():
        user_id = int(session["user_id"])
        today = datetime.now().date()
        try:
            today_record = container.attendance_service.get_today_record(user_id, today)
            history = container.attendance_service.get_history(user_id)
            team_records, names = [], {}
            if is_manager():
                team_records = container.attendance_service.list_team(
                    start_date=today - timedelta(days=6), end_date=today
                )
                names = {p.user_id: p.full_name for p in container.users_repo.list_all()}
        except Exception:
            app.logger.exception("Failed to fetch attendance records for %s", user_id)
            flash("Failed to fetch attendance records", "danger")
            today_record, history, team_records, names = None, [], [], {}

        return render_template(
            "attendance.html",
            today_record=today_record,
            history=history,
            team_records=team_records,
            names=names,
            active_page="attendance",
        )

    @app.route("/attendance/scan", methods=["POST"], endpoint="attendance_scan")
    @login_required
    def attendance_scan():
        try:
            result = container.attendance_service.process_qr_scan(
                int(session["user_id"]),
                request.form.get("qr_code", ""),
                now=datetime.now(),
                latitude=request.form.get("latitude"),
                longitude=request.form.get("longitude"),
            )
            flash(result.message, "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("QR scan failed for user %s", session.get("user_id"))
            flash("An unexpected error occurred", "danger")
        return redirect(url_for("attendance"))

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    @login_required
    def api_attendance_scan():
        data = request.get_json(silent=True) or {}
        return _scan_json(str(data.get("qr_code") or request.form.get("qr_code", "")))

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="api_attendance_scan_image")
    @login_required
    def api_attendance_scan_image():
        upload = request.files.get("image")
        if not upload:
            return json_failure("No image uploaded", 400)
        try:
            code = decode_qr_image(upload.stream)
        except DomainError as e:
            return json_error(e)
        except Exception:
            app.logger.exception("Failed to decode uploaded QR image")
            return json_failure("Could not read the uploaded image")
        return _scan_json(code)

    @app.route("/attendance/<int:record_id>/edit", methods=["POST"], endpoint="attendance_edit")
    @manager_required
    def attendance_edit(record_id: int):
        try:
            container.attendance_service.update_record_field(
                record_id,
                request.form.get("field", ""),
                request.form.get("value", ""),
            )
            flash("Attendance record updated successfully", "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Failed to update attendance record %s", record_id)
            flash("Failed to update attendance record", "danger")
        return redirect(request.referrer or url_for("attendance"))

    @app.route("/attendance/<int:record_id>/delete", methods=["POST"], endpoint="attendance_delete")
    @manager_required
    def attendance_delete(record_id: int):
        try:
            container.attendance_service.delete_record(record_id)
            flash("Attendance record deleted successfully", "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Failed to delete attendance record %s", record_id)
            flash("Failed to delete attendance record", "danger")
        return redirect(request.referrer or url_for("attendance"))
