from __future__ import annotations

import io
from datetime import date

from flask import Flask, flash, jsonify, redirect, render_template, send_file, url_for

from ..common.auth import login_required, manager_required
from ..common.http import json_failure
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/reports", endpoint="reports")
    @login_required
    def reports():
        try:
            report = container.report_service.build(date.today())
        except Exception:
            app.logger.exception("Failed to fetch report data")
            flash("Failed to fetch report data", "danger")
            report = None
        return render_template("reports.html", report=report, active_page="reports")

    @app.route("/api/reports/series", endpoint="api_reports_series")
    @login_required
    def api_reports_series():
        try:
            report = container.report_service.build(date.today())
        except Exception:
            app.logger.exception("Failed to fetch report data")
            return json_failure("Failed to fetch report data")
        return jsonify({"success": True, "data": report.to_dict()}), 200

    @app.route("/reports/export.xlsx", endpoint="reports_export")
    @manager_required
    def reports_export():
        today = date.today()
        try:
            report = container.report_service.build(today)
            data = container.report_service.to_xlsx(report)
        except Exception:
            app.logger.exception("Failed to export report")
            flash("Failed to export report", "danger")
            return redirect(url_for("reports"))

        return send_file(
            io.BytesIO(data),
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name=f"attendance-report-{today.isoformat()}.xlsx",
        )
