from __future__ import annotations

from datetime import date

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.auth import manager_required
from ..common.datetime_utils import parse_month
from ..common.validators import parse_rate
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _params():
        try:
            month = parse_month(request.args.get("month"), default=date.today())
        except ValueError:
            flash("Month must be a valid YYYY-MM", "warning")
            month = date.today().replace(day=1)

        regular = parse_rate(request.args.get("regular_rate"), fallback=container.default_regular_rate)
        overtime = parse_rate(request.args.get("overtime_rate"), fallback=container.default_overtime_rate)
        return month, regular, overtime

    @app.route("/payroll", endpoint="payroll")
    @manager_required
    def payroll():
        month, regular, overtime = _params()
        try:
            report = container.payroll_service.build_month(month, regular_rate=regular, overtime_rate=overtime)
        except Exception:
            app.logger.exception("Failed to calculate payroll for %s", month)
            flash("Failed to fetch payroll data", "danger")
            report = None

        return render_template(
            "payroll.html",
            report=report,
            month=month,
            regular_rate=regular,
            overtime_rate=overtime,
            active_page="payroll",
        )

    @app.route("/payroll/export.csv", endpoint="payroll_export")
    @manager_required
    def payroll_export():
        month, regular, overtime = _params()
        try:
            report = container.payroll_service.build_month(month, regular_rate=regular, overtime_rate=overtime)
            data = container.payroll_service.to_csv(report)
        except Exception:
            app.logger.exception("Failed to export payroll for %s", month)
            flash("Failed to export payroll", "danger")
            return redirect(url_for("payroll", month=month.strftime("%Y-%m")))

        return app.response_class(
            data,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=payroll-{month:%Y-%m}.csv"},
        )
