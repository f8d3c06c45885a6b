from __future__ import annotations

from datetime import datetime

from flask import Flask, flash, jsonify, render_template

from ..common.auth import login_required
from ..common.http import json_failure
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="dashboard")
    @login_required
    def dashboard():
        now = datetime.now()
        try:
            stats = container.dashboard_service.build(now.date(), now)
        except Exception:
            app.logger.exception("Failed to build dashboard stats")
            flash("Failed to load dashboard data", "danger")
            stats = None
        return render_template("dashboard.html", stats=stats, active_page="dashboard")

    @app.route("/api/dashboard/stats", endpoint="api_dashboard_stats")
    @login_required
    def api_dashboard_stats():
        now = datetime.now()
        try:
            stats = container.dashboard_service.build(now.date(), now)
        except Exception:
            app.logger.exception("Failed to build dashboard stats")
            return json_failure("Failed to load dashboard data")
        return jsonify({"success": True, "data": stats.to_dict()}), 200
