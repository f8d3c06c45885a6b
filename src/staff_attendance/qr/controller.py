from __future__ import annotations

import io
from datetime import date

from flask import Flask, flash, redirect, render_template, request, send_file, session, url_for

from ..common.auth import login_required, qr_access_required
from ..core.exceptions import DomainError
from ..container import Container


def _safe_next(target: str) -> str:
    # only local paths, never another host
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return url_for("qr_sessions")


def register(app: Flask, container: Container) -> None:
    @app.route("/qr-sessions/pin", methods=["GET", "POST"], endpoint="qr_pin")
    @login_required
    def qr_pin():
        next_url = _safe_next(request.values.get("next", ""))
        if session.get("qr_authenticated"):
            return redirect(next_url)

        if request.method == "POST":
            try:
                ok = container.qr_code_service.verify_access_pin(request.form.get("pin", "").strip())
            except Exception:
                app.logger.exception("PIN verification failed")
                flash("Failed to verify PIN", "danger")
                return render_template("qr_pin.html", next_url=next_url)

            if ok:
                session["qr_authenticated"] = True
                flash("Access granted", "success")
                return redirect(next_url)
            flash("Invalid PIN. Please try again.", "warning")

        return render_template("qr_pin.html", next_url=next_url)

    @app.route("/qr-sessions/lock", methods=["POST"], endpoint="qr_lock")
    @login_required
    def qr_lock():
        session.pop("qr_authenticated", None)
        return redirect(url_for("dashboard"))

    @app.route("/qr-sessions", endpoint="qr_sessions")
    @login_required
    @qr_access_required
    def qr_sessions():
        today = date.today()
        daily_code = None
        config = None
        try:
            config = container.qr_config_service.find_config()
            daily_code = container.qr_code_service.get_daily_code(today)
        except Exception:
            app.logger.exception("Failed to generate daily QR code")
            flash("Failed to generate daily QR code", "danger")

        return render_template(
            "qr_sessions.html",
            config=config,
            daily_code=daily_code,
            today=today,
            active_page="qr_sessions",
        )

    @app.route("/qr-sessions/qr.png", endpoint="qr_png")
    @login_required
    @qr_access_required
    def qr_png():
        today = date.today()
        try:
            png = container.qr_code_service.render_png(container.qr_code_service.get_daily_code(today))
        except Exception:
            app.logger.exception("Failed to render QR image")
            return "Failed to render QR image", 500

        return send_file(
            io.BytesIO(png),
            mimetype="image/png",
            as_attachment=request.args.get("download") == "1",
            download_name=f"attendance-qr-{today.isoformat()}.png",
        )

    @app.route("/qr-sessions/config", methods=["POST"], endpoint="qr_config_update")
    @login_required
    @qr_access_required
    def qr_config_update():
        try:
            container.qr_config_service.update_config(request.form)
            flash("QR configuration updated successfully", "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Failed to update QR configuration")
            flash("Failed to update configuration", "danger")
        return redirect(url_for("qr_sessions"))

    @app.route("/qr-sessions/location", methods=["POST"], endpoint="qr_capture_location")
    @login_required
    @qr_access_required
    def qr_capture_location():
        try:
            container.qr_config_service.capture_location(
                latitude=request.form.get("latitude", ""),
                longitude=request.form.get("longitude", ""),
            )
            flash("Location updated to your current position", "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Failed to update QR location")
            flash("Failed to update location", "danger")
        return redirect(url_for("qr_sessions"))
