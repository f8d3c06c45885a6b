from __future__ import annotations

from flask import Flask, flash, jsonify, redirect, render_template, request, session, stream_with_context, url_for

from ..common.auth import login_required
from ..common.http import json_error, json_failure
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    def _filter() -> str:
        value = request.args.get("filter", "all")
        return value if value in ("all", "unread", "read") else "all"

    @app.route("/notifications", endpoint="notifications")
    @login_required
    def notifications():
        user_id = int(session["user_id"])
        current = _filter()
        try:
            items = service.list(user_id, current)
            counts = service.counts(user_id)
        except Exception:
            app.logger.exception("Failed to fetch notifications for %s", user_id)
            flash("Failed to fetch notifications", "danger")
            items, counts = [], None
        return render_template(
            "notifications.html",
            notifications=items,
            counts=counts,
            current_filter=current,
            active_page="notifications",
        )

    @app.route("/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notification_read")
    @login_required
    def notification_read(notification_id: int):
        try:
            service.mark_read(int(session["user_id"]), notification_id)
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Failed to mark notification %s as read", notification_id)
            flash("Failed to update notification", "danger")
        return redirect(url_for("notifications", filter=_filter()))

    @app.route("/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @login_required
    def notifications_read_all():
        try:
            service.mark_all_read(int(session["user_id"]))
            flash("All notifications marked as read", "success")
        except Exception:
            app.logger.exception("Failed to mark all notifications as read")
            flash("Failed to update notifications", "danger")
        return redirect(url_for("notifications", filter=_filter()))

    @app.route("/notifications/<int:notification_id>/delete", methods=["POST"], endpoint="notification_delete")
    @login_required
    def notification_delete(notification_id: int):
        try:
            service.delete(int(session["user_id"]), notification_id)
            flash("Notification deleted", "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Failed to delete notification %s", notification_id)
            flash("Failed to delete notification", "danger")
        return redirect(url_for("notifications", filter=_filter()))

    @app.route("/api/notifications", endpoint="api_notifications")
    @login_required
    def api_notifications():
        user_id = int(session["user_id"])
        try:
            items = service.list(user_id, _filter())
            counts = service.counts(user_id)
        except DomainError as e:
            return json_error(e)
        except Exception:
            app.logger.exception("Failed to fetch notifications for %s", user_id)
            return json_failure("Failed to fetch notifications")
        return jsonify(
            {
                "success": True,
                "counts": {"total": counts.total, "unread": counts.unread, "read": counts.read},
                "data": [n.to_dict() for n in items],
            }
        ), 200

    @app.route("/api/notifications/stream", endpoint="api_notifications_stream")
    @login_required
    def api_notifications_stream():
        user_id = int(session["user_id"])
        q = service.feed.subscribe(user_id)
        return app.response_class(
            stream_with_context(service.feed.stream(user_id, q=q)),
            mimetype="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )
