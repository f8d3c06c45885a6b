from __future__ import annotations

from functools import wraps

from flask import flash, jsonify, redirect, render_template, request, session, url_for

from ..core.enums import Role

MANAGER_ROLES = (Role.ADMIN.value, Role.MANAGER.value)


def _wants_json() -> bool:
    return request.path.startswith("/api/")


def current_user() -> dict:
    return {
        "user_id": session.get("user_id"),
        "full_name": session.get("name"),
        "email": session.get("email"),
        "role": session.get("role"),
    }


def is_manager() -> bool:
    return session.get("role") in MANAGER_ROLES


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            if _wants_json():
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            flash("Please sign in to continue", "warning")
            return redirect(url_for("auth"))
        return view(*args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            if _wants_json():
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            return redirect(url_for("auth"))

        if not is_manager():
            if _wants_json():
                return jsonify({"success": False, "message": "You do not have permission for this action"}), 403
            return render_template("403.html", current_user=current_user()), 403

        return view(*args, **kwargs)

    return wrapper


def qr_access_required(view):
    """The QR sessions page sits behind the organization PIN."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("qr_authenticated"):
            return redirect(url_for("qr_pin", next=request.path))
        return view(*args, **kwargs)

    return wrapper
