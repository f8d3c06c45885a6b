from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.auth import login_required, manager_required
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/auth", methods=["GET", "POST"], endpoint="auth")
    def auth():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        mode = request.form.get("mode", request.args.get("mode", "signin"))
        if request.method == "POST":
            try:
                if mode == "signup":
                    container.auth_service.sign_up(
                        email=request.form.get("email", ""),
                        password=request.form.get("password", ""),
                        full_name=request.form.get("full_name", ""),
                        employee_id=request.form.get("employee_id", ""),
                    )
                    flash("Account created, you can sign in now", "success")
                    return redirect(url_for("auth"))

                s_user = container.auth_service.sign_in(
                    request.form.get("email", ""),
                    request.form.get("password", ""),
                )
                session.clear()
                session["user_id"] = s_user.user_id
                session["name"] = s_user.full_name
                session["email"] = s_user.email
                session["role"] = s_user.role.value
                flash(f"Welcome back, {s_user.full_name}!", "success")
                return redirect(url_for("dashboard"))
            except DomainError as e:
                flash(str(e), "warning")
            except Exception:
                app.logger.exception("Authentication failed")
                flash("An unexpected error occurred", "danger")

        return render_template("auth.html", mode=mode)

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        session.clear()
        flash("You have been signed out", "info")
        return redirect(url_for("auth"))

    @app.route("/employees", endpoint="employees")
    @login_required
    def employees():
        search = request.args.get("q", "")
        try:
            items = container.employee_service.list_employees(search)
        except Exception:
            app.logger.exception("Failed to fetch employees")
            flash("Failed to fetch employees", "danger")
            items = []
        return render_template("employees.html", employees=items, search=search, active_page="employees")

    @app.route("/employees/<int:user_id>/active", methods=["POST"], endpoint="employee_set_active")
    @manager_required
    def employee_set_active(user_id: int):
        is_active = request.form.get("is_active") == "1"
        try:
            container.employee_service.set_active(
                current_role=Role(session["role"]),
                user_id=user_id,
                is_active=is_active,
            )
            flash("Employee activated" if is_active else "Employee deactivated", "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Failed to update employee %s", user_id)
            flash("Failed to update employee", "danger")
        return redirect(url_for("employees"))

    @app.route("/employees/<int:user_id>/delete", methods=["POST"], endpoint="employee_delete")
    @manager_required
    def employee_delete(user_id: int):
        try:
            container.employee_service.delete_employee(
                current_role=Role(session["role"]),
                current_user_id=int(session["user_id"]),
                user_id=user_id,
            )
            flash("Employee deleted", "success")
        except DomainError as e:
            flash(str(e), "warning")
        except Exception:
            app.logger.exception("Failed to delete employee %s", user_id)
            flash("Failed to delete employee", "danger")
        return redirect(url_for("employees"))

    @app.route("/settings", methods=["GET", "POST"], endpoint="settings")
    @login_required
    def settings():
        user_id = int(session["user_id"])

        if request.method == "POST":
            try:
                container.profile_service.update_profile(
                    user_id,
                    full_name=request.form.get("full_name", ""),
                    phone=request.form.get("phone", ""),
                    department=request.form.get("department", ""),
                    position=request.form.get("position", ""),
                )
                session["name"] = request.form.get("full_name", "").strip()
                flash("Profile updated successfully", "success")
                return redirect(url_for("settings"))
            except DomainError as e:
                flash(str(e), "warning")
            except Exception:
                app.logger.exception("Failed to update profile %s", user_id)
                flash("Failed to update profile", "danger")

        try:
            profile = container.profile_service.get_profile(user_id)
            leave_requests = container.leave_repo.list_for_user(user_id)
        except DomainError as e:
            flash(str(e), "warning")
            return redirect(url_for("logout"))
        except Exception:
            app.logger.exception("Failed to load settings for %s", user_id)
            flash("Failed to load profile", "danger")
            return redirect(url_for("dashboard"))

        return render_template(
            "settings.html",
            profile=profile,
            leave_requests=leave_requests,
            active_page="settings",
        )

    @app.route("/settings/delete", methods=["POST"], endpoint="delete_account")
    @login_required
    def delete_account():
        try:
            container.profile_service.delete_account(int(session["user_id"]))
        except DomainError as e:
            flash(str(e), "warning")
            return redirect(url_for("settings"))
        except Exception:
            app.logger.exception("Failed to delete account %s", session.get("user_id"))
            flash("Failed to delete account", "danger")
            return redirect(url_for("settings"))

        session.clear()
        flash("Your account has been deleted", "info")
        return redirect(url_for("auth"))
