from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import UserProfile
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after sign-in."""

    user_id: int
    full_name: str
    email: str
    role: Role


def _require_manager(current_role: Role) -> None:
    if current_role not in (Role.ADMIN, Role.MANAGER):
        raise AuthorizationError("You do not have permission for this action")


class AuthService:
    """Use cases: sign in and sign up."""

    def __init__(self, users: UserRepository):
        self._users = users

    def sign_in(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hash values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, email=user.email, role=user.role)

    def sign_up(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        employee_id: str,
        role: Role = Role.EMPLOYEE,
    ) -> int:
        email = require_non_empty(email, "Email").lower()
        full_name = require_non_empty(full_name, "Full name")
        employee_id = require_non_empty(employee_id, "Employee ID")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if "@" not in email:
            raise ValidationError("Email is not valid")
        if self._users.get_by_email(email):
            raise ValidationError("An account with this email already exists")
        if self._users.get_by_employee_id(employee_id):
            raise ValidationError("Employee ID is already in use")

        return self._users.create_user(
            employee_id=employee_id,
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )


class ProfileService:
    """Use cases: the signed-in user's own profile."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_profile(self, user_id: int) -> UserProfile:
        profile = self._users.get_by_id(int(user_id))
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    def update_profile(
        self,
        user_id: int,
        *,
        full_name: str,
        phone: str = "",
        department: str = "",
        position: str = "",
    ) -> None:
        full_name = require_non_empty(full_name, "Full name")
        ok = self._users.update_profile(
            int(user_id),
            full_name=full_name,
            phone=optional_text(phone),
            department=optional_text(department),
            position=optional_text(position),
        )
        if not ok:
            raise NotFoundError("Profile not found")

    def delete_account(self, user_id: int) -> None:
        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError("Profile not found")


class EmployeeService:
    """Use cases: employee directory (managers and admins mutate)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_employees(self, search: str = "") -> Sequence[UserProfile]:
        employees = self._users.list_all()
        q = (search or "").strip().lower()
        if not q:
            return list(employees)

        def matches(p: UserProfile) -> bool:
            haystack = [p.full_name, p.employee_id, p.position or "", p.department or "", p.role.value]
            return any(q in field.lower() for field in haystack)

        return [p for p in employees if matches(p)]

    def set_active(self, *, current_role: Role, user_id: int, is_active: bool) -> None:
        _require_manager(current_role)
        if not self._users.set_active(int(user_id), is_active=is_active):
            raise NotFoundError("Employee not found")

    def delete_employee(self, *, current_role: Role, current_user_id: int, user_id: int) -> None:
        _require_manager(current_role)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee not found")
        if user.role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")
        if user.user_id == int(current_user_id):
            raise ValidationError("Use Settings to delete your own account")

        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Failed to delete employee")
