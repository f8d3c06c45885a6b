from __future__ import annotations

import dataclasses

import pytest

from staff_attendance.core.enums import Role
from staff_attendance.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from staff_attendance.users.service import AuthService, EmployeeService, ProfileService

from conftest import make_profile


def test_sign_in_is_case_insensitive(users_repo):
    user = AuthService(users_repo).sign_in("  EVE@Example.com ", "secret123")
    assert user.user_id == 3
    assert user.role == Role.EMPLOYEE


@pytest.mark.parametrize("email, password", [("eve@example.com", "wrong"), ("nobody@example.com", "secret123")])
def test_sign_in_failures_share_one_message(users_repo, email, password):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        AuthService(users_repo).sign_in(email, password)


def test_inactive_user_cannot_sign_in(users_repo):
    users_repo.set_active(3, is_active=False)
    with pytest.raises(AuthenticationError):
        AuthService(users_repo).sign_in("eve@example.com", "secret123")


def test_corrupted_hash_is_a_failed_sign_in(users_repo):
    users_repo.by_id[9] = dataclasses.replace(make_profile(9, "Odd Hash"), password_hash="plain")
    with pytest.raises(AuthenticationError):
        AuthService(users_repo).sign_in("odd@example.com", "plain")


def test_sign_up_then_sign_in(users_repo):
    auth = AuthService(users_repo)
    user_id = auth.sign_up(email="New@Example.com", password="hunter22", full_name="New Hire", employee_id="EMP100")

    created = users_repo.get_by_id(user_id)
    assert created.email == "new@example.com"
    assert created.role == Role.EMPLOYEE
    assert auth.sign_in("new@example.com", "hunter22").user_id == user_id


@pytest.mark.parametrize(
    "kwargs",
    [
        {"email": "", "password": "hunter22", "full_name": "X", "employee_id": "E1"},
        {"email": "x@example.com", "password": "short", "full_name": "X", "employee_id": "E1"},
        {"email": "not-an-email", "password": "hunter22", "full_name": "X", "employee_id": "E1"},
        {"email": "eve@example.com", "password": "hunter22", "full_name": "X", "employee_id": "E1"},
        {"email": "x@example.com", "password": "hunter22", "full_name": "X", "employee_id": "EMP003"},
        {"email": "x@example.com", "password": "hunter22", "full_name": " ", "employee_id": "E1"},
    ],
)
def test_sign_up_validation(users_repo, kwargs):
    with pytest.raises(ValidationError):
        AuthService(users_repo).sign_up(**kwargs)


def test_update_profile_blank_optionals_become_none(users_repo):
    service = ProfileService(users_repo)
    service.update_profile(3, full_name="Eve Updated", phone="  ", department="Bar", position="")

    profile = service.get_profile(3)
    assert profile.full_name == "Eve Updated"
    assert profile.phone is None
    assert profile.department == "Bar"
    assert profile.position is None


def test_update_profile_requires_name(users_repo):
    with pytest.raises(ValidationError):
        ProfileService(users_repo).update_profile(3, full_name="")


def test_delete_account(users_repo):
    service = ProfileService(users_repo)
    service.delete_account(3)
    with pytest.raises(NotFoundError):
        service.get_profile(3)


@pytest.mark.parametrize("search, expected", [("", 3), ("mona", 1), ("emp00", 3), ("ADMIN", 1), ("zzz", 0)])
def test_employee_search(users_repo, search, expected):
    assert len(EmployeeService(users_repo).list_employees(search)) == expected


def test_employees_cannot_manage(users_repo):
    service = EmployeeService(users_repo)
    with pytest.raises(AuthorizationError):
        service.set_active(current_role=Role.EMPLOYEE, user_id=2, is_active=False)
    with pytest.raises(AuthorizationError):
        service.delete_employee(current_role=Role.EMPLOYEE, current_user_id=3, user_id=2)


def test_manager_deactivates_employee(users_repo):
    EmployeeService(users_repo).set_active(current_role=Role.MANAGER, user_id=3, is_active=False)
    assert users_repo.get_by_id(3).is_active is False


def test_admins_and_self_cannot_be_deleted(users_repo):
    service = EmployeeService(users_repo)
    with pytest.raises(ValidationError):
        service.delete_employee(current_role=Role.MANAGER, current_user_id=2, user_id=1)
    with pytest.raises(ValidationError):
        service.delete_employee(current_role=Role.MANAGER, current_user_id=2, user_id=2)

    service.delete_employee(current_role=Role.MANAGER, current_user_id=2, user_id=3)
    assert users_repo.get_by_id(3) is None
