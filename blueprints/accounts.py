"""Registration, login, profiles and people directories."""

from __future__ import annotations

from flask import Blueprint

from audit import log_event
from credit_store import CreditLedger
from database import get_store
from db_stores import UserStore
from errors import ConflictError, NotFoundError, ValidationError
from extensions import limiter
from helpers import dicts, request_data, require_fields, success
from models import USER_TYPES
from uploads import save_single

bp = Blueprint("accounts", __name__)


def _string(data: dict, field: str) -> str:
    value = data.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


@bp.route("/api/register", methods=["POST"])
@limiter.limit("20 per hour")
def api_register():
    data = request_data()
    require_fields(data, "type", "email", "password", "name")
    user_type = data["type"]
    if user_type not in USER_TYPES:
        raise ValidationError(f"Unknown user type: {user_type}")
    if user_type == "student":
        require_fields(data, "department")

    email = _string(data, "email")
    if not isinstance(data["password"], str):
        raise ValidationError("password must be a string")
    parent_email = _string(data, "parent_email")
    parent_password = data.get("parent_password")
    if user_type == "student" and parent_email and parent_email == email:
        raise ValidationError("Parent email must differ from the student email")

    # Checks and both creates share one lock; the photo is saved last
    with get_store().lock:
        if UserStore.exists(email):
            raise ConflictError("User already exists")
        if user_type == "student" and parent_email and UserStore.exists(parent_email):
            raise ConflictError("Parent account already exists")

        photo = save_single("photo")
        user = UserStore.create(
            user_type,
            email,
            data["password"],
            data["name"],
            data.get("department", ""),
            roll_number=data.get("roll_number") or None,
            subject=data.get("subject"),
            father_name=data.get("father_name"),
            student_email=data.get("student_email"),
            photo=photo["url"] if photo else None,
        )

        if user.is_student:
            CreditLedger().ensure(user.email)
            if parent_email and parent_password:
                UserStore.create(
                    "parent",
                    parent_email,
                    parent_password,
                    f"{user.father_name or user.name} (Parent)",
                    student_email=user.email,
                )
                log_event("register", parent_email, f"type=parent student={user.email}")

    log_event("register", user.email, f"type={user.type}")
    return success("Registration successful", user=user.to_dict())


@bp.route("/api/login", methods=["POST"])
@limiter.limit("10 per minute")
def api_login():
    data = request_data()
    require_fields(data, "email", "password")
    email = _string(data, "email")
    if not isinstance(data["password"], str):
        raise ValidationError("password must be a string")
    user = UserStore.authenticate(email, data["password"])
    if user is None:
        log_event("login_failed", email)
        raise ValidationError("Invalid credentials")
    log_event("login_success", email)
    return success(user=user.to_dict())


@bp.route("/api/profile/<email>")
def api_profile(email):
    user = UserStore.get_by_email(email)
    if user is None:
        raise NotFoundError("User not found")
    return success(user=user.to_dict())


@bp.route("/api/students/<department>")
def api_students(department):
    return success(students=dicts(UserStore.students(department)))


@bp.route("/api/teachers/<department>")
def api_teachers(department):
    return success(teachers=dicts(UserStore.teachers(department)))


@bp.route("/api/parent-student/<parent_email>")
def api_parent_student(parent_email):
    student = UserStore.linked_student(parent_email)
    return success(student=student.to_dict())
