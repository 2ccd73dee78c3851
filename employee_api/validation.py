"""Payload and entity-level validation for employee records."""

import re
from datetime import date, datetime
from typing import Any, Mapping, Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from employee_api.config import settings
from employee_api.models import Employee
from employee_api.repository import EmployeeRepository

CREATE = "create"
EDIT = "edit"

BIRTHDATE_FORMAT = "%Y-%m-%d"
PESEL_PATTERN = re.compile(r"^[0-9]{11}$")
GENDER_NAME_MAX_LENGTH = 255

_email_adapter = TypeAdapter(EmailStr)


def parse_birthdate(value: Any) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` string, returning None when it is not one."""
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value, BIRTHDATE_FORMAT).date()
    except ValueError:
        return None


def validate_employee_data(data: Mapping[str, Any], mode: str) -> dict[str, str]:
    """Check that the submitted fields are present and well-formed.

    ``mode`` is ``"create"`` or ``"edit"``; only create requires the password
    and its confirmation. Returns a map of field name to message, empty when
    the payload passes.
    """
    errors = {}

    if not data.get("firstName"):
        errors["firstName"] = "First name is required."

    if not data.get("lastName"):
        errors["lastName"] = "Last name is required."

    if not data.get("email"):
        errors["email"] = "Email is required."

    if not data.get("birthdate"):
        errors["birthdate"] = "Birthdate is required."
    elif parse_birthdate(data["birthdate"]) is None:
        errors["birthdate"] = "Invalid birthdate format. Expected format: Y-m-d."

    gender = data.get("gender")
    if not gender:
        errors["gender"] = "Gender is required."
    elif not isinstance(gender, str):
        errors["gender"] = "Gender must be a string."
    elif len(gender) > GENDER_NAME_MAX_LENGTH:
        errors["gender"] = f"Gender cannot be longer than {GENDER_NAME_MAX_LENGTH} characters."

    if mode == CREATE:
        if not data.get("password"):
            errors["password"] = "Password is required."
        if not data.get("passwordConfirmation"):
            errors["passwordConfirmation"] = "Password confirmation is required."
        elif data.get("password") != data["passwordConfirmation"]:
            errors["passwordConfirmation"] = "Password confirmation does not match."

    return errors


def check_password(password: Any, confirmation: Any = None) -> dict[str, str]:
    """Password rules shared by create and edit."""
    if confirmation is not None and password != confirmation:
        return {"passwordConfirmation": "Password confirmation does not match."}
    if not isinstance(password, str) or len(password) < settings.PASSWORD_MIN_LENGTH:
        return {
            "password": f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long."
        }
    return {}


def _check_text(errors: dict, field: str, value: Any, label: str, max_length: int) -> None:
    if not isinstance(value, str) or not value.strip():
        errors[field] = f"{label} should not be blank."
    elif len(value) > max_length:
        errors[field] = f"{label} cannot be longer than {max_length} characters."


def validate_employee(
    employee: Employee,
    group: str,
    repository: EmployeeRepository,
    plain_password: Optional[str] = None,
) -> dict[str, str]:
    """Entity-level checks run once the payload has been applied.

    ``group`` is the validation group (``create`` or ``edit``). In the create
    group a password must be present; ``plain_password`` is the plaintext
    being set, if any, and is checked for minimum length. Uniqueness of email
    and PESEL is checked against every other employee.
    """
    errors = {}

    _check_text(errors, "firstName", employee.first_name, "First name", 100)
    _check_text(errors, "lastName", employee.last_name, "Last name", 100)

    if not employee.email:
        errors["email"] = "Email should not be blank."
    else:
        try:
            _email_adapter.validate_python(employee.email)
        except PydanticValidationError:
            errors["email"] = "This value is not a valid email address."
        else:
            if len(employee.email) > 255:
                errors["email"] = "Email cannot be longer than 255 characters."
            else:
                other = repository.find_by_email(employee.email)
                if other is not None and other.id != employee.id:
                    errors["email"] = "This email is already used by another employee."

    if employee.birthdate is None:
        errors["birthdate"] = "Birthdate should not be blank."
    elif employee.birthdate > date.today():
        errors["birthdate"] = "Birthdate cannot be in the future."

    if employee.gender is not None:
        _check_text(errors, "gender", employee.gender.name, "Gender", GENDER_NAME_MAX_LENGTH)
    elif employee.gender_id is None:
        errors["gender"] = "Gender should not be blank."

    if not employee.pesel:
        errors["pesel"] = "PESEL should not be blank."
    elif not PESEL_PATTERN.match(employee.pesel):
        errors["pesel"] = "PESEL must consist of 11 digits."
    else:
        other = repository.find_by_pesel(employee.pesel)
        if other is not None and other.id != employee.id:
            errors["pesel"] = "This PESEL is already used by another employee."

    if plain_password is not None:
        errors.update(check_password(plain_password))
    elif group == CREATE or not employee.password:
        errors["password"] = "Password should not be blank."

    return errors
