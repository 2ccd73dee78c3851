"""Employee use cases: create, edit, get and list."""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from employee_api.config import settings
from employee_api.errors import NotFoundError, ValidationError
from employee_api.models import Employee, Gender
from employee_api.pesel import is_pesel_valid
from employee_api.repository import SORTABLE_FIELDS, EmployeeRepository
from employee_api.security import hash_password, verify_password
from employee_api.validation import (
    CREATE,
    EDIT,
    check_password,
    parse_birthdate,
    validate_employee,
    validate_employee_data,
)

logger = logging.getLogger("employee_api.services")

FILTER_FIELDS = ("firstName", "lastName", "email", "gender")


@dataclass
class Page:
    """One page of employees plus the metadata a client needs to paginate."""
    items: list[Employee]
    total: int
    current_page: int
    page_size: int


def parse_order_by(raw: Optional[str]) -> list[tuple[str, str]]:
    """Turn ``"lastName,-firstName"`` into ``[("lastName", "ASC"), ("firstName", "DESC")]``.

    Raises ValidationError for a field that cannot be sorted on.
    """
    order_by = []
    if not raw:
        return order_by
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        if item.startswith("-"):
            field, direction = item[1:].strip(), "DESC"
        else:
            field, direction = item, "ASC"
        if field not in SORTABLE_FIELDS:
            raise ValidationError({"orderBy": f"Cannot sort by unknown field '{field}'."})
        order_by.append((field, direction))
    return order_by


def _positive_int(value: Any, default: int, maximum: int) -> int:
    """Numeric values are clamped to ``1..maximum``; anything else gives ``default``."""
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        try:
            number = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return default
    return min(max(1, number), maximum)


def _integrity_errors(exc: IntegrityError) -> dict[str, str]:
    text = str(exc.orig).lower()
    if "pesel" in text:
        return {"pesel": "This PESEL is already used by another employee."}
    if "email" in text:
        return {"email": "This email is already used by another employee."}
    return {"message": "The employee conflicts with an existing record."}


class EmployeeService:
    """Orchestrates validation, gender resolution and persistence."""

    def __init__(self, repository: EmployeeRepository):
        self.repository = repository

    def _fail(self, errors: dict[str, str]):
        self.repository.rollback()
        logger.debug("Validation failed: %s", errors)
        raise ValidationError(errors)

    def _apply(self, employee: Employee, data: Mapping[str, Any], gender: Gender) -> None:
        employee.first_name = data["firstName"]
        employee.last_name = data["lastName"]
        employee.email = data["email"]
        employee.birthdate = parse_birthdate(data["birthdate"])
        employee.pesel = data.get("pesel")
        employee.gender = gender

    def _commit(self) -> None:
        try:
            self.repository.commit()
        except IntegrityError as exc:
            self.repository.rollback()
            logger.warning("Integrity conflict on commit: %s", exc.orig)
            raise ValidationError(_integrity_errors(exc))

    def create(self, data: Mapping[str, Any]) -> Employee:
        errors = validate_employee_data(data, CREATE)
        if errors:
            self._fail(errors)

        if not is_pesel_valid(data.get("pesel")):
            self._fail({"pesel": "Invalid PESEL."})

        password = data["password"]
        errors = check_password(password, data["passwordConfirmation"])
        if errors:
            self._fail(errors)

        gender = self.repository.get_or_create_gender(data["gender"])
        employee = Employee()
        self._apply(employee, data, gender)
        employee.password = hash_password(password)

        errors = validate_employee(employee, CREATE, self.repository, plain_password=password)
        if errors:
            self._fail(errors)

        self.repository.add(employee)
        self._commit()
        logger.info("Created employee id=%s", employee.id)
        return employee

    def edit(self, employee_id: int, data: Mapping[str, Any]) -> Employee:
        employee = self.get(employee_id)

        errors = validate_employee_data(data, EDIT)
        if errors:
            self._fail(errors)

        if not is_pesel_valid(data.get("pesel")):
            self._fail({"pesel": "Invalid PESEL."})

        password = data.get("password")
        if password is not None:
            errors = check_password(password, data.get("passwordConfirmation"))
            if errors:
                self._fail(errors)

        gender = self.repository.get_or_create_gender(data["gender"])
        self._apply(employee, data, gender)
        # Keep the stored hash when the submitted password already matches it.
        if password is not None and not verify_password(password, employee.password):
            employee.password = hash_password(password)

        errors = validate_employee(employee, EDIT, self.repository, plain_password=password)
        if errors:
            self._fail(errors)

        self._commit()
        logger.info("Updated employee id=%s", employee.id)
        return employee

    def get(self, employee_id: int) -> Employee:
        employee = self.repository.get(employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")
        return employee

    def list_employees(self, filters: Mapping[str, Any]) -> Page:
        """Search employees.

        ``filters`` holds the raw query parameters: the equality filters in
        ``FILTER_FIELDS`` plus ``orderBy``, ``pageSize`` and ``currentPage``.
        """
        criteria = {field: filters[field] for field in FILTER_FIELDS if filters.get(field)}
        order_by = parse_order_by(filters.get("orderBy"))
        page_size = _positive_int(
            filters.get("pageSize"), settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE
        )
        current_page = _positive_int(filters.get("currentPage"), 1, settings.MAX_PAGE_NUMBER)

        items, total = self.repository.search(criteria, order_by, page_size, current_page)
        return Page(items=items, total=total, current_page=current_page, page_size=page_size)

    def list_genders(self) -> list[tuple[Gender, int]]:
        """Every gender with the number of employees referencing it."""
        return [
            (gender, self.repository.count_by_gender_id(gender.id))
            for gender in self.repository.list_genders()
        ]
