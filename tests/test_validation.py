"""Tests for payload and entity-level validation."""

from datetime import date, timedelta

from employee_api.models import Employee, Gender
from employee_api.repository import EmployeeRepository
from employee_api.validation import (
    CREATE,
    EDIT,
    check_password,
    parse_birthdate,
    validate_employee,
    validate_employee_data,
)

from conftest import ADMIN_EMAIL, ADMIN_PESEL


def _payload(**overrides):
    data = {
        "firstName": "Jan",
        "lastName": "Kowalski",
        "email": "jan@company.com",
        "birthdate": "1990-01-01",
        "gender": "Male",
        "pesel": "90010100009",
        "password": "s3cretpassword",
        "passwordConfirmation": "s3cretpassword",
    }
    data.update(overrides)
    return data


class TestParseBirthdate:
    def test_valid(self):
        assert parse_birthdate("1990-02-28") == date(1990, 2, 28)

    def test_impossible_date(self):
        assert parse_birthdate("1990-02-30") is None

    def test_wrong_format(self):
        assert parse_birthdate("28.02.1990") is None

    def test_not_a_string(self):
        assert parse_birthdate(19900228) is None


class TestValidateEmployeeData:
    def test_complete_create_payload_is_valid(self):
        assert validate_employee_data(_payload(), CREATE) == {}

    def test_missing_first_name(self):
        data = _payload()
        del data["firstName"]
        errors = validate_employee_data(data, CREATE)
        assert errors == {"firstName": "First name is required."}

    def test_empty_values_count_as_missing(self):
        errors = validate_employee_data(
            _payload(lastName="", email=None, gender=""), CREATE
        )
        assert set(errors) == {"lastName", "email", "gender"}

    def test_bad_birthdate_format(self):
        errors = validate_employee_data(_payload(birthdate="01/01/1990"), CREATE)
        assert errors["birthdate"] == "Invalid birthdate format. Expected format: Y-m-d."

    def test_missing_birthdate(self):
        errors = validate_employee_data(_payload(birthdate=""), CREATE)
        assert errors["birthdate"] == "Birthdate is required."

    def test_create_requires_password_and_confirmation(self):
        data = _payload()
        del data["password"]
        del data["passwordConfirmation"]
        errors = validate_employee_data(data, CREATE)
        assert errors == {
            "password": "Password is required.",
            "passwordConfirmation": "Password confirmation is required.",
        }

    def test_confirmation_mismatch(self):
        errors = validate_employee_data(_payload(passwordConfirmation="different1"), CREATE)
        assert errors == {"passwordConfirmation": "Password confirmation does not match."}

    def test_edit_does_not_require_password(self):
        data = _payload()
        del data["password"]
        del data["passwordConfirmation"]
        assert validate_employee_data(data, EDIT) == {}

    def test_edit_still_requires_gender(self):
        errors = validate_employee_data(_payload(gender=None), EDIT)
        assert "gender" in errors

    def test_gender_must_be_a_string(self):
        errors = validate_employee_data(_payload(gender=["Male"]), CREATE)
        assert errors == {"gender": "Gender must be a string."}

    def test_gender_name_too_long(self):
        errors = validate_employee_data(_payload(gender="x" * 256), CREATE)
        assert errors == {"gender": "Gender cannot be longer than 255 characters."}

    def test_empty_payload_reports_every_field(self):
        errors = validate_employee_data({}, CREATE)
        assert set(errors) == {
            "firstName",
            "lastName",
            "email",
            "birthdate",
            "gender",
            "password",
            "passwordConfirmation",
        }


class TestCheckPassword:
    def test_ok(self):
        assert check_password("12345678", "12345678") == {}

    def test_too_short(self):
        assert "password" in check_password("1234567")

    def test_mismatch_reported_first(self):
        assert check_password("short", "other") == {
            "passwordConfirmation": "Password confirmation does not match."
        }


class TestValidateEmployee:
    def _employee(self, db, **overrides):
        fields = dict(
            first_name="Jan",
            last_name="Kowalski",
            email="jan@company.com",
            birthdate=date(1990, 1, 1),
            pesel="90010100009",
            password="hash",
            gender=db.query(Gender).filter(Gender.name == "Male").one(),
        )
        fields.update(overrides)
        return Employee(**fields)

    def test_valid_entity(self, db):
        repo = EmployeeRepository(db)
        employee = self._employee(db)
        assert validate_employee(employee, CREATE, repo, plain_password="s3cretpassword") == {}

    def test_future_birthdate(self, db):
        repo = EmployeeRepository(db)
        employee = self._employee(db, birthdate=date.today() + timedelta(days=1))
        errors = validate_employee(employee, CREATE, repo, plain_password="s3cretpassword")
        assert errors == {"birthdate": "Birthdate cannot be in the future."}

    def test_today_is_allowed(self, db):
        repo = EmployeeRepository(db)
        employee = self._employee(db, birthdate=date.today())
        assert validate_employee(employee, CREATE, repo, plain_password="s3cretpassword") == {}

    def test_invalid_email(self, db):
        repo = EmployeeRepository(db)
        employee = self._employee(db, email="not-an-email")
        errors = validate_employee(employee, CREATE, repo, plain_password="s3cretpassword")
        assert errors == {"email": "This value is not a valid email address."}

    def test_duplicate_email_and_pesel(self, db):
        repo = EmployeeRepository(db)
        employee = self._employee(db, email=ADMIN_EMAIL, pesel=ADMIN_PESEL)
        errors = validate_employee(employee, CREATE, repo, plain_password="s3cretpassword")
        assert set(errors) == {"email", "pesel"}

    def test_own_email_allowed_on_edit(self, db):
        repo = EmployeeRepository(db)
        admin = repo.find_by_email(ADMIN_EMAIL)
        assert validate_employee(admin, EDIT, repo) == {}

    def test_name_too_long(self, db):
        repo = EmployeeRepository(db)
        employee = self._employee(db, first_name="x" * 101)
        errors = validate_employee(employee, CREATE, repo, plain_password="s3cretpassword")
        assert errors == {"firstName": "First name cannot be longer than 100 characters."}

    def test_create_group_requires_plain_password(self, db):
        repo = EmployeeRepository(db)
        employee = self._employee(db)
        errors = validate_employee(employee, CREATE, repo)
        assert errors == {"password": "Password should not be blank."}

    def test_short_password(self, db):
        repo = EmployeeRepository(db)
        employee = self._employee(db)
        errors = validate_employee(employee, EDIT, repo, plain_password="short")
        assert errors == {"password": "Password must be at least 8 characters long."}
