"""Persistence port for employees and genders over a SQLAlchemy session."""

import logging
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from employee_api.models import Employee, Gender

logger = logging.getLogger("employee_api.repository")

# Public (wire) field name -> sortable column
SORTABLE_FIELDS = {
    "id": Employee.id,
    "firstName": Employee.first_name,
    "lastName": Employee.last_name,
    "email": Employee.email,
    "birthdate": Employee.birthdate,
    "pesel": Employee.pesel,
    "gender": Gender.name,
}


class EmployeeRepository:
    """All queries the employee service needs, bound to one session."""

    def __init__(self, db: Session):
        self.db = db

    # --- Employees ---

    def get(self, employee_id: int) -> Optional[Employee]:
        return self.db.get(Employee, employee_id)

    def find_by_email(self, email: str) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.email == email).first()

    def find_by_pesel(self, pesel: str) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.pesel == pesel).first()

    def find_by_gender_id(self, gender_id: int) -> list[Employee]:
        return (
            self.db.query(Employee)
            .filter(Employee.gender_id == gender_id)
            .order_by(Employee.id)
            .all()
        )

    def count_by_gender_id(self, gender_id: int) -> int:
        return self.db.query(Employee).filter(Employee.gender_id == gender_id).count()

    def add(self, employee: Employee) -> None:
        self.db.add(employee)

    def search(
        self,
        criteria: dict[str, str],
        order_by: Sequence[tuple[str, str]],
        page_size: int,
        current_page: int,
    ) -> tuple[list[Employee], int]:
        """Filter, sort and slice employees.

        ``criteria`` holds equality filters keyed by wire field name
        (``firstName``, ``lastName``, ``email``, ``gender``); ``order_by`` is a
        sequence of ``(field, "ASC" | "DESC")`` pairs already checked against
        ``SORTABLE_FIELDS``. Returns the page of rows and the total match count.
        """
        query = self.db.query(Employee).join(Gender, Employee.gender_id == Gender.id)

        if criteria.get("firstName"):
            query = query.filter(Employee.first_name == criteria["firstName"])
        if criteria.get("lastName"):
            query = query.filter(Employee.last_name == criteria["lastName"])
        if criteria.get("email"):
            query = query.filter(Employee.email == criteria["email"])
        if criteria.get("gender"):
            query = query.filter(Gender.name == criteria["gender"])

        total = query.count()

        for field, direction in order_by:
            column = SORTABLE_FIELDS[field]
            query = query.order_by(column.desc() if direction == "DESC" else column.asc())
        # Stable tie-break for equal sort keys
        query = query.order_by(Employee.id.asc())

        items = query.offset(page_size * (current_page - 1)).limit(page_size).all()
        return items, total

    # --- Genders ---

    def list_genders(self) -> list[Gender]:
        return self.db.query(Gender).order_by(Gender.id).all()

    def find_gender_by_name(self, name: str) -> Optional[Gender]:
        return self.db.query(Gender).filter(Gender.name == name).first()

    def get_or_create_gender(self, name: str) -> Gender:
        """Return the gender called ``name``, creating it when missing.

        The lookup and insert are not atomic. A concurrent insert of the same
        name trips the unique constraint on ``gender.name``; the session is
        rolled back once and the winner's row is read instead. Call this before
        mutating any other object in the session.
        """
        gender = self.find_gender_by_name(name)
        if gender is not None:
            return gender

        gender = Gender(name=name, code=name[:1].upper()[:1])
        self.db.add(gender)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Gender %r created concurrently, re-reading", name)
            gender = self.find_gender_by_name(name)
            if gender is None:
                raise
            return gender
        logger.info("Created gender name=%s code=%s", gender.name, gender.code)
        return gender

    # --- Unit of work ---

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, instance) -> None:
        self.db.refresh(instance)
