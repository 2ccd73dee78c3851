"""Sample data for local development.

Run with ``python -m employee_api.fixtures`` to fill an empty database.
"""

import logging
import random
from datetime import date

from sqlalchemy.orm import Session

from employee_api.database import DEFAULT_GENDERS, SessionLocal, init_db
from employee_api.models import Employee, Gender
from employee_api.pesel import control_digit
from employee_api.security import hash_password

logger = logging.getLogger("employee_api.fixtures")

FIXTURE_PASSWORD = "testpassword"
FIXTURE_BIRTHDATE = date(1990, 1, 1)


def generate_pesel(rng: random.Random, taken: set[str]) -> str:
    """Random PESEL with a correct control digit, not already in ``taken``."""
    while True:
        first_ten = "".join(str(rng.randint(0, 9)) for _ in range(10))
        pesel = first_ten + str(control_digit(first_ten))
        if pesel not in taken:
            taken.add(pesel)
            return pesel


def load_fixtures(db: Session, count: int = 100, seed: int | None = None) -> int:
    """Create the default genders and ``count`` employees.

    Does nothing when employees already exist. Returns the number created.
    """
    if db.query(Employee).count() > 0:
        logger.info("Employees already present, skipping fixtures")
        return 0

    genders = {}
    for gender_data in DEFAULT_GENDERS:
        gender = db.query(Gender).filter(Gender.name == gender_data["name"]).first()
        if gender is None:
            gender = Gender(**gender_data)
            db.add(gender)
        genders[gender_data["code"]] = gender

    rng = random.Random(seed)
    taken: set[str] = set()
    # One hash shared by every fixture account keeps loading fast.
    password_hash = hash_password(FIXTURE_PASSWORD)

    for i in range(1, count + 1):
        db.add(
            Employee(
                first_name=f"TestFirstName {i}",
                last_name=f"TestLastName {i}",
                email=f"test{i}@example.com",
                password=password_hash,
                birthdate=FIXTURE_BIRTHDATE,
                pesel=generate_pesel(rng, taken),
                gender=genders["M"] if i % 2 == 0 else genders["F"],
            )
        )

    db.commit()
    logger.info("Loaded %d fixture employees", count)
    return count


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    session = SessionLocal()
    try:
        load_fixtures(session)
    finally:
        session.close()
