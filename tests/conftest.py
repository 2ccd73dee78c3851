"""Shared fixtures: a file-backed SQLite database and an authenticated client."""

import os
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point the app at the test database before it is imported
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"

from employee_api.database import get_db, seed_genders
from employee_api.main import app
from employee_api.models import Base, Employee, Gender
from employee_api.security import hash_password

TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_EMAIL = "admin@company.com"
ADMIN_PASSWORD = "admin-password"
ADMIN_PESEL = "44051401458"


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    """Create fresh tables with seeded genders and one login account."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    seed_genders(db)
    male = db.query(Gender).filter(Gender.name == "Male").one()
    db.add(
        Employee(
            first_name="Admin",
            last_name="Account",
            email=ADMIN_EMAIL,
            password=hash_password(ADMIN_PASSWORD),
            birthdate=date(1944, 5, 14),
            pesel=ADMIN_PESEL,
            gender=male,
        )
    )
    db.commit()
    db.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers(client):
    r = client.post("/api/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}
