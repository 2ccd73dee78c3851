"""Database configuration and session management."""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from employee_api.config import settings
from employee_api.models import Base, Gender

logger = logging.getLogger("employee_api.database")

# Only use check_same_thread for SQLite
connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Default genders to seed on first run
DEFAULT_GENDERS = [
    {"name": "Male", "code": "M"},
    {"name": "Female", "code": "F"},
]


def init_db() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def seed_genders(db: Session) -> None:
    """Seed default genders if table is empty."""
    if db.query(Gender).count() == 0:
        for gender_data in DEFAULT_GENDERS:
            db.add(Gender(**gender_data))
        db.commit()
        logger.info("Seeded %d genders", len(DEFAULT_GENDERS))


def get_db():
    """Dependency to get a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
