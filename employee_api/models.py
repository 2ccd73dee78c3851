"""SQLAlchemy database models."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Gender(Base):
    """Gender model. Rows are created lazily from submitted names."""
    __tablename__ = "gender"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    code = Column(String(1), nullable=False)


class Employee(Base):
    """Employee model."""
    __tablename__ = "employee"

    id = Column(Integer, primary_key=True, index=True)
    gender_id = Column(Integer, ForeignKey("gender.id"), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    birthdate = Column(Date, nullable=False)
    pesel = Column(String(11), nullable=False, unique=True)

    # One-directional: employees of a gender are fetched through the repository.
    gender = relationship("Gender", lazy="joined")
