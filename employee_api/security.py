"""Password hashing, bearer tokens and the current-user dependency."""

import hashlib
import hmac
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from employee_api.config import settings
from employee_api.database import get_db
from employee_api.errors import AuthenticationError
from employee_api.models import Employee
from employee_api.repository import EmployeeRepository

logger = logging.getLogger("employee_api.auth")

HASH_SCHEME = "pbkdf2_sha256"

bearer_scheme = HTTPBearer(auto_error=False)


def _pbkdf2(password: str, salt: str, iterations: int) -> str:
    raw = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    )
    return raw.hex()


def hash_password(password: str) -> str:
    """Hash a plaintext password as ``scheme$iterations$salt$digest``."""
    iterations = settings.PASSWORD_HASH_ITERATIONS
    salt = secrets.token_hex(16)
    return f"{HASH_SCHEME}${iterations}${salt}${_pbkdf2(password, salt, iterations)}"


def verify_password(password: str, stored_hash: Optional[str]) -> bool:
    if not password or not stored_hash:
        return False
    try:
        scheme, iterations, salt, digest = stored_hash.split("$", 3)
        iterations = int(iterations)
    except ValueError:
        return False
    if scheme != HASH_SCHEME:
        return False
    return hmac.compare_digest(_pbkdf2(password, salt, iterations), digest)


def create_access_token(employee: Employee) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": str(employee.id),
        "email": employee.email,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify a bearer token, raising AuthenticationError on failure."""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired.")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token.")


def authenticate(db: Session, email: str, password: str) -> Employee:
    """Return the employee matching the credentials or raise AuthenticationError."""
    employee = EmployeeRepository(db).find_by_email(email)
    if employee is None:
        logger.warning("Login failed email=%s reason=unknown_email", email)
        raise AuthenticationError("Invalid credentials.")
    if not verify_password(password, employee.password):
        logger.warning("Login failed email=%s reason=invalid_password", email)
        raise AuthenticationError("Invalid credentials.")
    logger.info("Login success email=%s employee_id=%s", email, employee.id)
    return employee


def get_current_employee(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Employee:
    """Dependency guarding protected routes."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Authentication required.")
    payload = decode_access_token(credentials.credentials)
    try:
        employee_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid token.")
    employee = EmployeeRepository(db).get(employee_id)
    if employee is None:
        raise AuthenticationError("User for this token no longer exists.")
    return employee
