"""Domain errors and their HTTP mapping."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class EmployeeApiError(Exception):
    """Base class for errors surfaced to API clients."""
    status_code = 500

    def __init__(self, message: str = "Internal error"):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"message": self.message}


class ValidationError(EmployeeApiError):
    """Field-keyed validation failure."""
    status_code = 400

    def __init__(self, errors: dict[str, str]):
        super().__init__("Validation failed")
        self.errors = dict(errors)

    def to_body(self) -> dict:
        return self.errors


class NotFoundError(EmployeeApiError):
    """The requested record does not exist."""
    status_code = 404


class AuthenticationError(EmployeeApiError):
    """Missing, invalid or rejected credentials."""
    status_code = 401


async def _handle_api_error(request: Request, exc: EmployeeApiError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to JSON responses."""
    app.add_exception_handler(EmployeeApiError, _handle_api_error)
