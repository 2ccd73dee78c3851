"""Pydantic models for request/response validation."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from employee_api.models import Employee, Gender


class CamelModel(BaseModel):
    """Serializes snake_case attributes under camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Auth Models ---

class LoginRequest(BaseModel):
    """Credentials for obtaining a bearer token."""
    email: str = Field(..., examples=["jan.kowalski@company.com"])
    password: str = Field(..., examples=["s3cretpassword"])


class TokenResponse(BaseModel):
    token: str


# --- Employee Models ---

class EmployeePayload(CamelModel):
    """Documented shape of the create/edit body.

    Bodies are validated field by field by the service so that every problem
    comes back keyed by field name; this model only feeds the OpenAPI schema.
    """
    first_name: str = Field(..., examples=["Jan"])
    last_name: str = Field(..., examples=["Kowalski"])
    email: str = Field(..., examples=["jan.kowalski@company.com"])
    birthdate: str = Field(..., examples=["1944-05-14"], description="YYYY-MM-DD")
    gender: str = Field(..., examples=["Male"], description="Gender name, created when unknown")
    pesel: str = Field(..., examples=["44051401458"])
    password: str | None = Field(None, examples=["s3cretpassword"])
    password_confirmation: str | None = Field(None, examples=["s3cretpassword"])


class EmployeeResponse(CamelModel):
    """Schema for employee response."""
    id: int
    first_name: str
    last_name: str
    email: str
    birthdate: date
    gender: str
    pesel: str

    @classmethod
    def from_employee(cls, employee: Employee) -> "EmployeeResponse":
        return cls(
            id=employee.id,
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            birthdate=employee.birthdate,
            gender=employee.gender.name,
            pesel=employee.pesel,
        )


class EmployeeListResponse(CamelModel):
    """Paginated list of employees."""
    data: list[EmployeeResponse]
    current_page: int
    total_items: int
    items_per_page: int


# --- Gender Models ---

class GenderResponse(CamelModel):
    """Schema for gender response."""
    id: int
    name: str
    code: str
    employee_count: int = 0

    @classmethod
    def from_gender(cls, gender: Gender, employee_count: int) -> "GenderResponse":
        return cls(id=gender.id, name=gender.name, code=gender.code, employee_count=employee_count)


# --- Health Check ---

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "1.0.0"
    timestamp: datetime


# --- Message Models ---

class MessageResponse(BaseModel):
    """Acknowledgement or error message."""
    message: str


class CreatedResponse(MessageResponse):
    id: int
